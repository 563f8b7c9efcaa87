# sleeper_dash/utils/api.py
from ..config import get_league_id


def resolve_league_id(league_id: str | None) -> str:
    """Explicit league id when given, else SLEEPER_LEAGUE_ID (RuntimeError when unset)."""
    if league_id and league_id.strip():
        return league_id.strip()
    return get_league_id()


def clean_season(season: str | None) -> str | None:
    if season is None:
        return None
    season = season.strip()
    return season or None
