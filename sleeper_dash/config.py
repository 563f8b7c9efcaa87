# sleeper_dash/config.py
from __future__ import annotations

import enum
import os
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Sleeper API
# ---------------------------------------------------------------------------

SLEEPER_BASE_URL = os.getenv("SLEEPER_BASE_URL", "https://api.sleeper.app/v1")
SLEEPER_CDN_BASE = "https://sleepercdn.com"

# seconds per upstream request
SLEEPER_TIMEOUT = float(os.getenv("SLEEPER_TIMEOUT", "20"))

# parallel weekly matchup fetches
MATCHUP_FETCH_WORKERS = int(os.getenv("SLEEPER_FETCH_WORKERS", "8"))

PLAYERS_CACHE_TTL_SECONDS = 24 * 60 * 60


def get_league_id() -> str:
    """Default league id from env. Every route accepts an explicit leagueId too."""
    league_id = os.getenv("SLEEPER_LEAGUE_ID")
    if not league_id:
        raise RuntimeError("SLEEPER_LEAGUE_ID env var is required")
    return league_id


# ---------------------------------------------------------------------------
# NFL season helpers
# ---------------------------------------------------------------------------

NFL_REGULAR_SEASON_WEEKS = 17
DEFAULT_PLAYOFF_TEAMS = 6


# ---------------------------------------------------------------------------
# Power ranking weights
# ---------------------------------------------------------------------------


class Tiebreaker(str, enum.Enum):
    # higher PA wins the tie: the manager won despite a tougher schedule
    POINTS_AGAINST = "PA"
    NONE = "NONE"


@dataclass(frozen=True)
class RankingConfig:
    """
    Knobs for the power score and the regular-season sort.
    Weights must sum to 1.0 so the power score stays within 0..100.
    """

    win_pct_weight: float = 0.5
    normalized_pf_weight: float = 0.5
    tiebreaker: Tiebreaker = Tiebreaker.POINTS_AGAINST

    def __post_init__(self) -> None:
        if self.win_pct_weight < 0 or self.normalized_pf_weight < 0:
            raise ValueError("Ranking weights must be non-negative")
        if abs(self.win_pct_weight + self.normalized_pf_weight - 1.0) > 1e-9:
            raise ValueError("Ranking weights must sum to 1.0")


DEFAULT_RANKING_CONFIG = RankingConfig()


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


def get_database_url() -> str:
    return os.getenv("DATABASE_URL") or os.getenv("POSTGRES_URL") or "sqlite:///./app.db"


# ---------------------------------------------------------------------------
# Recap writer (OpenAI)
# ---------------------------------------------------------------------------

RECAP_MODEL = os.getenv("RECAP_MODEL", "gpt-4o")
RECAP_MAX_TOKENS = 4500
