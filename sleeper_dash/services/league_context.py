# sleeper_dash/services/league_context.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from .. import schemas
from ..config import NFL_REGULAR_SEASON_WEEKS
from ..logic.identity import build_league_members, resolve_avatar_url
from .sleeper import SleeperAPIError, SleeperClient

logger = logging.getLogger("sleeper_dash.league_context")


class SeasonNotFoundError(LookupError):
    def __init__(self, season: str):
        super().__init__(f"Season {season} not found")
        self.season = season


@dataclass
class LeagueHistoryEntry:
    league_id: str
    league: schemas.SleeperLeague


@dataclass
class ResolvedLeagueContext:
    league: schemas.LeagueInfo
    members: List[schemas.LeagueMember]
    available_seasons: List[str]
    rosters: List[schemas.SleeperRoster] = field(default_factory=list)
    users: List[schemas.SleeperUser] = field(default_factory=list)
    raw_league: schemas.SleeperLeague | None = None

    def to_out(self) -> schemas.LeagueContextOut:
        return schemas.LeagueContextOut(
            league=self.league, members=self.members, available_seasons=self.available_seasons
        )


def get_league_history(client: SleeperClient, start_league_id: str) -> List[LeagueHistoryEntry]:
    """
    Follow `previous_league_id` back through prior seasons, newest first.
    A failure on the starting league propagates; a failure further back just
    ends the walk. Cycles in the chain are cut by the visited set.
    """
    history: List[LeagueHistoryEntry] = []
    visited: set[str] = set()
    current: str | None = start_league_id

    while current and current not in visited:
        visited.add(current)
        try:
            league = client.get_league(current)
        except SleeperAPIError as exc:
            if not history:
                raise
            logger.warning("league history walk stopped at %s: %s", current, exc)
            break
        history.append(LeagueHistoryEntry(league_id=current, league=league))
        current = league.previous_league_id or None

    return history


def to_league_info(
    league_id: str,
    league: schemas.SleeperLeague,
    nfl_season: str,
    nfl_leg: int,
) -> schemas.LeagueInfo:
    s = league.settings
    total_weeks = s.playoff_week_start - 1 if s.playoff_week_start else NFL_REGULAR_SEASON_WEEKS

    live_week = nfl_leg if league.season == nfl_season and nfl_leg > 0 else 1
    scored_week = s.last_scored_leg or 0
    if scored_week > 0:
        current_week = scored_week
    elif league.status == schemas.LeagueStatus.COMPLETE.value:
        current_week = total_weeks
    else:
        current_week = live_week

    return schemas.LeagueInfo(
        league_id=league_id,
        name=league.name,
        season=league.season,
        current_week=max(1, current_week),
        total_weeks=total_weeks,
        playoff_week_start=s.playoff_week_start or None,
        status=league.status,
        avatar=resolve_avatar_url(league.avatar),
    )


def get_league_context(
    client: SleeperClient,
    league_id: str,
    season: str | None = None,
) -> ResolvedLeagueContext:
    """
    Resolve the league for `season` (latest when omitted) and load its
    rosters and users. Raises SeasonNotFoundError when no league in the
    history chain matches.
    """
    history = get_league_history(client, league_id)
    nfl_state = client.get_nfl_state()

    if season:
        target = next((h for h in history if h.league.season == season), None)
    else:
        target = history[0] if history else None
    if target is None:
        raise SeasonNotFoundError(season or "")

    rosters = client.get_rosters(target.league_id)
    users = client.get_users(target.league_id)

    info = to_league_info(
        target.league_id,
        target.league,
        str(nfl_state.season or ""),
        int(nfl_state.leg if nfl_state.leg is not None else 1),
    )
    return ResolvedLeagueContext(
        league=info,
        members=build_league_members(rosters, users),
        available_seasons=[h.league.season for h in history],
        rosters=rosters,
        users=users,
        raw_league=target.league,
    )
