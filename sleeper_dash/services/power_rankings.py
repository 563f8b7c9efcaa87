# sleeper_dash/services/power_rankings.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from .. import schemas
from ..config import DEFAULT_PLAYOFF_TEAMS, DEFAULT_RANKING_CONFIG, RankingConfig
from ..logic.expected import (
    ExpectedRecordComputation,
    apply_expected_records,
    compute_expected_records,
    expected_scope_label,
)
from ..logic.placements import derive_final_placements
from ..logic.rankings import compute_rankings
from ..logic.stats import accumulate_stats
from .league_context import get_league_context
from .sleeper import SleeperClient

logger = logging.getLogger("sleeper_dash.power_rankings")


class WeekOutOfRangeError(ValueError):
    pass


@dataclass
class RankingsView:
    response: schemas.RankingsResponse
    expected: ExpectedRecordComputation


def parse_scope(raw: str | None) -> schemas.ExpectedScope:
    """Anything other than "selected_week" means season-to-date."""
    if raw == schemas.ExpectedScope.SELECTED_WEEK.value:
        return schemas.ExpectedScope.SELECTED_WEEK
    return schemas.ExpectedScope.SEASON_TO_DATE


def resolve_through_week(league: schemas.SleeperLeague, requested: int | None) -> int:
    if requested is not None:
        return requested
    s = league.settings
    if s.last_scored_leg is not None:
        return s.last_scored_leg
    if s.leg is not None:
        return s.leg
    return 0


def build_rankings_view(
    client: SleeperClient,
    league_id: str,
    season: str | None = None,
    week: int | None = None,
    scope: schemas.ExpectedScope = schemas.ExpectedScope.SEASON_TO_DATE,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> RankingsView:
    """
    Leaderboard through `week` (latest scored week when omitted), decorated with
    all-play expected records when there is enough data.

    Final bracket placements decide the order only for a completed season viewed
    without an explicit week. A `week` past the season raises WeekOutOfRangeError
    before any matchup is fetched.
    """
    ctx = get_league_context(client, league_id, season)
    league = ctx.raw_league
    target_id = ctx.league.league_id
    max_week = max(ctx.league.total_weeks, ctx.league.current_week)
    if week is not None and week > max_week:
        raise WeekOutOfRangeError(f"Week must be between 0 and {max_week}")
    through = resolve_through_week(league, week)

    matchups_by_week = client.get_matchups_through(target_id, through)
    stats = accumulate_stats(ctx.rosters, matchups_by_week, through)

    placements = None
    if league.status == schemas.LeagueStatus.COMPLETE.value and week is None:
        playoff_teams = league.settings.playoff_teams or DEFAULT_PLAYOFF_TEAMS
        placements = derive_final_placements(
            client.get_winners_bracket(target_id),
            client.get_losers_bracket(target_id),
            playoff_teams,
        )
        logger.debug("final placements for %s: %s", target_id, placements)

    rankings = compute_rankings(stats, ctx.rosters, ctx.users, config, placements)
    expected = compute_expected_records(ctx.rosters, matchups_by_week, through, scope)
    rankings = apply_expected_records(rankings, expected)

    response = schemas.RankingsResponse(
        rankings=rankings,
        week=through,
        season=league.season,
        league_name=league.name,
        expected_scope=scope,
        expected_scope_label=expected_scope_label(scope),
        expected_available=expected.available,
        expected_reason=expected.reason,
    )
    return RankingsView(response=response, expected=expected)


def build_luck_rows(rankings: list[schemas.ManagerRanking], expected: ExpectedRecordComputation) -> list[schemas.LuckRow]:
    """Luck = actual wins minus all-play expected wins, luckiest first."""
    if not expected.available:
        return []
    rows = []
    for r in rankings:
        exp = expected.by_roster.get(r.roster_id)
        if exp is None:
            continue
        rows.append(
            schemas.LuckRow(
                roster_id=r.roster_id,
                display_name=r.display_name,
                team_name=r.team_name,
                expected_wins=exp.expected_record.wins,
                actual_wins=exp.actual_wins,
                luck_index=exp.delta_vs_expected,
            )
        )
    rows.sort(key=lambda row: -row.luck_index)
    return rows
