# sleeper_dash/logic/stats.py
from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence, TypedDict

from .. import schemas
from ..utils.num import to_float


# Mutable accumulator; frozen AccumulatedStats are built from it at the end.
class _StatRow(TypedDict):
    roster_id: int
    wins: int
    losses: int
    ties: int
    points_for: float
    points_against: float


def group_pairs(week: Sequence[schemas.SleeperMatchup]) -> List[List[schemas.SleeperMatchup]]:
    """
    Group one week's entries by matchup_id and keep only true head-to-head pairs.
    Groups of 1 (byes) or more than 2 are dropped, as are entries with no matchup_id.
    Pairs come back in first-seen order.
    """
    groups: Dict[int, List[schemas.SleeperMatchup]] = defaultdict(list)
    for m in week:
        if m.matchup_id is None:
            continue
        groups[m.matchup_id].append(m)
    return [g for g in groups.values() if len(g) == 2]


def _season_totals(roster: schemas.SleeperRoster) -> schemas.AccumulatedStats:
    s = roster.settings
    return schemas.AccumulatedStats(
        roster_id=roster.roster_id,
        wins=int(s.wins or 0),
        losses=int(s.losses or 0),
        ties=int(s.ties or 0),
        points_for=to_float(s.fpts) + to_float(s.fpts_decimal) / 100,
        points_against=to_float(s.fpts_against) + to_float(s.fpts_against_decimal) / 100,
    )


def accumulate_stats(
    rosters: Sequence[schemas.SleeperRoster],
    matchups_by_week: Sequence[Sequence[schemas.SleeperMatchup]],
    through_week: int,
) -> List[schemas.AccumulatedStats]:
    """
    Fold weekly head-to-head results into W/L/T and PF/PA per roster through `through_week`.

    With no weekly data (pre-season, or week 0 requested) the rosters' own
    season-to-date totals are used so the leaderboard still renders.
    One entry per input roster, in input order.
    """
    if not matchups_by_week or through_week <= 0:
        return [_season_totals(r) for r in rosters]

    stat: Dict[int, _StatRow] = {
        r.roster_id: _StatRow(
            roster_id=r.roster_id,
            wins=0,
            losses=0,
            ties=0,
            points_for=0.0,
            points_against=0.0,
        )
        for r in rosters
    }

    for week in matchups_by_week[: min(through_week, len(matchups_by_week))]:
        for a, b in group_pairs(week):
            sa = stat.get(a.roster_id) if a.roster_id is not None else None
            sb = stat.get(b.roster_id) if b.roster_id is not None else None
            if sa is None or sb is None:
                continue

            ap = to_float(a.points)
            bp = to_float(b.points)
            sa["points_for"] += ap
            sa["points_against"] += bp
            sb["points_for"] += bp
            sb["points_against"] += ap

            if ap > bp:
                sa["wins"] += 1
                sb["losses"] += 1
            elif bp > ap:
                sb["wins"] += 1
                sa["losses"] += 1
            else:
                sa["ties"] += 1
                sb["ties"] += 1

    return [schemas.AccumulatedStats(**row) for row in stat.values()]
