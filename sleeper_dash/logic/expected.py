# sleeper_dash/logic/expected.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .. import schemas
from ..schemas import ExpectedScope
from ..utils.num import is_finite, round_half_up
from .stats import group_pairs

REASON_NO_COMPLETED_WEEK = "Expected Record requires at least one completed week."
REASON_NO_DATA_FOR_SCOPE = "Expected Record matchup data is unavailable for this scope."
REASON_NO_SCORES = "Expected Record matchup scores are not available yet."


@dataclass
class ExpectedRecordComputation:
    by_roster: Dict[int, schemas.RosterExpectation] = field(default_factory=dict)
    available: bool = False
    reason: Optional[str] = None


def expected_scope_label(scope: ExpectedScope) -> str:
    return "Selected Week" if scope == ExpectedScope.SELECTED_WEEK else "Season-to-Date"


def _zeroed(rosters: Sequence[schemas.SleeperRoster]) -> Dict[int, schemas.RosterExpectation]:
    return {r.roster_id: schemas.RosterExpectation() for r in rosters}


def _week_range(scope: ExpectedScope, through_week: int, weeks_available: int) -> range:
    start = through_week - 1 if scope == ExpectedScope.SELECTED_WEEK else 0
    end = min(through_week, weeks_available)  # exclusive
    return range(start, end)


def compute_expected_records(
    rosters: Sequence[schemas.SleeperRoster],
    matchups_by_week: Sequence[Sequence[schemas.SleeperMatchup]],
    through_week: int,
    scope: ExpectedScope = ExpectedScope.SEASON_TO_DATE,
) -> ExpectedRecordComputation:
    """
    All-play expected record: every week, each team is compared against every
    other team's score, not only its scheduled opponent.

    Per week, a team's all-play wins/losses/ties are divided by the number of
    virtual opponents (valid entries - 1) so every week weighs the same, then
    summed across the scope. Exact ties split 0.5/0.5 and count one tie each.

    Actual wins come from the real head-to-head pairings over the same weeks
    and feed `delta_vs_expected` (positive = won more than the scores justify).

    Never raises: empty or unusable input comes back with available=False and a reason.
    """
    if through_week < 1:
        return ExpectedRecordComputation(_zeroed(rosters), False, REASON_NO_COMPLETED_WEEK)

    weeks = _week_range(scope, through_week, len(matchups_by_week))
    if len(weeks) == 0:
        return ExpectedRecordComputation(_zeroed(rosters), False, REASON_NO_DATA_FOR_SCOPE)

    known = {r.roster_id for r in rosters}
    exp_w: Dict[int, float] = {rid: 0.0 for rid in known}
    exp_l: Dict[int, float] = {rid: 0.0 for rid in known}
    exp_t: Dict[int, float] = {rid: 0.0 for rid in known}
    actual_wins: Dict[int, int] = {rid: 0 for rid in known}
    comparisons = 0

    for week_index in weeks:
        week = matchups_by_week[week_index] or []
        valid = [m for m in week if is_finite(m.points) and m.roster_id is not None]

        # weekly all-play tallies, keyed by roster
        w: Dict[int, float] = {m.roster_id: 0.0 for m in valid}
        l: Dict[int, float] = {m.roster_id: 0.0 for m in valid}  # noqa: E741
        t: Dict[int, float] = {m.roster_id: 0.0 for m in valid}

        for i, a in enumerate(valid):
            for b in valid[i + 1 :]:
                comparisons += 1
                if a.points > b.points:
                    w[a.roster_id] += 1
                    l[b.roster_id] += 1
                elif b.points > a.points:
                    w[b.roster_id] += 1
                    l[a.roster_id] += 1
                else:
                    for rid in (a.roster_id, b.roster_id):
                        w[rid] += 0.5
                        l[rid] += 0.5
                        t[rid] += 1

        opponents = len(valid) - 1
        if opponents > 0:
            for rid in w:
                if rid not in known:
                    continue
                exp_w[rid] += w[rid] / opponents
                exp_l[rid] += l[rid] / opponents
                exp_t[rid] += t[rid] / opponents

        for a, b in group_pairs(week):
            if not (is_finite(a.points) and is_finite(b.points)):
                continue
            if a.points > b.points and a.roster_id in known:
                actual_wins[a.roster_id] += 1
            elif b.points > a.points and b.roster_id in known:
                actual_wins[b.roster_id] += 1

    if comparisons == 0:
        return ExpectedRecordComputation(_zeroed(rosters), False, REASON_NO_SCORES)

    by_roster: Dict[int, schemas.RosterExpectation] = {}
    for r in rosters:
        rid = r.roster_id
        games = exp_w[rid] + exp_l[rid]
        wins = round_half_up(exp_w[rid], 1)
        by_roster[rid] = schemas.RosterExpectation(
            expected_record=schemas.ExpectedRecordLine(
                wins=wins,
                losses=round_half_up(exp_l[rid], 1),
                ties=round_half_up(exp_t[rid], 1),
            ),
            actual_wins=actual_wins[rid],
            delta_vs_expected=round_half_up(actual_wins[rid] - exp_w[rid], 1),
            all_play_win_pct=round_half_up(wins / games, 3) if games > 0 else 0.0,
        )

    return ExpectedRecordComputation(by_roster, True, None)


def apply_expected_records(
    rankings: List[schemas.ManagerRanking], computation: ExpectedRecordComputation
) -> List[schemas.ManagerRanking]:
    """Copy of `rankings` with the expected-record fields filled in (only when available)."""
    if not computation.available:
        return list(rankings)
    out: List[schemas.ManagerRanking] = []
    for row in rankings:
        exp = computation.by_roster.get(row.roster_id)
        if exp is None:
            out.append(row)
            continue
        out.append(
            row.model_copy(
                update={
                    "expected_record": exp.expected_record.model_copy(),
                    "delta_vs_expected": exp.delta_vs_expected,
                    "all_play_win_pct": exp.all_play_win_pct,
                }
            )
        )
    return out
