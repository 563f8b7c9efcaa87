# sleeper_dash/logic/rankings.py
from __future__ import annotations

import math
from typing import List, Mapping, Sequence, Tuple

from .. import schemas
from ..config import DEFAULT_RANKING_CONFIG, RankingConfig, Tiebreaker
from ..utils.num import round_half_up
from .identity import manager_member, users_by_id


def power_score(stats: schemas.AccumulatedStats, max_pf: float, config: RankingConfig) -> float:
    """
    (win_pct * W1 + normalized_pf * W2) * 100, one decimal.
    `max_pf` is the league-best PF, already floored at 1.
    """
    games = stats.wins + stats.losses + stats.ties
    win_pct = stats.wins / games if games > 0 else 0.0
    normalized_pf = stats.points_for / max_pf
    raw = (win_pct * config.win_pct_weight + normalized_pf * config.normalized_pf_weight) * 100
    return round_half_up(raw, 1)


def _standing_key(config: RankingConfig):
    def key(row: schemas.ManagerRanking) -> Tuple[float, ...]:
        tb = row.points_against if config.tiebreaker == Tiebreaker.POINTS_AGAINST else 0.0
        return (-row.wins, -row.points_for, -tb)

    return key


def compute_rankings(
    stats: Sequence[schemas.AccumulatedStats],
    rosters: Sequence[schemas.SleeperRoster],
    users: Sequence[schemas.SleeperUser],
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
    final_placements: Mapping[int, int] | None = None,
) -> List[schemas.ManagerRanking]:
    """
    Rank managers.

    With final bracket placements (completed season): sort by place, unplaced last.
    Otherwise: wins desc -> PF desc -> configured tiebreaker desc. The sort is
    stable, so teams identical on every key keep their input order.
    """
    by_user = users_by_id(users)
    by_roster = {r.roster_id: r for r in rosters}

    max_pf = max([s.points_for for s in stats] + [1.0])

    rows: List[schemas.ManagerRanking] = []
    for s in stats:
        roster = by_roster.get(s.roster_id)
        user = by_user.get(roster.owner_id or "") if roster else None
        member = manager_member(s.roster_id, roster, user)
        rows.append(
            schemas.ManagerRanking(
                **member.model_dump(),
                rank=0,
                power_score=power_score(s, max_pf, config),
                wins=s.wins,
                losses=s.losses,
                ties=s.ties,
                points_for=round_half_up(s.points_for, 2),
                points_against=round_half_up(s.points_against, 2),
            )
        )

    if final_placements:
        rows.sort(key=lambda r: final_placements.get(r.roster_id, math.inf))
    else:
        rows.sort(key=_standing_key(config))

    for i, r in enumerate(rows, start=1):
        r.rank = i
    return rows
