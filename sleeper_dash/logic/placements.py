# sleeper_dash/logic/placements.py
from __future__ import annotations

import logging
from typing import Dict, Sequence

from .. import schemas

logger = logging.getLogger("sleeper_dash.placements")

PlacementMap = Dict[int, int]


def derive_final_placements(
    winners_bracket: Sequence[schemas.SleeperBracketMatch],
    losers_bracket: Sequence[schemas.SleeperBracketMatch],
    playoff_teams: int,
) -> PlacementMap:
    """
    Final standings from playoff brackets: roster_id -> place (1 = champion).

    Only matches carrying a placement slot `p` and a decided winner/loser count:
      - winners bracket: winner -> p, loser -> p + 1
      - losers bracket:  winner -> p + playoff_teams, loser -> p + 1 + playoff_teams
    Intermediate rounds (no `p`) contribute nothing. If two matches claim the
    same roster the later one wins; that case is logged, not rejected.
    """
    placements: PlacementMap = {}

    def _place(roster_id: int, place: int) -> None:
        previous = placements.get(roster_id)
        if previous is not None and previous != place:
            logger.warning(
                "roster %s placed twice by bracket data (%s then %s)", roster_id, previous, place
            )
        placements[roster_id] = place

    for offset, bracket in ((0, winners_bracket), (playoff_teams, losers_bracket)):
        for match in bracket:
            if match.p is None or match.w is None or match.l is None:
                continue
            _place(match.w, match.p + offset)
            _place(match.l, match.p + 1 + offset)

    return placements
