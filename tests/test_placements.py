# tests/test_placements.py
import logging

from sleeper_dash.logic.placements import derive_final_placements
from sleeper_dash.schemas import SleeperBracketMatch


def _match(**kw):
    return SleeperBracketMatch(**kw)


def test_championship_match_places_winner_first():
    placements = derive_final_placements([_match(r=3, m=7, p=1, w=5, l=3)], [], 6)
    assert placements == {5: 1, 3: 2}


def test_losers_bracket_is_offset_by_playoff_teams():
    winners = [_match(p=1, w=1, l=2), _match(p=3, w=3, l=4), _match(p=5, w=5, l=6)]
    losers = [_match(p=1, w=7, l=8), _match(p=3, w=9, l=10)]
    placements = derive_final_placements(winners, losers, 6)
    assert placements == {1: 1, 2: 2, 3: 3, 4: 4, 5: 5, 6: 6, 7: 7, 8: 8, 9: 9, 10: 10}


def test_intermediate_and_undecided_matches_are_skipped():
    winners = [
        _match(r=1, m=1, w=1, l=2),  # no placement slot
        _match(r=3, m=7, p=1, w=None, l=None),  # not played yet
        _match(r=3, m=8, p=3, w=4, l=None),
    ]
    assert derive_final_placements(winners, [], 6) == {}


def test_empty_brackets_give_empty_map():
    assert derive_final_placements([], [], 6) == {}


def test_conflicting_claims_last_write_wins(caplog):
    winners = [_match(p=1, w=1, l=2), _match(p=3, w=1, l=3)]
    with caplog.at_level(logging.WARNING, logger="sleeper_dash.placements"):
        placements = derive_final_placements(winners, [], 4)
    assert placements[1] == 3
    assert placements[2] == 2
    assert "placed twice" in caplog.text
