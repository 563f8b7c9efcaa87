# tests/test_recap_builder.py
from sleeper_dash.logic.recap import build_highlights, build_manager_context_packs, build_recap_matchups
from sleeper_dash.schemas import SleeperMatchup, SleeperRoster, SleeperTransaction, SleeperUser

ROSTERS = [SleeperRoster(roster_id=i, owner_id=f"u{i}") for i in range(1, 5)]
USERS = [
    SleeperUser(user_id="u1", display_name="alice", metadata={"team_name": "Alpha Dogs"}),
    SleeperUser(user_id="u2", display_name="bob"),
    SleeperUser(user_id="u3", display_name="carol", metadata={"team_name": "Cobras"}),
    SleeperUser(user_id="u4", display_name="dave"),
]


def _m(roster_id, matchup_id, points, **kw):
    return SleeperMatchup(roster_id=roster_id, matchup_id=matchup_id, points=points, **kw)


def _tags(card):
    return [t.type for t in card.tags]


def test_cards_pair_by_matchup_id_with_winner_and_margin():
    week = [_m(2, 2, 140), _m(1, 1, 110), _m(4, 2, 80), _m(3, 1, 95), _m(5, 3, 70)]
    cards = build_recap_matchups(ROSTERS, USERS, week)
    assert [c.matchup_id for c in cards] == [1, 2]

    first = cards[0]
    assert (first.a.team_name, first.b.team_name) == ("Alpha Dogs", "Cobras")
    assert first.winner_roster_id == 1
    assert first.margin == 15.0
    assert first.summary == "Alpha Dogs beat Cobras 110.00-95.00 (margin 15.00)."
    assert _tags(first) == []

    second = cards[1]
    assert second.winner_roster_id == 2
    assert _tags(second) == ["blowout", "top_score"]


def test_tags_for_close_high_low_and_tied_games():
    week = [
        _m(1, 1, 101), _m(2, 1, 99),  # nail-biter
        _m(3, 2, 160), _m(4, 2, 150),  # shootout
    ]
    cards = build_recap_matchups(ROSTERS, USERS, week)
    assert _tags(cards[0]) == ["nail_biter"]
    assert _tags(cards[1]) == ["shootout", "top_score"]

    low = build_recap_matchups(ROSTERS, USERS, [_m(1, 1, 70), _m(2, 1, 60)])
    assert _tags(low[0]) == ["slugfest", "top_score"]

    tied = build_recap_matchups(ROSTERS, USERS, [_m(1, 1, 100), _m(2, 1, 100)])
    assert tied[0].winner_roster_id is None
    assert tied[0].margin == 0.0
    assert _tags(tied[0])[0] == "tie"
    assert tied[0].summary == "Alpha Dogs and bob tied at 100.00."


def test_highlights_blowout_closest_and_top_score():
    week = [_m(1, 1, 110), _m(3, 1, 95), _m(2, 2, 140), _m(4, 2, 80)]
    highlights = build_highlights(build_recap_matchups(ROSTERS, USERS, week))
    assert [h.type for h in highlights] == ["blowout", "closest", "top_score"]

    blowout, closest, top = highlights
    assert (blowout.matchup_id, blowout.winner_name, blowout.loser_name) == (2, "bob", "dave")
    assert blowout.value_label == "by 60.00"
    assert (closest.matchup_id, closest.value_label) == (1, "by 15.00")
    assert (top.winner_score, top.value_label) == (140.0, "140.00 pts")


def test_highlights_single_game_and_empty_week():
    cards = build_recap_matchups(ROSTERS, USERS, [_m(1, 1, 100), _m(2, 1, 90)])
    assert [h.type for h in build_highlights(cards)] == ["blowout", "top_score"]
    assert build_highlights([]) == []


def test_context_packs_pick_starters_notes_and_trades():
    week = [
        _m(1, 1, 110, starters=["p1", "p2", "0"], starters_points=[30.5, 12.0, 0]),
        _m(3, 1, 95, starters=["p3"], starters_points=[22.0]),
        _m(2, 2, 140),
    ]
    players = {"p1": {"full_name": "Josh Allen"}, "p2": {"first_name": "Ja'Marr", "last_name": "Chase"}}
    trades = [
        SleeperTransaction(type="trade", status="complete", roster_ids=[1, 3], adds={"p1": 1, "p3": 3}, drops={"p3": 1, "p1": 3}),
        SleeperTransaction(type="trade", status="failed", roster_ids=[1, 2], adds={"p2": 1}),
        SleeperTransaction(type="waiver", status="complete", roster_ids=[1], adds={"p9": 1}),
    ]
    packs = build_manager_context_packs(ROSTERS, week, {"u1": "Talks trash, never sets lineups"}, players, trades)

    alpha = packs[1]
    assert alpha.personality_notes == "Talks trash, never sets lineups"
    assert alpha.weekly_score == 110.0
    assert alpha.starter_count == 2
    assert (alpha.top_starter_name, alpha.top_starter_score) == ("Josh Allen", 30.5)
    assert (alpha.bottom_starter_name, alpha.bottom_starter_score) == ("Ja'Marr Chase", 12.0)
    assert len(alpha.trades) == 1
    assert alpha.trades[0].acquired_players == ["Josh Allen"]
    assert alpha.trades[0].dropped_players == ["p3"]  # not in the catalog: falls back to the id

    cobras = packs[3]
    assert cobras.trades[0].acquired_players == ["p3"]
    assert cobras.trades[0].dropped_players == ["Josh Allen"]

    bye = packs[2]
    assert (bye.starter_count, bye.top_starter_name, bye.personality_notes) == (0, "unknown", "")
