# tests/test_league_api.py


def test_league_defaults_to_env_league(client):
    r = client.get("/league")
    assert r.status_code == 200, r.text
    js = r.json()
    assert js["leagueId"] == "L2024"
    assert js["season"] == "2024"
    assert js["currentWeek"] == 2
    assert js["totalWeeks"] == 14
    assert js["playoffWeekStart"] == 15
    assert js["status"] == "in_season"
    assert js["avatar"] == "https://sleepercdn.com/avatars/thumbs/leagueav"


def test_league_for_past_season(client):
    r = client.get("/league", params={"season": "2023"})
    assert r.status_code == 200, r.text
    assert r.json()["leagueId"] == "L2023"
    assert r.json()["status"] == "complete"


def test_league_unknown_season_is_404(client):
    r = client.get("/league", params={"season": "1999"})
    assert r.status_code == 404
    assert r.json()["detail"] == "Season 1999 not found"


def test_unknown_league_is_404(client):
    r = client.get("/league", params={"leagueId": "nope"})
    assert r.status_code == 404
    assert "not found" in r.json()["detail"]


def test_upstream_failure_is_500(client, sleeper_routes):
    from sleeper_dash.services.sleeper import SleeperAPIError

    sleeper_routes["/state/nfl"] = SleeperAPIError("Sleeper API /state/nfl responded with 502", "/state/nfl", 502)
    r = client.get("/league")
    assert r.status_code == 500
    assert r.json()["detail"] == "Sleeper API /state/nfl responded with 502"


def test_context_lists_members_and_seasons(client):
    r = client.get("/context")
    assert r.status_code == 200, r.text
    js = r.json()
    assert js["availableSeasons"] == ["2024", "2023"]
    assert js["league"]["name"] == "Dynasty Degenerates"
    members = js["members"]
    assert [m["rosterId"] for m in members] == [1, 2, 3, 4]
    assert members[0] == {
        "rosterId": 1,
        "userId": "u1",
        "displayName": "alice",
        "teamName": "Alpha Dogs",
        "avatar": "https://sleepercdn.com/avatars/thumbs/av1",
    }


def test_matchups_for_week(client):
    r = client.get("/matchups/1")
    assert r.status_code == 200, r.text
    rows = r.json()
    assert len(rows) == 4
    assert rows[0]["roster_id"] == 1 and rows[0]["points"] == 120.5


def test_matchups_rejects_week_zero(client):
    r = client.get("/matchups/0")
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid week number"


def test_missing_league_id_env_is_500(client, monkeypatch):
    monkeypatch.delenv("SLEEPER_LEAGUE_ID")
    r = client.get("/context")
    assert r.status_code == 500
    assert "SLEEPER_LEAGUE_ID" in r.json()["detail"]
