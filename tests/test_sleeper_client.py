# tests/test_sleeper_client.py
import pytest
import requests

from sleeper_dash.services.sleeper import SleeperAPIError, SleeperClient


class _Resp:
    def __init__(self, status, payload=None):
        self.status_code = status
        self.ok = 200 <= status < 300
        self._payload = payload

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _Session:
    """Minimal stand-in for requests.Session: url -> response (or exception)."""

    def __init__(self, responses):
        self.responses = responses
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        value = self.responses.get(url, _Resp(404))
        if isinstance(value, Exception):
            raise value
        return value


BASE = "http://sleeper.test/v1"


def _client(responses):
    session = _Session({f"{BASE}{path}": r for path, r in responses.items()})
    return SleeperClient(base_url=BASE, session=session), session


def test_league_payload_is_parsed_and_extras_kept():
    client, session = _client(
        {"/league/L1": _Resp(200, {"league_id": "L1", "name": "Dynasty", "season": "2024", "settings": {"leg": 4}, "sport": "nfl"})}
    )
    league = client.get_league("L1")
    assert (league.name, league.season, league.settings.leg) == ("Dynasty", "2024", 4)
    assert league.model_extra["sport"] == "nfl"
    assert session.urls == [f"{BASE}/league/L1"]


def test_404_message_says_not_found():
    client, _ = _client({})
    with pytest.raises(SleeperAPIError) as ei:
        client.get_rosters("nope")
    assert "not found" in str(ei.value)
    assert ei.value.status == 404


def test_server_error_message_carries_path_and_status():
    client, _ = _client({"/league/L1/users": _Resp(503)})
    with pytest.raises(SleeperAPIError, match=r"Sleeper API /league/L1/users responded with 503"):
        client.get_users("L1")


def test_transport_errors_are_wrapped():
    client, _ = _client({"/state/nfl": requests.ConnectionError("dns")})
    with pytest.raises(SleeperAPIError) as ei:
        client.get_nfl_state()
    assert ei.value.status is None


def test_null_lists_read_as_empty():
    client, _ = _client({"/league/L1/losers_bracket": _Resp(200, None)})
    assert client.get_losers_bracket("L1") == []


def test_matchups_through_fetches_each_week_in_order():
    responses = {
        f"/league/L1/matchups/{w}": _Resp(200, [{"roster_id": 1, "matchup_id": 1, "points": float(w)}]) for w in range(1, 4)
    }
    client, session = _client(responses)
    weeks = client.get_matchups_through("L1", 3)
    assert [wk[0].points for wk in weeks] == [1.0, 2.0, 3.0]
    assert sorted(session.urls) == sorted(f"{BASE}/league/L1/matchups/{w}" for w in range(1, 4))
    assert client.get_matchups_through("L1", 0) == []


def test_players_are_cached_and_served_stale_on_failure(monkeypatch):
    client, session = _client({"/players/nfl": _Resp(200, {"p1": {"full_name": "Josh Allen"}})})
    assert client.get_players()["p1"]["full_name"] == "Josh Allen"
    client.get_players()
    assert len(session.urls) == 1

    # expire the cache, then break upstream
    client._players_fetched_at -= 10**9
    session.responses[f"{BASE}/players/nfl"] = _Resp(500)
    assert client.get_players()["p1"]["full_name"] == "Josh Allen"
    assert len(session.urls) == 2


def test_players_failure_without_cache_raises():
    client, _ = _client({"/players/nfl": _Resp(500)})
    with pytest.raises(SleeperAPIError):
        client.get_players()
