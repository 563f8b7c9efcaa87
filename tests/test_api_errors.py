# tests/test_api_errors.py
from sleeper_dash.routers.errors import api_error
from sleeper_dash.services.league_context import SeasonNotFoundError
from sleeper_dash.services.sleeper import SleeperAPIError
from sleeper_dash.utils import api


def test_not_found_messages_map_to_404():
    exc = api_error(SeasonNotFoundError("1999"))
    assert exc.status_code == 404
    assert exc.detail == "Season 1999 not found"


def test_other_failures_map_to_500():
    exc = api_error(SleeperAPIError("Sleeper API /league/X responded with 503", "/league/X", 503))
    assert exc.status_code == 500
    assert api_error(RuntimeError("")).detail == "Unknown error"


def test_request_helpers_do_not_carry_error_mapping():
    assert not hasattr(api, "HANDLED_ERRORS")
    assert api.resolve_league_id("  L9 ") == "L9"
    assert api.clean_season("  ") is None
