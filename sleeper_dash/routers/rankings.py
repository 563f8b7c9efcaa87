# sleeper_dash/routers/rankings.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from .. import schemas
from ..services.power_rankings import WeekOutOfRangeError, build_luck_rows, build_rankings_view, parse_scope
from ..services.sleeper import SleeperClient, get_sleeper_client
from ..utils.api import clean_season, resolve_league_id
from .errors import HANDLED_ERRORS, api_error

router = APIRouter(tags=["rankings"])


@router.get("/rankings", response_model=schemas.RankingsResponse)
def get_rankings(
    week: int | None = Query(None, ge=0),
    scope: str | None = Query(None),
    league_id: str | None = Query(None, alias="leagueId"),
    season: str | None = Query(None),
    client: SleeperClient = Depends(get_sleeper_client),
):
    """
    Power rankings through `week` (latest scored week by default).
    `scope=selected_week` limits the expected record to that single week.
    """
    try:
        view = build_rankings_view(
            client,
            resolve_league_id(league_id),
            season=clean_season(season),
            week=week,
            scope=parse_scope(scope),
        )
    except WeekOutOfRangeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except HANDLED_ERRORS as exc:
        raise api_error(exc) from exc
    return view.response


@router.get("/luck", response_model=schemas.LuckResponse)
def get_luck(
    week: int | None = Query(None, ge=0),
    scope: str | None = Query(None),
    league_id: str | None = Query(None, alias="leagueId"),
    season: str | None = Query(None),
    client: SleeperClient = Depends(get_sleeper_client),
):
    """Actual vs all-play expected wins per manager, luckiest first."""
    expected_scope = parse_scope(scope)
    try:
        view = build_rankings_view(
            client,
            resolve_league_id(league_id),
            season=clean_season(season),
            week=week,
            scope=expected_scope,
        )
    except WeekOutOfRangeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except HANDLED_ERRORS as exc:
        raise api_error(exc) from exc

    return schemas.LuckResponse(
        week=view.response.week,
        expected_scope=expected_scope,
        available=view.expected.available,
        reason=view.expected.reason,
        managers=build_luck_rows(view.response.rankings, view.expected),
    )
