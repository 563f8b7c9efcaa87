# sleeper_dash/routers/league.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from .. import schemas
from ..services.league_context import get_league_context
from ..services.sleeper import SleeperClient, get_sleeper_client
from ..utils.api import clean_season, resolve_league_id
from .errors import HANDLED_ERRORS, api_error

router = APIRouter(tags=["league"])


@router.get("/league", response_model=schemas.LeagueInfo)
def get_league(
    league_id: str | None = Query(None, alias="leagueId"),
    season: str | None = Query(None),
    client: SleeperClient = Depends(get_sleeper_client),
):
    """League header info for `season` (latest season when omitted)."""
    try:
        ctx = get_league_context(client, resolve_league_id(league_id), clean_season(season))
    except HANDLED_ERRORS as exc:
        raise api_error(exc) from exc
    return ctx.league


@router.get("/context", response_model=schemas.LeagueContextOut)
def get_context(
    league_id: str | None = Query(None, alias="leagueId"),
    season: str | None = Query(None),
    client: SleeperClient = Depends(get_sleeper_client),
):
    """League info, members and every season reachable through the league's history."""
    try:
        ctx = get_league_context(client, resolve_league_id(league_id), clean_season(season))
    except HANDLED_ERRORS as exc:
        raise api_error(exc) from exc
    return ctx.to_out()


@router.get("/matchups/{week}", response_model=List[schemas.SleeperMatchup])
def get_matchups(
    week: int = Path(...),
    league_id: str | None = Query(None, alias="leagueId"),
    client: SleeperClient = Depends(get_sleeper_client),
):
    """Raw Sleeper matchup entries for one week."""
    if week < 1:
        raise HTTPException(status_code=400, detail="Invalid week number")
    try:
        return client.get_matchups(resolve_league_id(league_id), week)
    except HANDLED_ERRORS as exc:
        raise api_error(exc) from exc
