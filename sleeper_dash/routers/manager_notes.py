# sleeper_dash/routers/manager_notes.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..services.notes_store import read_all_manager_notes, upsert_manager_note
from ..utils.api import clean_season, resolve_league_id
from .errors import HANDLED_ERRORS, api_error

route = APIRouter(prefix="/manager-notes", tags=["manager-notes"])


@route.get("")
def list_notes(
    league_id: str | None = Query(None, alias="leagueId"),
    season: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """All commissioner notes for a league season, ordered by user id."""
    season = clean_season(season)
    if not season:
        raise HTTPException(status_code=400, detail="season is required")
    try:
        notes = read_all_manager_notes(db, resolve_league_id(league_id), season)
    except HANDLED_ERRORS as exc:
        raise api_error(exc) from exc
    return {"notes": [schemas.ManagerNoteOut.model_validate(n).model_dump(by_alias=True, mode="json") for n in notes]}


@route.put("")
def put_note(
    payload: schemas.ManagerNoteIn,
    league_id: str | None = Query(None, alias="leagueId"),
    db: Session = Depends(get_db),
):
    """Create or replace one manager's note. Body leagueId wins over the query string."""
    # TODO: restrict to the league commissioner once auth exists
    season = clean_season(payload.season)
    user_id = (payload.user_id or "").strip()
    if not season:
        raise HTTPException(status_code=400, detail="season is required")
    if not user_id:
        raise HTTPException(status_code=400, detail="userId is required")

    try:
        target_league = resolve_league_id(payload.league_id or league_id)
        note = upsert_manager_note(db, target_league, season, user_id, payload.notes or "")
    except HANDLED_ERRORS as exc:
        raise api_error(exc) from exc
    return {"note": schemas.ManagerNoteOut.model_validate(note).model_dump(by_alias=True, mode="json")}
