# sleeper_dash/routers/weekly_recap.py
# No postponed annotations here: the idempotency wrapper hands FastAPI the
# endpoint signature, and string annotations would resolve in the wrapper's module.
import logging
from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models, schemas
from ..db import get_db
from ..logic.recap import build_highlights, build_manager_context_packs, build_recap_matchups
from ..services.league_context import ResolvedLeagueContext, get_league_context
from ..services.notes_store import notes_by_user_id
from ..services.recap_llm import RecapWriter, get_recap_writer
from ..services.recap_store import publish_recap, read_recap, summaries_of, to_admin_response, write_recap
from ..services.sleeper import SleeperAPIError, SleeperClient, get_sleeper_client
from ..utils.api import clean_season, resolve_league_id
from ..utils.idempotency import with_idempotency
from .errors import HANDLED_ERRORS, api_error

route = APIRouter(prefix="/weekly-recap", tags=["weekly-recap"])
logger = logging.getLogger("sleeper_dash.weekly_recap")


def _load_week(
    client: SleeperClient, ctx: ResolvedLeagueContext, week: int
) -> Tuple[List[schemas.RecapMatchup], List[schemas.SleeperMatchup]]:
    raw = client.get_matchups(ctx.league.league_id, week)
    return build_recap_matchups(ctx.rosters, ctx.users, raw), raw


def _require_week(week: int | None) -> int:
    if week is None or week < 1:
        raise HTTPException(status_code=400, detail="Valid week number is required")
    return week


@route.get("", response_model=schemas.WeeklyRecapResponse)
def get_weekly_recap(
    week: int | None = Query(None),
    league_id: str | None = Query(None, alias="leagueId"),
    season: str | None = Query(None),
    db: Session = Depends(get_db),
    client: SleeperClient = Depends(get_sleeper_client),
):
    """
    Matchup cards and highlights for one week (current week by default).
    AI summaries replace the default ones only once the recap is PUBLISHED.
    """
    if week is not None and week < 1:
        raise HTTPException(status_code=400, detail="Invalid week number")

    try:
        ctx = get_league_context(client, resolve_league_id(league_id), clean_season(season))
        max_week = max(ctx.league.total_weeks, ctx.league.current_week)
        target_week = week if week is not None else ctx.league.current_week
        if target_week > max_week:
            raise HTTPException(status_code=400, detail=f"Week must be between 1 and {max_week}")
        matchups, _ = _load_week(client, ctx, target_week)
    except HANDLED_ERRORS as exc:
        raise api_error(exc) from exc

    recap_state = schemas.RecapState.NOT_GENERATED
    week_summary = ""
    try:
        persisted = read_recap(db, ctx.league.league_id, ctx.league.season, target_week)
    except SQLAlchemyError as exc:
        # recap storage is optional for the public view
        logger.warning("recap lookup failed, serving defaults: %s", exc)
        persisted = None

    if persisted is not None:
        recap_state = schemas.RecapState(persisted.state.value)
        if persisted.state == models.RecapStatus.PUBLISHED:
            week_summary = persisted.week_summary
            ai = {s.matchup_id: s.summary for s in summaries_of(persisted)}
            for m in matchups:
                if ai.get(m.matchup_id):
                    m.summary = ai[m.matchup_id]

    return schemas.WeeklyRecapResponse(
        league_id=ctx.league.league_id,
        season=ctx.league.season,
        week=target_week,
        matchups=matchups,
        highlights=build_highlights(matchups),
        recap_state=recap_state,
        week_summary=week_summary,
    )


@route.get("/admin", response_model=schemas.AdminRecapResponse)
def get_admin_recap(
    week: int | None = Query(None),
    league_id: str | None = Query(None, alias="leagueId"),
    season: str | None = Query(None),
    db: Session = Depends(get_db),
    client: SleeperClient = Depends(get_sleeper_client),
):
    """Persisted draft/published state for the commissioner controls."""
    target_week = _require_week(week)
    try:
        ctx = get_league_context(client, resolve_league_id(league_id), clean_season(season))
        recap = read_recap(db, ctx.league.league_id, ctx.league.season, target_week)
    except HANDLED_ERRORS as exc:
        raise api_error(exc) from exc
    return to_admin_response(recap)


def _generate_draft(
    payload: schemas.GenerateRecapIn,
    db: Session,
    client: SleeperClient,
    writer: RecapWriter,
) -> schemas.RecapActionOut:
    week = _require_week(payload.week)
    personality_notes = payload.personality_notes or ""
    try:
        ctx = get_league_context(client, resolve_league_id(payload.league_id), clean_season(payload.season))
        matchups, raw = _load_week(client, ctx, week)
        if not matchups:
            raise HTTPException(status_code=404, detail="No matchups found for this week")

        league_id, season = ctx.league.league_id, ctx.league.season
        notes = notes_by_user_id(db, league_id, season)
        try:
            players = client.get_players()
            transactions = client.get_transactions(league_id, week)
        except SleeperAPIError as exc:
            # player names and trades only enrich the prompt
            logger.warning("recap context degraded for week %s: %s", week, exc)
            players, transactions = {}, []
        packs = build_manager_context_packs(ctx.rosters, raw, notes, players, transactions)

        result = writer.generate(week, season, matchups, personality_notes, packs)
        write_recap(db, league_id, season, week, result.week_summary, result.matchup_summaries, personality_notes)
    except HANDLED_ERRORS as exc:
        raise api_error(exc) from exc
    return schemas.RecapActionOut(state=schemas.RecapState.DRAFT)


@route.post("/generate", response_model=schemas.RecapActionOut)
@with_idempotency("recap_generate_v1")
async def generate_recap(
    request: Request,
    payload: schemas.GenerateRecapIn,
    db: Session = Depends(get_db),
    client: SleeperClient = Depends(get_sleeper_client),
    writer: RecapWriter = Depends(get_recap_writer),
):
    """
    Write (or rewrite) the week's AI recap as a DRAFT.
    Requires an Idempotency-Key header so a retried click does not bill a second completion.
    """
    return await run_in_threadpool(_generate_draft, payload, db, client, writer)


@route.post("/publish", response_model=schemas.RecapActionOut)
def publish(
    payload: schemas.PublishRecapIn,
    db: Session = Depends(get_db),
    client: SleeperClient = Depends(get_sleeper_client),
):
    """DRAFT -> PUBLISHED. 404 when nothing was generated, 409 when already published."""
    week = _require_week(payload.week)
    try:
        ctx = get_league_context(client, resolve_league_id(payload.league_id), clean_season(payload.season))
        league_id, season = ctx.league.league_id, ctx.league.season
        existing = read_recap(db, league_id, season, week)
        if existing is None:
            raise HTTPException(status_code=404, detail="No recap found for this week. Generate a draft first.")
        if existing.state == models.RecapStatus.PUBLISHED:
            raise HTTPException(
                status_code=409, detail="Recap is already published. Regenerate to create a new draft."
            )
        publish_recap(db, league_id, season, week)
    except HANDLED_ERRORS as exc:
        raise api_error(exc) from exc
    return schemas.RecapActionOut(state=schemas.RecapState.PUBLISHED)
