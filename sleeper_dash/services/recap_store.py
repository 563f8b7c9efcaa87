# sleeper_dash/services/recap_store.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from .. import models, schemas

logger = logging.getLogger("sleeper_dash.recap_store")


def read_recap(db: Session, league_id: str, season: str, week: int) -> models.Recap | None:
    return db.execute(
        select(models.Recap).where(
            models.Recap.league_id == league_id,
            models.Recap.season == season,
            models.Recap.week == week,
        )
    ).scalar_one_or_none()


def write_recap(
    db: Session,
    league_id: str,
    season: str,
    week: int,
    week_summary: str,
    matchup_summaries: Iterable[schemas.MatchupSummary],
    personality_notes: str = "",
) -> models.Recap:
    """
    Upsert a DRAFT for the week. An existing row (draft or published) is
    overwritten and drops back to DRAFT.
    """
    payload = [{"matchup_id": s.matchup_id, "summary": s.summary} for s in matchup_summaries]
    recap = read_recap(db, league_id, season, week)
    if recap is None:
        recap = models.Recap(league_id=league_id, season=season, week=week)
        db.add(recap)

    recap.state = models.RecapStatus.DRAFT
    recap.week_summary = week_summary
    recap.matchup_summaries = payload
    recap.personality_notes = personality_notes
    recap.generated_at = datetime.now(timezone.utc)
    recap.published_at = None

    db.commit()
    db.refresh(recap)
    logger.info("recap draft saved league=%s season=%s week=%s", league_id, season, week)
    return recap


def publish_recap(db: Session, league_id: str, season: str, week: int) -> models.Recap | None:
    recap = read_recap(db, league_id, season, week)
    if recap is None:
        return None
    recap.state = models.RecapStatus.PUBLISHED
    recap.published_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(recap)
    logger.info("recap published league=%s season=%s week=%s", league_id, season, week)
    return recap


def summaries_of(recap: models.Recap) -> list[schemas.MatchupSummary]:
    return [
        schemas.MatchupSummary(matchup_id=int(s["matchup_id"]), summary=str(s["summary"]))
        for s in (recap.matchup_summaries or [])
        if "matchup_id" in s and "summary" in s
    ]


def to_admin_response(recap: models.Recap | None) -> schemas.AdminRecapResponse:
    if recap is None:
        return schemas.AdminRecapResponse(state=schemas.RecapState.NOT_GENERATED)
    return schemas.AdminRecapResponse(
        state=schemas.RecapState(recap.state.value),
        week_summary=recap.week_summary,
        matchup_summaries=summaries_of(recap),
        personality_notes=recap.personality_notes,
        generated_at=recap.generated_at,
        published_at=recap.published_at,
    )
