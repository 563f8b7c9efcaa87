# sleeper_dash/services/notes_store.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from .. import models


def read_all_manager_notes(db: Session, league_id: str, season: str) -> List[models.ManagerNote]:
    return list(
        db.execute(
            select(models.ManagerNote)
            .where(models.ManagerNote.league_id == league_id, models.ManagerNote.season == season)
            .order_by(models.ManagerNote.user_id.asc())
        ).scalars()
    )


def notes_by_user_id(db: Session, league_id: str, season: str) -> dict[str, str]:
    return {n.user_id: n.notes for n in read_all_manager_notes(db, league_id, season)}


def upsert_manager_note(db: Session, league_id: str, season: str, user_id: str, notes: str) -> models.ManagerNote:
    note = db.execute(
        select(models.ManagerNote).where(
            models.ManagerNote.league_id == league_id,
            models.ManagerNote.season == season,
            models.ManagerNote.user_id == user_id,
        )
    ).scalar_one_or_none()
    if note is None:
        note = models.ManagerNote(league_id=league_id, season=season, user_id=user_id)
        db.add(note)

    note.notes = notes
    note.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(note)
    return note
