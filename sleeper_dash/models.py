# sleeper_dash/models.py
import enum
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# -----------------------
# Weekly recaps
# -----------------------
class RecapStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class Recap(Base):
    """One AI-written recap per (league, season, week). Regenerating overwrites the draft."""

    __tablename__ = "recaps"
    __table_args__ = (UniqueConstraint("league_id", "season", "week", name="uq_recap_league_season_week"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    league_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    season: Mapped[str] = mapped_column(String(16), nullable=False)
    week: Mapped[int] = mapped_column(Integer, nullable=False)

    state: Mapped[RecapStatus] = mapped_column(SAEnum(RecapStatus), nullable=False, default=RecapStatus.DRAFT)
    week_summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # [{"matchup_id": int, "summary": str}, ...]
    matchup_summaries: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    personality_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


# -----------------------
# Commissioner notes per manager
# -----------------------
class ManagerNote(Base):
    __tablename__ = "manager_notes"
    __table_args__ = (UniqueConstraint("league_id", "season", "user_id", name="uq_manager_note"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    league_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    season: Mapped[str] = mapped_column(String(16), nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )
