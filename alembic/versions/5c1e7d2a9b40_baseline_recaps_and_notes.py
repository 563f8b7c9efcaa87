"""baseline: recaps and manager notes

Revision ID: 5c1e7d2a9b40
Revises:
Create Date: 2026-10-18 00:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5c1e7d2a9b40"
down_revision = None
branch_labels = None
depends_on = None

recap_status = sa.Enum("DRAFT", "PUBLISHED", name="recapstatus")


def upgrade() -> None:
    # recaps
    op.create_table(
        "recaps",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("league_id", sa.String(length=64), nullable=False),
        sa.Column("season", sa.String(length=16), nullable=False),
        sa.Column("week", sa.Integer(), nullable=False),
        sa.Column("state", recap_status, nullable=False, server_default="DRAFT"),
        sa.Column("week_summary", sa.Text(), nullable=False, server_default=""),
        sa.Column("matchup_summaries", sa.JSON(), nullable=False),
        sa.Column("personality_notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("league_id", "season", "week", name="uq_recap_league_season_week"),
    )
    op.create_index("ix_recaps_id", "recaps", ["id"])
    op.create_index("ix_recaps_league_id", "recaps", ["league_id"])

    # manager_notes
    op.create_table(
        "manager_notes",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("league_id", sa.String(length=64), nullable=False),
        sa.Column("season", sa.String(length=16), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("league_id", "season", "user_id", name="uq_manager_note"),
    )
    op.create_index("ix_manager_notes_id", "manager_notes", ["id"])
    op.create_index("ix_manager_notes_league_id", "manager_notes", ["league_id"])


def downgrade() -> None:
    op.drop_index("ix_manager_notes_league_id", table_name="manager_notes")
    op.drop_index("ix_manager_notes_id", table_name="manager_notes")
    op.drop_table("manager_notes")

    op.drop_index("ix_recaps_league_id", table_name="recaps")
    op.drop_index("ix_recaps_id", table_name="recaps")
    op.drop_table("recaps")
    recap_status.drop(op.get_bind(), checkfirst=True)
