"""
Create notes table.

Revision ID: 3f9a1c2b7d40
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f9a1c2b7d40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_session", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("edited_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "is_deleted",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "versions",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="Undo stack: snapshot objects, oldest first, at most 20",
        ),
        sa.Column(
            "redo_stack",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="Redo stack: snapshot objects, oldest first, at most 20",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("clock_timestamp()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("clock_timestamp()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "(is_deleted AND deleted_at IS NOT NULL) OR (NOT is_deleted AND deleted_at IS NULL)",
            name="ck_notes_deleted_at_matches_is_deleted",
        ),
    )
    op.create_index("ix_notes_owner_session", "notes", ["owner_session"])
    op.create_index(
        "ix_notes_owner_session_is_deleted", "notes", ["owner_session", "is_deleted"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_notes_owner_session_is_deleted", table_name="notes")
    op.drop_index("ix_notes_owner_session", table_name="notes")
    op.drop_table("notes")
