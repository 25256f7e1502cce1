"""Note model for storing session-scoped notes with undo/redo history."""
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Index, String, Text, false
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin, UUIDv7Mixin

# JSONB on PostgreSQL, plain JSON elsewhere
HistoryJSON = JSON().with_variant(JSONB(), "postgresql")


class Note(Base, UUIDv7Mixin, TimestampMixin):
    """
    Note model - title/content plus bounded version and redo stacks.

    The stacks are stored as JSON arrays of snapshot objects
    ({"title", "content", "captured_at"}), oldest first.
    """

    __tablename__ = "notes"
    __table_args__ = (
        # Listing queries filter by session and lifecycle state
        Index("ix_notes_owner_session_is_deleted", "owner_session", "is_deleted"),
        CheckConstraint(
            "(is_deleted AND deleted_at IS NOT NULL) OR (NOT is_deleted AND deleted_at IS NULL)",
            name="ck_notes_deleted_at_matches_is_deleted",
        ),
    )

    # id provided by UUIDv7Mixin
    owner_session: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Optimistic concurrency token: bumped by edits, undo and redo only
    edited_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Soft delete
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(),
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None,
    )

    versions: Mapped[list[dict[str, Any]]] = mapped_column(
        HistoryJSON, nullable=False, default=list,
    )
    redo_stack: Mapped[list[dict[str, Any]]] = mapped_column(
        HistoryJSON, nullable=False, default=list,
    )
