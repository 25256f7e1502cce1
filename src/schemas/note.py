"""Pydantic schemas for note endpoints."""
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from schemas.validators import DEFAULT_NOTE_TITLE, validate_content, validate_title


class NoteCreate(BaseModel):
    """Schema for creating a new note. Missing or blank titles get a default."""

    title: str = DEFAULT_NOTE_TITLE
    content: str = Field(default="", description="Note body. May be empty.")

    @field_validator("title", mode="before")
    @classmethod
    def default_blank_title(cls, v: Any) -> Any:
        """Replace a null or whitespace-only title with the default title."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_NOTE_TITLE
        return v

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        """Trim and validate title."""
        return validate_title(v)

    @field_validator("content")
    @classmethod
    def check_content(cls, v: str) -> str:
        """Trim and validate content."""
        return validate_content(v)


class NoteUpdate(BaseModel):
    """Schema for updating an existing note. At least one of title/content is required."""

    title: str | None = None
    content: str | None = None
    last_known_update: datetime | None = Field(
        default=None,
        description="For optimistic locking. If provided and it does not match the note's "
                    "current edited_at, returns 409 Conflict with current server state.",
    )

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str | None) -> str | None:
        """Trim and validate title (if provided)."""
        if v is None:
            return None
        return validate_title(v)

    @field_validator("content")
    @classmethod
    def check_content(cls, v: str | None) -> str | None:
        """Trim and validate content (if provided)."""
        if v is None:
            return None
        return validate_content(v)

    @model_validator(mode="after")
    def check_has_changes(self) -> "NoteUpdate":
        """Require at least one editable field."""
        if self.title is None and self.content is None:
            raise ValueError("At least title or content must be provided")
        return self


class SnapshotResponse(BaseModel):
    """A single entry of the undo or redo stack."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    content: str
    captured_at: datetime


class NoteResponse(BaseModel):
    """
    Schema for note responses.

    The history stacks are summarized as can_undo/can_redo; use
    GET /notes/{id}/history for the full snapshots.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    content: str
    is_deleted: bool
    deleted_at: datetime | None = None
    created_at: datetime
    edited_at: datetime
    can_undo: bool = False
    can_redo: bool = False

    @model_validator(mode="before")
    @classmethod
    def extract_from_note(cls, data: Any) -> Any:
        """Derive can_undo/can_redo from the note's stacks."""
        if hasattr(data, "versions") and hasattr(data, "redo_stack"):
            field_names = set(cls.model_fields.keys()) - {"can_undo", "can_redo"}
            data_dict = {key: getattr(data, key) for key in field_names if hasattr(data, key)}
            data_dict["can_undo"] = len(data.versions) > 0
            data_dict["can_redo"] = len(data.redo_stack) > 0
            return data_dict
        return data


class NoteListResponse(BaseModel):
    """Schema for paginated note list responses."""

    items: list[NoteResponse]
    total: int  # Total count of notes in this view (before pagination)
    offset: int
    limit: int
    has_more: bool


class NoteHistoryResponse(BaseModel):
    """Undo and redo stacks of a note, oldest entry first."""

    model_config = ConfigDict(from_attributes=True)

    versions: list[SnapshotResponse]
    redo_stack: list[SnapshotResponse]
