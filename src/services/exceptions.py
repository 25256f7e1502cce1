"""Shared exceptions for note service operations."""
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from services.note_history import VersionedNote


class ErrorCode(StrEnum):
    """Closed set of outcomes the note core reports to its callers."""

    NOTE_NOT_FOUND = "NOTE_NOT_FOUND"
    NOTE_NOT_IN_TRASH = "NOTE_NOT_IN_TRASH"
    CONFLICT = "CONFLICT"
    NO_HISTORY = "NO_HISTORY"
    NO_REDO = "NO_REDO"


class NoteError(Exception):
    """
    Base class for expected note operation failures.

    Every subclass carries a fixed ErrorCode so the API layer can map it to a
    status code without inspecting messages.
    """

    code: ErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)


class NoteNotFoundError(NoteError):
    """Raised when a note is absent, owned by another session, or not active."""

    code = ErrorCode.NOTE_NOT_FOUND

    def __init__(self, message: str = "Note not found") -> None:
        super().__init__(message)


class NoteNotInTrashError(NoteError):
    """Raised when a trash-only operation targets a note that is not trashed."""

    code = ErrorCode.NOTE_NOT_IN_TRASH

    def __init__(self, message: str = "Note not found in trash") -> None:
        super().__init__(message)


class ConflictError(NoteError):
    """
    Raised when a note was modified since the client loaded it.

    `current` holds the server-side state when it is known, so callers can
    return it to the client for reconciliation.
    """

    code = ErrorCode.CONFLICT

    def __init__(
        self,
        message: str = "Note was modified by another session",
        current: "VersionedNote | None" = None,
    ) -> None:
        self.current = current
        super().__init__(message)


class NoHistoryError(NoteError):
    """Raised when undo is requested with an empty version stack."""

    code = ErrorCode.NO_HISTORY

    def __init__(self, message: str = "No history available to undo") -> None:
        super().__init__(message)


class NoRedoError(NoteError):
    """Raised when redo is requested with an empty redo stack."""

    code = ErrorCode.NO_REDO

    def __init__(self, message: str = "No actions available to redo") -> None:
        super().__init__(message)
