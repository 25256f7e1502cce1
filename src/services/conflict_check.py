"""Optimistic locking check for note edits."""
from datetime import UTC, datetime

from services.exceptions import ConflictError
from services.note_history import VersionedNote


def normalize_instant(value: datetime) -> datetime:
    """Convert a timestamp to a timezone-aware UTC instant (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def check_edit_conflict(
    note: VersionedNote,
    last_known_update: datetime | None,
) -> None:
    """
    Check for conflicts before an edit. Raises ConflictError if stale.

    If last_known_update is None, this is a no-op (last write wins).

    Args:
        note: Current server-side state of the note.
        last_known_update: The edited_at value the client last saw.

    Raises:
        ConflictError: If the note's edited_at differs from last_known_update.
    """
    if last_known_update is None:
        return

    if normalize_instant(last_known_update) != normalize_instant(note.edited_at):
        raise ConflictError(current=note)
