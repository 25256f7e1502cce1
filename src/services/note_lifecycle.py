"""
Soft-delete lifecycle for notes.

States: Active (is_deleted=False) and Trashed (is_deleted=True). Permanent
deletion is only allowed from Trashed. These transitions never touch the
history stacks or edited_at.
"""
from dataclasses import replace
from datetime import datetime

from services.exceptions import NoteNotFoundError, NoteNotInTrashError
from services.note_history import VersionedNote, utc_now


def move_to_trash(note: VersionedNote, now: datetime | None = None) -> VersionedNote:
    """
    Move an active note to the trash.

    Raises:
        NoteNotFoundError: If the note is already trashed.
    """
    if note.is_deleted:
        raise NoteNotFoundError()
    return replace(note, is_deleted=True, deleted_at=now or utc_now())


def restore(note: VersionedNote) -> VersionedNote:
    """
    Restore a trashed note to active state.

    Raises:
        NoteNotInTrashError: If the note is not trashed.
    """
    ensure_in_trash(note)
    return replace(note, is_deleted=False, deleted_at=None)


def ensure_in_trash(note: VersionedNote) -> None:
    """Raise NoteNotInTrashError unless the note is trashed."""
    if not note.is_deleted:
        raise NoteNotInTrashError()
