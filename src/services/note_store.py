"""Persistence interface consumed by the note service."""
from datetime import datetime
from typing import Protocol
from uuid import UUID

from services.note_history import VersionedNote


class NoteStore(Protocol):
    """
    Protocol for note persistence backends.

    Every read and write is scoped by owner_session; a note owned by another
    session behaves exactly like a missing note.

    save() is a conditional write: it must only succeed if the stored note still
    has the `edited_at` and `is_deleted` values of `expected` (the state the
    caller loaded). This makes the load -> transform -> persist path a critical
    section per note.
    """

    async def find_active_by_id(self, note_id: UUID, owner: str) -> VersionedNote | None:
        """Return the note if it exists, belongs to owner, and is not trashed."""
        ...

    async def find_deleted_by_id(self, note_id: UUID, owner: str) -> VersionedNote | None:
        """Return the note if it exists, belongs to owner, and is trashed."""
        ...

    async def create(self, note: VersionedNote) -> VersionedNote:
        """Insert a new note."""
        ...

    async def save(self, note: VersionedNote, expected: VersionedNote) -> VersionedNote | None:
        """Persist `note` if the stored state still matches `expected`; None otherwise."""
        ...

    async def set_deleted(
        self, note_id: UUID, owner: str, deleted_at: datetime | None,
    ) -> VersionedNote | None:
        """
        Move a note into (deleted_at set) or out of (deleted_at None) the trash.

        Conditional on the stored note currently being in the opposite state;
        returns None when it is not. Only is_deleted and deleted_at change, so
        concurrent edits never make this fail.
        """
        ...

    async def delete_permanently(self, note_id: UUID, owner: str) -> bool:
        """Remove a trashed note. Returns False if no trashed note matched."""
        ...

    async def list_notes(
        self,
        owner: str,
        is_deleted: bool,
        offset: int = 0,
        limit: int = 50,
    ) -> list[VersionedNote]:
        """
        List notes for owner.

        Active notes are sorted by created_at descending, trashed notes by
        deleted_at descending.
        """
        ...

    async def count_notes(self, owner: str, is_deleted: bool) -> int:
        """Count notes for owner in the given lifecycle state."""
        ...

    async def ping(self) -> bool:
        """Return True if the backend is reachable."""
        ...
