"""
In-memory note store.

A volatile, dictionary-backed implementation of the NoteStore protocol. Used
for local development (NOTE_STORE_BACKEND=memory) and tests. All state is lost
when the process exits.
"""
import asyncio
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from services.note_history import VersionedNote


class InMemoryNoteStore:
    """Dictionary-backed note store guarded by a single asyncio lock."""

    def __init__(self) -> None:
        self._notes: dict[UUID, VersionedNote] = {}
        self._lock = asyncio.Lock()

    async def find_active_by_id(self, note_id: UUID, owner: str) -> VersionedNote | None:
        return self._find(note_id, owner, is_deleted=False)

    async def find_deleted_by_id(self, note_id: UUID, owner: str) -> VersionedNote | None:
        return self._find(note_id, owner, is_deleted=True)

    async def create(self, note: VersionedNote) -> VersionedNote:
        async with self._lock:
            if note.id in self._notes:
                raise ValueError(f"Note {note.id} already exists")
            self._notes[note.id] = note
        return note

    async def save(self, note: VersionedNote, expected: VersionedNote) -> VersionedNote | None:
        """Compare-and-swap on edited_at and is_deleted, as the SQL store does."""
        async with self._lock:
            stored = self._notes.get(expected.id)
            if (
                stored is None
                or stored.owner_session != expected.owner_session
                or stored.edited_at != expected.edited_at
                or stored.is_deleted != expected.is_deleted
            ):
                return None
            self._notes[note.id] = note
        return note

    async def set_deleted(
        self, note_id: UUID, owner: str, deleted_at: datetime | None,
    ) -> VersionedNote | None:
        is_deleted = deleted_at is not None
        async with self._lock:
            stored = self._find(note_id, owner, is_deleted=not is_deleted)
            if stored is None:
                return None
            updated = replace(stored, is_deleted=is_deleted, deleted_at=deleted_at)
            self._notes[note_id] = updated
        return updated

    async def delete_permanently(self, note_id: UUID, owner: str) -> bool:
        async with self._lock:
            if self._find(note_id, owner, is_deleted=True) is None:
                return False
            del self._notes[note_id]
        return True

    async def list_notes(
        self,
        owner: str,
        is_deleted: bool,
        offset: int = 0,
        limit: int = 50,
    ) -> list[VersionedNote]:
        notes = [
            n for n in self._notes.values()
            if n.owner_session == owner and n.is_deleted == is_deleted
        ]

        def sort_key(n: VersionedNote) -> tuple[datetime, UUID]:
            primary = n.deleted_at if is_deleted and n.deleted_at else n.created_at
            return primary, n.id

        notes.sort(key=sort_key, reverse=True)
        return notes[offset:offset + limit]

    async def count_notes(self, owner: str, is_deleted: bool) -> int:
        return sum(
            1 for n in self._notes.values()
            if n.owner_session == owner and n.is_deleted == is_deleted
        )

    async def ping(self) -> bool:
        return True

    def _find(self, note_id: UUID, owner: str, is_deleted: bool) -> VersionedNote | None:
        note = self._notes.get(note_id)
        if note is None or note.owner_session != owner or note.is_deleted != is_deleted:
            return None
        return note
