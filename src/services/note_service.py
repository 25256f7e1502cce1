"""Service layer for versioned note operations."""
import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from uuid6 import uuid7

from services import note_history, note_lifecycle
from services.conflict_check import check_edit_conflict
from services.exceptions import (
    ConflictError,
    NoHistoryError,
    NoRedoError,
    NoteNotFoundError,
    NoteNotInTrashError,
)
from services.note_history import Snapshot, VersionedNote, utc_now
from services.note_store import NoteStore

logger = logging.getLogger(__name__)


def _short(session_id: str) -> str:
    """Truncate a session id for log output."""
    return f"{session_id[:8]}..."


@dataclass(frozen=True)
class NoteHistory:
    """Read-only view of a note's undo and redo stacks."""

    versions: tuple[Snapshot, ...]
    redo_stack: tuple[Snapshot, ...]


class NoteService:
    """
    Orchestrates note operations against a persistence backend.

    Combines the pure history engine, the optimistic conflict check, and the
    soft-delete lifecycle. All operations are scoped to the caller's session.
    """

    def __init__(self, store: NoteStore) -> None:
        self.store = store

    async def create(self, owner: str, title: str, content: str) -> VersionedNote:
        """
        Create a new active note with empty history.

        Args:
            owner: Session ID that will own the note.
            title: Validated title.
            content: Validated content (may be empty).

        Returns:
            The created note.
        """
        now = utc_now()
        note = VersionedNote(
            id=uuid7(),
            owner_session=owner,
            title=title,
            content=content,
            created_at=now,
            edited_at=now,
        )
        created = await self.store.create(note)
        logger.debug("Created note %s for session %s", created.id, _short(owner))
        return created

    async def get(self, owner: str, note_id: UUID) -> VersionedNote:
        """Get an active note. Raises NoteNotFoundError if absent."""
        return await self._load_active(owner, note_id)

    async def list_active(
        self, owner: str, offset: int = 0, limit: int = 50,
    ) -> tuple[list[VersionedNote], int]:
        """List active notes with total count."""
        notes = await self.store.list_notes(owner, is_deleted=False, offset=offset, limit=limit)
        total = await self.store.count_notes(owner, is_deleted=False)
        return notes, total

    async def list_trash(
        self, owner: str, offset: int = 0, limit: int = 50,
    ) -> tuple[list[VersionedNote], int]:
        """List trashed notes with total count."""
        notes = await self.store.list_notes(owner, is_deleted=True, offset=offset, limit=limit)
        total = await self.store.count_notes(owner, is_deleted=True)
        return notes, total

    async def update(
        self,
        owner: str,
        note_id: UUID,
        title: str | None = None,
        content: str | None = None,
        last_known_update: datetime | None = None,
    ) -> VersionedNote:
        """
        Edit an active note's title and/or content.

        If the edit changes nothing, the note is returned as-is and nothing is
        persisted; the conflict check is skipped in that case. Otherwise the
        client's last_known_update (if given) must match the note's edited_at.

        Raises:
            NoteNotFoundError: If no active note matches.
            ConflictError: If the note was modified since the client loaded it.
        """
        note = await self._load_active(owner, note_id)

        if not note_history.has_real_changes(note, title=title, content=content):
            return note

        check_edit_conflict(note, last_known_update)

        result = note_history.apply_update(note, title=title, content=content)
        return await self._save(result.note, note)

    async def undo(self, owner: str, note_id: UUID) -> VersionedNote:
        """
        Undo the last change to an active note.

        Raises:
            NoteNotFoundError: If no active note matches.
            NoHistoryError: If there is nothing to undo.
        """
        note = await self._load_active(owner, note_id)
        result = note_history.undo(note)
        if not result.success:
            raise NoHistoryError()
        return await self._save(result.note, note)

    async def redo(self, owner: str, note_id: UUID) -> VersionedNote:
        """
        Redo the last undone change to an active note.

        Raises:
            NoteNotFoundError: If no active note matches.
            NoRedoError: If there is nothing to redo.
        """
        note = await self._load_active(owner, note_id)
        result = note_history.redo(note)
        if not result.success:
            raise NoRedoError()
        return await self._save(result.note, note)

    async def get_history(self, owner: str, note_id: UUID) -> NoteHistory:
        """Return the undo and redo stacks of an active note."""
        note = await self._load_active(owner, note_id)
        return NoteHistory(versions=note.versions, redo_stack=note.redo_stack)

    async def move_to_trash(self, owner: str, note_id: UUID) -> VersionedNote:
        """
        Soft-delete an active note.

        Raises:
            NoteNotFoundError: If no active note matches (including already trashed).
        """
        note = await self._load_active(owner, note_id)
        trashed = note_lifecycle.move_to_trash(note)
        saved = await self.store.set_deleted(note.id, owner, trashed.deleted_at)
        if saved is None:
            # Trashed or removed by a concurrent request
            raise NoteNotFoundError()
        return saved

    async def restore(self, owner: str, note_id: UUID) -> VersionedNote:
        """
        Restore a trashed note.

        Raises:
            NoteNotInTrashError: If no trashed note matches.
        """
        note = await self._load_deleted(owner, note_id)
        restored = note_lifecycle.restore(note)
        saved = await self.store.set_deleted(note.id, owner, restored.deleted_at)
        if saved is None:
            # Restored or removed by a concurrent request
            raise NoteNotInTrashError()
        return saved

    async def delete_permanently(self, owner: str, note_id: UUID) -> None:
        """
        Permanently remove a trashed note.

        Raises:
            NoteNotInTrashError: If no trashed note matches. Active notes must be
                trashed first.
        """
        note = await self._load_deleted(owner, note_id)
        note_lifecycle.ensure_in_trash(note)
        deleted = await self.store.delete_permanently(note.id, owner)
        if not deleted:
            # Restored or removed by a concurrent request
            raise NoteNotInTrashError()
        logger.info("Permanently deleted note %s for session %s", note_id, _short(owner))

    async def _load_active(self, owner: str, note_id: UUID) -> VersionedNote:
        note = await self.store.find_active_by_id(note_id, owner)
        if note is None:
            logger.warning("Active note %s not found for session %s", note_id, _short(owner))
            raise NoteNotFoundError()
        return note

    async def _load_deleted(self, owner: str, note_id: UUID) -> VersionedNote:
        note = await self.store.find_deleted_by_id(note_id, owner)
        if note is None:
            logger.warning("Trashed note %s not found for session %s", note_id, _short(owner))
            raise NoteNotInTrashError()
        return note

    async def _save(self, note: VersionedNote, expected: VersionedNote) -> VersionedNote:
        saved = await self.store.save(note, expected)
        if saved is None:
            logger.warning(
                "Concurrent modification of note %s for session %s",
                note.id, _short(note.owner_session),
            )
            current = await self.store.find_active_by_id(note.id, note.owner_session)
            if current is None:
                # Trashed or removed by a concurrent request
                raise NoteNotFoundError()
            raise ConflictError(current=current)
        return saved
