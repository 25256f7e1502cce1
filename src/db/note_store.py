"""SQLAlchemy-backed note store."""
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.note import Note
from services.note_history import Snapshot, VersionedNote


def to_domain(row: Note) -> VersionedNote:
    """Convert an ORM row into the immutable note aggregate."""
    return VersionedNote(
        id=row.id,
        owner_session=row.owner_session,
        title=row.title,
        content=row.content,
        created_at=row.created_at,
        edited_at=row.edited_at,
        is_deleted=row.is_deleted,
        deleted_at=row.deleted_at,
        versions=tuple(Snapshot.from_dict(raw) for raw in row.versions or []),
        redo_stack=tuple(Snapshot.from_dict(raw) for raw in row.redo_stack or []),
    )


class SqlNoteStore:
    """
    Note store for a single request-scoped AsyncSession.

    Writes are flushed, not committed; the session owner commits at the end of
    the request (see db.session.session_scope).
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_active_by_id(self, note_id: UUID, owner: str) -> VersionedNote | None:
        return await self._find(note_id, owner, is_deleted=False)

    async def find_deleted_by_id(self, note_id: UUID, owner: str) -> VersionedNote | None:
        return await self._find(note_id, owner, is_deleted=True)

    async def create(self, note: VersionedNote) -> VersionedNote:
        row = Note(
            id=note.id,
            owner_session=note.owner_session,
            title=note.title,
            content=note.content,
            created_at=note.created_at,
            edited_at=note.edited_at,
            is_deleted=note.is_deleted,
            deleted_at=note.deleted_at,
            versions=[s.to_dict() for s in note.versions],
            redo_stack=[s.to_dict() for s in note.redo_stack],
        )
        self.db.add(row)
        await self.db.flush()
        return note

    async def save(self, note: VersionedNote, expected: VersionedNote) -> VersionedNote | None:
        """
        Conditionally update a note.

        The WHERE clause pins the row to the edited_at and is_deleted values the
        caller loaded, so a concurrent writer that committed first makes this
        update match zero rows.
        """
        stmt = (
            update(Note)
            .where(
                Note.id == expected.id,
                Note.owner_session == expected.owner_session,
                Note.edited_at == expected.edited_at,
                Note.is_deleted == expected.is_deleted,
            )
            .values(
                title=note.title,
                content=note.content,
                edited_at=note.edited_at,
                is_deleted=note.is_deleted,
                deleted_at=note.deleted_at,
                versions=[s.to_dict() for s in note.versions],
                redo_stack=[s.to_dict() for s in note.redo_stack],
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            return None
        return note

    async def set_deleted(
        self, note_id: UUID, owner: str, deleted_at: datetime | None,
    ) -> VersionedNote | None:
        is_deleted = deleted_at is not None
        stmt = (
            update(Note)
            .where(
                Note.id == note_id,
                Note.owner_session == owner,
                Note.is_deleted.is_(not is_deleted),
            )
            .values(is_deleted=is_deleted, deleted_at=deleted_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self._find(note_id, owner, is_deleted=is_deleted)

    async def delete_permanently(self, note_id: UUID, owner: str) -> bool:
        stmt = delete(Note).where(
            Note.id == note_id,
            Note.owner_session == owner,
            Note.is_deleted.is_(True),
        )
        result = await self.db.execute(stmt)
        return result.rowcount > 0

    async def list_notes(
        self,
        owner: str,
        is_deleted: bool,
        offset: int = 0,
        limit: int = 50,
    ) -> list[VersionedNote]:
        sort_column = Note.deleted_at if is_deleted else Note.created_at
        query = (
            select(Note)
            .where(Note.owner_session == owner, Note.is_deleted.is_(is_deleted))
            .order_by(sort_column.desc(), Note.id.desc())
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return [to_domain(row) for row in result.scalars().all()]

    async def count_notes(self, owner: str, is_deleted: bool) -> int:
        query = (
            select(func.count())
            .select_from(Note)
            .where(Note.owner_session == owner, Note.is_deleted.is_(is_deleted))
        )
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def ping(self) -> bool:
        await self.db.execute(text("SELECT 1"))
        return True

    async def _find(self, note_id: UUID, owner: str, is_deleted: bool) -> VersionedNote | None:
        query = (
            select(Note)
            .where(
                Note.id == note_id,
                Note.owner_session == owner,
                Note.is_deleted.is_(is_deleted),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        row = result.scalar_one_or_none()
        return to_domain(row) if row is not None else None
