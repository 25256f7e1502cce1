"""FastAPI dependencies for injection."""
from collections.abc import AsyncIterator

from fastapi import Depends, Request

from core.config import get_settings
from core.session import get_session_id
from db.note_store import SqlNoteStore
from db.session import session_scope
from services.note_service import NoteService
from services.note_store import NoteStore


async def get_note_store(request: Request) -> AsyncIterator[NoteStore]:
    """
    Yield the note store for this request.

    With the memory backend, the process-wide store created at startup is
    used. Otherwise a SQL store is bound to a request-scoped session that
    commits on success and rolls back on error.
    """
    memory_store = getattr(request.app.state, "memory_store", None)
    if memory_store is not None:
        yield memory_store
        return

    async with session_scope() as session:
        yield SqlNoteStore(session)


def get_note_service(store: NoteStore = Depends(get_note_store)) -> NoteService:
    """Build a NoteService around the request's store."""
    return NoteService(store)


__all__ = [
    "get_note_service",
    "get_note_store",
    "get_session_id",
    "get_settings",
]
