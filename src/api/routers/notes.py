"""Notes endpoints: CRUD, undo/redo history, and trash lifecycle."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_note_service, get_session_id
from schemas.errors import ConflictErrorResponse, ErrorResponse
from schemas.note import (
    NoteCreate,
    NoteHistoryResponse,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
)
from services.note_service import NoteService

router = APIRouter(prefix="/notes", tags=["notes"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Note not found"}}


@router.post("/", response_model=NoteResponse, status_code=201)
async def create_note(
    data: NoteCreate,
    session_id: str = Depends(get_session_id),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """Create a new note with empty history."""
    note = await service.create(session_id, data.title, data.content)
    return NoteResponse.model_validate(note)


@router.get("/", response_model=NoteListResponse)
async def list_notes(
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int = Query(default=50, ge=1, le=100, description="Pagination limit"),
    session_id: str = Depends(get_session_id),
    service: NoteService = Depends(get_note_service),
) -> NoteListResponse:
    """List active notes for the current session, newest first."""
    notes, total = await service.list_active(session_id, offset=offset, limit=limit)
    items = [NoteResponse.model_validate(n) for n in notes]
    return NoteListResponse(
        items=items,
        total=total,
        offset=offset,
        limit=limit,
        has_more=offset + len(items) < total,
    )


@router.get("/trash", response_model=NoteListResponse)
async def list_trash(
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int = Query(default=50, ge=1, le=100, description="Pagination limit"),
    session_id: str = Depends(get_session_id),
    service: NoteService = Depends(get_note_service),
) -> NoteListResponse:
    """List trashed notes for the current session, most recently deleted first."""
    notes, total = await service.list_trash(session_id, offset=offset, limit=limit)
    items = [NoteResponse.model_validate(n) for n in notes]
    return NoteListResponse(
        items=items,
        total=total,
        offset=offset,
        limit=limit,
        has_more=offset + len(items) < total,
    )


@router.get("/{note_id}", response_model=NoteResponse, responses=NOT_FOUND)
async def get_note(
    note_id: UUID,
    session_id: str = Depends(get_session_id),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """Get a single active note."""
    note = await service.get(session_id, note_id)
    return NoteResponse.model_validate(note)


@router.patch(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        **NOT_FOUND,
        409: {"model": ConflictErrorResponse, "description": "Note was modified"},
    },
)
async def update_note(
    note_id: UUID,
    data: NoteUpdate,
    session_id: str = Depends(get_session_id),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """
    Update a note's title and/or content.

    - Edits that change nothing return the note unchanged and record no history.
    - **last_known_update**: the `edited_at` value the client last saw. If it no
      longer matches, returns 409 with the current server state.
    - Any real edit clears the redo stack.
    """
    note = await service.update(
        session_id,
        note_id,
        title=data.title,
        content=data.content,
        last_known_update=data.last_known_update,
    )
    return NoteResponse.model_validate(note)


@router.post(
    "/{note_id}/undo",
    response_model=NoteResponse,
    responses={**NOT_FOUND, 400: {"model": ErrorResponse, "description": "Nothing to undo"}},
)
async def undo_note(
    note_id: UUID,
    session_id: str = Depends(get_session_id),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """Undo the last change. Returns 400 with NO_HISTORY when there is nothing to undo."""
    note = await service.undo(session_id, note_id)
    return NoteResponse.model_validate(note)


@router.post(
    "/{note_id}/redo",
    response_model=NoteResponse,
    responses={**NOT_FOUND, 400: {"model": ErrorResponse, "description": "Nothing to redo"}},
)
async def redo_note(
    note_id: UUID,
    session_id: str = Depends(get_session_id),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """Redo the last undone change. Returns 400 with NO_REDO when there is nothing to redo."""
    note = await service.redo(session_id, note_id)
    return NoteResponse.model_validate(note)


@router.get("/{note_id}/history", response_model=NoteHistoryResponse, responses=NOT_FOUND)
async def get_note_history(
    note_id: UUID,
    session_id: str = Depends(get_session_id),
    service: NoteService = Depends(get_note_service),
) -> NoteHistoryResponse:
    """Get the undo (versions) and redo stacks of an active note, oldest first."""
    history = await service.get_history(session_id, note_id)
    return NoteHistoryResponse.model_validate(history)


@router.patch("/{note_id}/trash", response_model=NoteResponse, responses=NOT_FOUND)
async def move_note_to_trash(
    note_id: UUID,
    session_id: str = Depends(get_session_id),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """
    Move a note to the trash (soft delete).

    Returns 404 if the note does not exist or is already in the trash.
    """
    note = await service.move_to_trash(session_id, note_id)
    return NoteResponse.model_validate(note)


@router.patch("/{note_id}/restore", response_model=NoteResponse, responses=NOT_FOUND)
async def restore_note(
    note_id: UUID,
    session_id: str = Depends(get_session_id),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """Restore a note from the trash. Returns 404 with NOTE_NOT_IN_TRASH otherwise."""
    note = await service.restore(session_id, note_id)
    return NoteResponse.model_validate(note)


@router.delete("/{note_id}/permanent", status_code=204, responses=NOT_FOUND)
async def delete_note_permanently(
    note_id: UUID,
    session_id: str = Depends(get_session_id),
    service: NoteService = Depends(get_note_service),
) -> None:
    """
    Permanently delete a note.

    Only notes in the trash can be permanently deleted; active notes return
    404 with NOTE_NOT_IN_TRASH.
    """
    await service.delete_permanently(session_id, note_id)
