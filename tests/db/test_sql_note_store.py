"""Tests for the SQLAlchemy note store against PostgreSQL."""
from dataclasses import replace
from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from db.note_store import SqlNoteStore
from services.exceptions import ConflictError, NoteNotInTrashError
from services.note_history import Snapshot
from services.note_service import NoteService
from tests.conftest import SESSION_A, SESSION_B, T0


@pytest.fixture
def sql_store(db_session: AsyncSession) -> SqlNoteStore:
    return SqlNoteStore(db_session)


async def test__create__round_trips_note_with_history(sql_store: SqlNoteStore, make_note) -> None:
    snapshot = Snapshot(title="old", content="body", captured_at=T0)
    note = make_note(versions=(snapshot, snapshot), redo_stack=(snapshot,))

    await sql_store.create(note)
    loaded = await sql_store.find_active_by_id(note.id, SESSION_A)

    assert loaded == note


async def test__save__compare_and_swap_on_edited_at(sql_store: SqlNoteStore, make_note) -> None:
    note = await sql_store.create(make_note())
    winner = replace(note, title="winner", edited_at=T0 + timedelta(seconds=1))
    loser = replace(note, title="loser", edited_at=T0 + timedelta(seconds=2))

    assert await sql_store.save(winner, note) == winner
    assert await sql_store.save(loser, note) is None

    loaded = await sql_store.find_active_by_id(note.id, SESSION_A)
    assert loaded is not None
    assert loaded.title == "winner"
    assert loaded.edited_at == T0 + timedelta(seconds=1)


async def test__find__scoped_by_owner_and_state(sql_store: SqlNoteStore, make_note) -> None:
    note = await sql_store.create(make_note())

    assert await sql_store.find_active_by_id(note.id, SESSION_B) is None
    assert await sql_store.find_deleted_by_id(note.id, SESSION_A) is None


async def test__delete_permanently__requires_trashed_state(
    sql_store: SqlNoteStore, make_note,
) -> None:
    active = await sql_store.create(make_note())
    trashed = await sql_store.create(make_note(is_deleted=True, deleted_at=T0))

    assert await sql_store.delete_permanently(active.id, SESSION_A) is False
    assert await sql_store.delete_permanently(trashed.id, SESSION_A) is True
    assert await sql_store.find_deleted_by_id(trashed.id, SESSION_A) is None


async def test__list_notes__ordering_and_counts(sql_store: SqlNoteStore, make_note) -> None:
    first = await sql_store.create(make_note(created_at=T0))
    second = await sql_store.create(make_note(created_at=T0 + timedelta(minutes=1)))
    await sql_store.create(make_note(owner_session=SESSION_B))

    notes = await sql_store.list_notes(SESSION_A, is_deleted=False)

    assert [n.id for n in notes] == [second.id, first.id]
    assert await sql_store.count_notes(SESSION_A, is_deleted=False) == 2
    assert await sql_store.count_notes(SESSION_A, is_deleted=True) == 0


async def test__set_deleted__conditional_on_current_state(
    sql_store: SqlNoteStore, make_note,
) -> None:
    note = await sql_store.create(make_note())
    edited = replace(note, title="edited", edited_at=T0 + timedelta(seconds=1))
    await sql_store.save(edited, note)

    trashed = await sql_store.set_deleted(note.id, SESSION_A, T0)

    assert trashed == replace(edited, is_deleted=True, deleted_at=T0)
    assert await sql_store.set_deleted(note.id, SESSION_A, T0) is None
    assert await sql_store.set_deleted(note.id, SESSION_B, None) is None

    restored = await sql_store.set_deleted(note.id, SESSION_A, None)
    assert restored is not None
    assert (restored.is_deleted, restored.deleted_at) == (False, None)


async def test__ping__succeeds(sql_store: SqlNoteStore) -> None:
    assert await sql_store.ping() is True


async def test__note_service__full_flow_on_postgres(sql_store: SqlNoteStore) -> None:
    service = NoteService(sql_store)
    note = await service.create(SESSION_A, "Original", "")
    await service.update(SESSION_A, note.id, title="Change 1")
    await service.update(SESSION_A, note.id, title="Change 2")

    assert (await service.undo(SESSION_A, note.id)).title == "Change 1"
    assert (await service.redo(SESSION_A, note.id)).title == "Change 2"

    with pytest.raises(ConflictError):
        await service.update(
            SESSION_A, note.id, title="Stale", last_known_update=note.edited_at,
        )

    await service.move_to_trash(SESSION_A, note.id)
    restored = await service.restore(SESSION_A, note.id)
    assert restored.title == "Change 2"

    with pytest.raises(NoteNotInTrashError):
        await service.delete_permanently(SESSION_A, note.id)
