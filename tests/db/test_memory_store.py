"""Tests for the in-memory note store."""
from dataclasses import replace
from datetime import timedelta

import pytest

from db.memory_store import InMemoryNoteStore
from tests.conftest import SESSION_B, T0


async def test__create__duplicate_id_raises(memory_store: InMemoryNoteStore, make_note) -> None:
    note = make_note()
    await memory_store.create(note)

    with pytest.raises(ValueError, match="already exists"):
        await memory_store.create(note)


async def test__save__matching_expected_state_writes(
    memory_store: InMemoryNoteStore, make_note,
) -> None:
    note = await memory_store.create(make_note())
    changed = replace(note, title="V2", edited_at=T0 + timedelta(seconds=1))

    saved = await memory_store.save(changed, note)

    assert saved == changed
    assert await memory_store.find_active_by_id(note.id, note.owner_session) == changed


async def test__save__stale_expected_state_is_rejected(
    memory_store: InMemoryNoteStore, make_note,
) -> None:
    note = await memory_store.create(make_note())
    winner = replace(note, title="winner", edited_at=T0 + timedelta(seconds=1))
    loser = replace(note, title="loser", edited_at=T0 + timedelta(seconds=2))
    await memory_store.save(winner, note)

    assert await memory_store.save(loser, note) is None
    assert (await memory_store.find_active_by_id(note.id, note.owner_session)).title == "winner"


async def test__save__lifecycle_change_is_rejected(
    memory_store: InMemoryNoteStore, make_note,
) -> None:
    note = await memory_store.create(make_note())
    trashed = replace(note, is_deleted=True, deleted_at=T0)
    await memory_store.save(trashed, note)

    edited = replace(note, title="edit", edited_at=T0 + timedelta(seconds=1))
    assert await memory_store.save(edited, note) is None


async def test__find__respects_owner_and_state(
    memory_store: InMemoryNoteStore, make_note,
) -> None:
    note = await memory_store.create(make_note())

    assert await memory_store.find_active_by_id(note.id, SESSION_B) is None
    assert await memory_store.find_deleted_by_id(note.id, note.owner_session) is None


async def test__delete_permanently__only_trashed_notes(
    memory_store: InMemoryNoteStore, make_note,
) -> None:
    active = await memory_store.create(make_note())
    trashed = await memory_store.create(make_note(is_deleted=True, deleted_at=T0))

    assert await memory_store.delete_permanently(active.id, active.owner_session) is False
    assert await memory_store.delete_permanently(trashed.id, SESSION_B) is False
    assert await memory_store.delete_permanently(trashed.id, trashed.owner_session) is True
    assert await memory_store.count_notes(trashed.owner_session, is_deleted=True) == 0


async def test__list_notes__trash_ordered_by_deleted_at(
    memory_store: InMemoryNoteStore, make_note,
) -> None:
    older = await memory_store.create(
        make_note(is_deleted=True, deleted_at=T0 + timedelta(minutes=1)),
    )
    newer = await memory_store.create(
        make_note(is_deleted=True, deleted_at=T0 + timedelta(minutes=2)),
    )

    notes = await memory_store.list_notes(older.owner_session, is_deleted=True)

    assert [n.id for n in notes] == [newer.id, older.id]


async def test__ping__reports_healthy(memory_store: InMemoryNoteStore) -> None:
    assert await memory_store.ping() is True


async def test__set_deleted__moves_between_states(
    memory_store: InMemoryNoteStore, make_note,
) -> None:
    note = await memory_store.create(make_note())

    trashed = await memory_store.set_deleted(note.id, note.owner_session, T0)
    assert trashed is not None
    assert (trashed.is_deleted, trashed.deleted_at) == (True, T0)
    assert trashed.edited_at == note.edited_at

    restored = await memory_store.set_deleted(note.id, note.owner_session, None)
    assert restored is not None
    assert (restored.is_deleted, restored.deleted_at) == (False, None)


async def test__set_deleted__requires_opposite_state(
    memory_store: InMemoryNoteStore, make_note,
) -> None:
    note = await memory_store.create(make_note())

    assert await memory_store.set_deleted(note.id, note.owner_session, None) is None
    assert await memory_store.set_deleted(note.id, SESSION_B, T0) is None
    await memory_store.set_deleted(note.id, note.owner_session, T0)
    assert await memory_store.set_deleted(note.id, note.owner_session, T0) is None


async def test__set_deleted__keeps_concurrent_edit(
    memory_store: InMemoryNoteStore, make_note,
) -> None:
    note = await memory_store.create(make_note())
    edited = replace(note, title="edited", edited_at=T0 + timedelta(seconds=1))
    await memory_store.save(edited, note)

    trashed = await memory_store.set_deleted(note.id, note.owner_session, T0)

    assert trashed == replace(edited, is_deleted=True, deleted_at=T0)
