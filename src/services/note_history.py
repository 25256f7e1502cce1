"""
Pure undo/redo history engine for versioned notes.

The functions in this module never perform I/O. They take a VersionedNote and
return a new VersionedNote; the caller decides whether and how to persist it.
Every mutating function accepts an optional `now` so results are deterministic
for a given note and clock.

History model:
- `versions` is the undo stack (tail = most recent snapshot).
- `redo_stack` holds snapshots that can be re-applied after an undo.
- Both stacks are bounded to MAX_HISTORY entries; the oldest entry is evicted
  first when a push would exceed the bound.
"""
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from services.exceptions import ErrorCode

MAX_HISTORY = 20


def utc_now() -> datetime:
    """Return the current timezone-aware UTC time."""
    return datetime.now(UTC)


@dataclass(frozen=True)
class Snapshot:
    """Immutable capture of a note's editable fields at a point in time."""

    title: str
    content: str
    captured_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "captured_at": self.captured_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Snapshot":
        captured_at = raw["captured_at"]
        if isinstance(captured_at, str):
            captured_at = datetime.fromisoformat(captured_at)
        return cls(
            title=raw["title"],
            content=raw["content"],
            captured_at=captured_at,
        )


@dataclass(frozen=True)
class VersionedNote:
    """
    Note aggregate: editable fields, lifecycle flags, and both history stacks.

    Instances are immutable; the history engine and lifecycle functions return
    modified copies via dataclasses.replace().
    """

    id: UUID
    owner_session: str
    title: str
    content: str
    created_at: datetime
    edited_at: datetime
    is_deleted: bool = False
    deleted_at: datetime | None = None
    versions: tuple[Snapshot, ...] = field(default_factory=tuple)
    redo_stack: tuple[Snapshot, ...] = field(default_factory=tuple)

    @property
    def is_active(self) -> bool:
        return not self.is_deleted


@dataclass(frozen=True)
class UpdateResult:
    """Result of apply_update."""

    modified: bool
    note: VersionedNote


@dataclass(frozen=True)
class HistoryResult:
    """Result of undo/redo. `error` is set only when success is False."""

    success: bool
    note: VersionedNote
    error: ErrorCode | None = None


def create_snapshot(note: VersionedNote, now: datetime | None = None) -> Snapshot:
    """Capture the note's current title and content."""
    return Snapshot(
        title=note.title,
        content=note.content,
        captured_at=now or utc_now(),
    )


def has_real_changes(
    current: VersionedNote,
    title: str | None = None,
    content: str | None = None,
) -> bool:
    """
    Return True if applying the given fields would change the note.

    A field counts as changed only when it is provided (not None) and differs
    from the current value by exact string comparison. Callers are expected to
    trim and validate input before calling.
    """
    title_changed = title is not None and title != current.title
    content_changed = content is not None and content != current.content
    return title_changed or content_changed


def apply_update(
    note: VersionedNote,
    title: str | None = None,
    content: str | None = None,
    now: datetime | None = None,
) -> UpdateResult:
    """
    Apply a title/content edit and record the previous state for undo.

    No-op edits return the same note with modified=False: no snapshot is taken
    and edited_at is untouched.

    On the first edit of a note (empty version stack) the pre-edit state is
    pushed twice: once as the original created state and once as the state
    immediately before this edit. Later edits push one snapshot. Any real edit
    clears the redo stack.
    """
    if not has_real_changes(note, title=title, content=content):
        return UpdateResult(modified=False, note=note)

    now = now or utc_now()
    before = create_snapshot(note, now)

    versions = list(note.versions)
    if not versions:
        versions.append(before)
    versions.append(before)

    updated = replace(
        note,
        title=title if title is not None else note.title,
        content=content if content is not None else note.content,
        versions=_bounded(versions),
        redo_stack=(),
        edited_at=_next_edit_time(note, now),
    )
    return UpdateResult(modified=True, note=updated)


def undo(note: VersionedNote, now: datetime | None = None) -> HistoryResult:
    """
    Restore the most recent snapshot from the version stack.

    The current state is pushed onto the redo stack before restoring.
    Returns success=False with NO_HISTORY when there is nothing to undo.
    """
    if not note.versions:
        return HistoryResult(success=False, note=note, error=ErrorCode.NO_HISTORY)

    now = now or utc_now()
    redo_stack = _bounded([*note.redo_stack, create_snapshot(note, now)])
    *versions, restored = note.versions

    updated = replace(
        note,
        title=restored.title,
        content=restored.content,
        versions=tuple(versions),
        redo_stack=redo_stack,
        edited_at=_next_edit_time(note, now),
    )
    return HistoryResult(success=True, note=updated)


def redo(note: VersionedNote, now: datetime | None = None) -> HistoryResult:
    """
    Re-apply the most recently undone snapshot.

    The current state is pushed onto the version stack before restoring.
    Returns success=False with NO_REDO when there is nothing to redo.
    """
    if not note.redo_stack:
        return HistoryResult(success=False, note=note, error=ErrorCode.NO_REDO)

    now = now or utc_now()
    versions = _bounded([*note.versions, create_snapshot(note, now)])
    *redo_stack, restored = note.redo_stack

    updated = replace(
        note,
        title=restored.title,
        content=restored.content,
        versions=versions,
        redo_stack=tuple(redo_stack),
        edited_at=_next_edit_time(note, now),
    )
    return HistoryResult(success=True, note=updated)


def _bounded(stack: list[Snapshot]) -> tuple[Snapshot, ...]:
    """Evict oldest entries (FIFO) until the stack fits within MAX_HISTORY."""
    overflow = len(stack) - MAX_HISTORY
    if overflow > 0:
        stack = stack[overflow:]
    return tuple(stack)


def _next_edit_time(note: VersionedNote, now: datetime) -> datetime:
    """
    Return the new edited_at value for a mutation.

    edited_at is the optimistic concurrency token, so it must change on every
    mutation even when the clock has not advanced past the previous value.
    """
    if now <= note.edited_at:
        return note.edited_at + timedelta(microseconds=1)
    return now
