"""SQLAlchemy models."""
from models.base import Base, TimestampMixin, UUIDv7Mixin
from models.note import Note

__all__ = ["Base", "Note", "TimestampMixin", "UUIDv7Mixin"]
