"""
Error response schemas for API endpoints.

Documents the body returned for note errors. All note errors share the shape
{"detail": {"error": <code>, "message": <text>}}; conflicts add server_state.
"""
from pydantic import BaseModel

from schemas.note import NoteResponse
from services.exceptions import ErrorCode


class ErrorDetail(BaseModel):
    """Machine-readable code plus a human-readable message."""

    error: ErrorCode
    message: str


class ConflictErrorDetail(ErrorDetail):
    """409 body: includes the current server state when the note still exists."""

    server_state: NoteResponse | None = None


class ErrorResponse(BaseModel):
    """Envelope for note errors."""

    detail: ErrorDetail


class ConflictErrorResponse(BaseModel):
    """Envelope for conflict errors."""

    detail: ConflictErrorDetail
