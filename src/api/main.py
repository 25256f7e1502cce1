"""FastAPI application entry point."""
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import health, notes
from core.config import configure_logging, get_settings
from db.memory_store import InMemoryNoteStore
from db.session import dispose_engine
from schemas.note import NoteResponse
from services.exceptions import ConflictError, ErrorCode, NoteError

logger = logging.getLogger(__name__)

# Transport status for each core error code
ERROR_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.NOTE_NOT_FOUND: 404,
    ErrorCode.NOTE_NOT_IN_TRASH: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.NO_HISTORY: 400,
    ErrorCode.NO_REDO: 400,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan - startup and shutdown."""
    app_settings = get_settings()
    configure_logging(app_settings.log_level)

    # Startup: the memory backend keeps one store for the life of the process
    if app_settings.note_store_backend == "memory":
        logger.warning("Using in-memory note store; notes are lost on restart")
        app.state.memory_store = InMemoryNoteStore()

    yield

    # Shutdown
    app.state.memory_store = None
    await dispose_engine()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking - API shouldn't be framed
        response.headers["X-Frame-Options"] = "DENY"
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and log the outcome."""
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s - %s (%.1fms)",
            request.method, request.url.path, response.status_code, duration_ms,
        )
        return response


app_settings = get_settings()

app = FastAPI(
    title="Notes API",
    description="Session-scoped notes with undo/redo history and a trash.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(NoteError)
async def note_error_handler(_request: Request, exc: NoteError) -> JSONResponse:
    """Translate core note errors into HTTP responses."""
    detail: dict = {"error": exc.code.value, "message": str(exc)}
    if isinstance(exc, ConflictError):
        detail["server_state"] = (
            NoteResponse.model_validate(exc.current).model_dump(mode="json")
            if exc.current is not None
            else None
        )
    return JSONResponse(status_code=ERROR_STATUS_CODES[exc.code], content={"detail": detail})


app.add_middleware(RequestLoggingMiddleware)

# Security headers middleware (runs after CORS, adds headers to responses)
app.add_middleware(SecurityHeadersMiddleware)

# Credentials are required so the browser sends the session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(notes.router)
