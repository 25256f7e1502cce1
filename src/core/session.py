"""
Anonymous per-browser session identifiers.

Every request is scoped to an opaque session ID stored in a cookie. Requests
without a valid cookie get a fresh random UUID, which is set on the response.
"""
import logging
from uuid import UUID, uuid4

from fastapi import Depends, Request, Response

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _is_valid_session_id(value: str | None) -> bool:
    if not value:
        return False
    try:
        UUID(value)
    except ValueError:
        return False
    return True


def new_session_id() -> str:
    """Generate an unguessable session ID."""
    return str(uuid4())


def get_session_id(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Resolve the caller's session ID, issuing a new one when absent or malformed.

    The cookie is httpOnly, SameSite=Lax and long-lived, so the session survives
    browser restarts. Secure is controlled by SESSION_COOKIE_SECURE.
    """
    session_id = request.cookies.get(settings.session_cookie_name)
    if _is_valid_session_id(session_id):
        return session_id  # type: ignore[return-value]

    session_id = new_session_id()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_cookie_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    logger.debug("Issued new session %s...", session_id[:8])
    return session_id
