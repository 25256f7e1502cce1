"""
Shared validation functions for note schemas.

These run at the request boundary. The history engine compares values by
exact string equality, so everything it receives must already be trimmed.
"""
import unicodedata

MAX_TITLE_LENGTH = 100
MAX_CONTENT_LENGTH = 10_000

# Used by NoteCreate when the title is missing or blank
DEFAULT_NOTE_TITLE = "New note"

# Punctuation allowed in titles besides letters, numbers and the plain space.
# Control characters, tabs, newlines and angle brackets are rejected.
TITLE_PUNCTUATION = frozenset("-.,!?'\"()&*+/=[]{}@#$%^~`|\\:;«»„“”‘’…–—")


def _is_allowed_title_char(ch: str) -> bool:
    if ch == " " or ch in TITLE_PUNCTUATION:
        return True
    # Unicode letters (L*) and numbers (N*)
    return unicodedata.category(ch)[0] in ("L", "N")


def validate_title(value: str) -> str:
    """
    Trim and validate a note title.

    Args:
        value: Raw title from the request.

    Returns:
        The trimmed title.

    Raises:
        ValueError: If the title is empty, too long, or contains disallowed characters.
    """
    title = value.strip()
    if not title:
        raise ValueError("Title cannot be empty")
    # Length limit applies to the raw value, before trimming
    if len(value) > MAX_TITLE_LENGTH:
        raise ValueError(f"Title cannot exceed {MAX_TITLE_LENGTH} characters")
    if not all(_is_allowed_title_char(ch) for ch in title):
        raise ValueError("Title contains invalid characters")
    return title


def validate_content(value: str) -> str:
    """
    Trim and validate note content. Empty content is allowed.

    Raises:
        ValueError: If the content is too long.
    """
    if len(value) > MAX_CONTENT_LENGTH:
        raise ValueError(f"Content cannot exceed {MAX_CONTENT_LENGTH} characters")
    return value.strip()
