"""Text normalization helpers."""

import re
from typing import Optional

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: Optional[str]) -> str:
    """Trim text and collapse inner whitespace runs to single spaces."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_text(text: Optional[str]) -> str:
    """Case-fold and whitespace-collapse text for comparisons."""
    return collapse_whitespace(text).casefold()


def truncate(text: Optional[str], length: int = 50) -> str:
    """Cut text to ``length`` characters."""
    if not text:
        return ""
    return text[:length]
