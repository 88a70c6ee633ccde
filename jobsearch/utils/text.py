"""Text helpers shared by adapters, signatures and the CLI."""

import re
from typing import Optional

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: Optional[str]) -> str:
    """Collapse every whitespace run to a single space and trim the ends.

    Example:
        >>> normalize_whitespace("  Data \\n  Engineer ")
        'Data Engineer'
    """
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate_text(text: str, max_length: int = 500, suffix: str = "...") -> str:
    """Truncate text to max_length (suffix included), breaking on a word if close.

    Example:
        >>> truncate_text("This is a very long text that needs truncating", max_length=30)
        'This is a very long text...'
    """
    if not text or len(text) <= max_length:
        return text

    truncate_at = max_length - len(suffix)
    if truncate_at <= 0:
        return suffix[:max_length]

    truncated = text[:truncate_at]

    # Only break on a space that is near the cut
    last_space = truncated.rfind(" ")
    if last_space > truncate_at * 0.8:
        truncated = truncated[:last_space]

    return truncated.rstrip() + suffix
