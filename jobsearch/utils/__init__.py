"""Utility functions for time handling and text normalization."""

from .text import normalize_whitespace, truncate_text
from .timestamps import ensure_utc, format_timestamp, parse_iso_datetime, utc_now

__all__ = [
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "format_timestamp",
    # Text
    "normalize_whitespace",
    "truncate_text",
]
