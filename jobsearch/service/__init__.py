"""Caller-facing search service."""

from .exceptions import SearchRequestError
from .models import SearchRunResult
from .search import JobSearchService

__all__ = ["JobSearchService", "SearchRequestError", "SearchRunResult"]
