"""Exceptions raised by job board adapters."""

from typing import Optional


class SourceAdapterError(Exception):
    """Base exception for all adapter errors.

    The aggregator catches this per adapter: the failing board contributes no
    listings and the other boards carry on.
    """


class NetworkError(SourceAdapterError):
    """The board could not be queried (connection failure, timeout, HTTP 4xx)."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class SourceUnavailable(SourceAdapterError):
    """The board answered but refuses service (HTTP 5xx, 429 or 403)."""

    def __init__(self, message: str, url: str, status_code: int) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParsingError(SourceAdapterError):
    """A response could not be decoded or has an unusable structure."""


class NoResultsFound(SourceAdapterError):
    """The board explicitly reported that nothing matches.

    Adapters normally return an empty list instead; this exists for boards
    whose "no results" page must be told apart from a broken page.
    """


class AdapterConfigurationError(SourceAdapterError):
    """Invalid adapter settings or unknown board type."""
