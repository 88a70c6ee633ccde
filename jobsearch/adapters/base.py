"""Base adapter class with shared functionality for all job board adapters.

This module provides the abstract base class every board adapter implements,
along with shared helpers for HTTP requests, HTML field extraction with
BeautifulSoup selectors and candidate construction.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Sequence
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from jobsearch.domain.models import ListingCandidate
from jobsearch.logging import get_logger
from jobsearch.utils.text import normalize_whitespace
from jobsearch.utils.timestamps import utc_now

from .exceptions import (
    AdapterConfigurationError,
    NetworkError,
    ParsingError,
    SourceUnavailable,
)

logger = get_logger(__name__, component="adapter")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Status codes meaning "the board is up but will not serve us right now"
UNAVAILABLE_STATUS_CODES = frozenset({403, 429})


class BaseSourceAdapter(ABC):
    """Base class for all job board adapters.

    Provides shared HTTP request handling, error classification, and helpers
    for reading fields out of parsed HTML.

    All adapters must inherit from this class, set ``SOURCE_NAME``,
    ``SOURCE_TYPE`` and ``BASE_URL``, and implement ``search()``.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
        max_jobs: Maximum listings returned per call (0 = unlimited)
    """

    SOURCE_NAME: str = ""
    SOURCE_TYPE: str = ""
    BASE_URL: str = ""

    DEFAULT_HEADERS: Dict[str, str] = {
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "fr-BE,fr;q=0.9,en-US;q=0.8,en;q=0.7",
    }

    def __init__(
        self, timeout: int = 30, user_agent: str = DEFAULT_USER_AGENT, max_jobs: int = 200
    ) -> None:
        """Initialize adapter with configuration.

        Args:
            timeout: HTTP request timeout in seconds (range 5-300)
            user_agent: User-Agent header for requests
            max_jobs: Maximum listings to return per call (0 = unlimited)

        Raises:
            AdapterConfigurationError: If timeout is outside valid range or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise AdapterConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise AdapterConfigurationError("user_agent cannot be empty")
        if max_jobs < 0:
            raise AdapterConfigurationError(f"max_jobs cannot be negative, got: {max_jobs}")

        self.timeout = timeout
        self.user_agent = user_agent.strip()
        self.max_jobs = max_jobs

        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent, **self.DEFAULT_HEADERS})

    @property
    def name(self) -> str:
        """Display name of the board, stamped on every listing."""
        return self.SOURCE_NAME

    @property
    def availability_url(self) -> str:
        """URL probed by ``is_available()``."""
        return self.BASE_URL

    def matches_source(self, selected: Iterable[str]) -> bool:
        """Whether this adapter is named in a case-insensitive source selection."""
        wanted = {name.lower() for name in selected}
        return self.SOURCE_NAME.lower() in wanted or self.SOURCE_TYPE.lower() in wanted

    @abstractmethod
    def search(self, keywords: str, location: Optional[str] = None) -> List[ListingCandidate]:
        """Search the board.

        Zero matches is an empty list, never an exception. Listings whose
        title or URL cannot be extracted are skipped individually.

        Args:
            keywords: Search term as typed by the user
            location: Optional location filter

        Returns:
            Listings in the order the board presents them

        Raises:
            SourceAdapterError: When the board cannot be queried at all.
            Subclasses indicate the failure kind:
            - NetworkError: connection failure, timeout, HTTP 4xx
            - SourceUnavailable: HTTP 5xx, 429 or 403
            - ParsingError: undecodable or unusable response
        """

    def is_available(self) -> bool:
        """Lightweight reachability probe used for diagnostics only.

        Sends a HEAD request, falling back to GET for servers that reject
        HEAD. Never raises.
        """
        url = self.availability_url
        try:
            response = self._session.request(
                "HEAD", url, timeout=self.timeout, allow_redirects=True
            )
            if response.status_code == 405:
                response = self._session.request(
                    "GET", url, timeout=self.timeout, allow_redirects=True
                )
        except requests.exceptions.RequestException as e:
            logger.debug(
                f"Availability probe for {self.name} failed",
                extra={
                    "event": "adapter.probe.failed",
                    "source": self.name,
                    "url": url,
                    "error_type": type(e).__name__,
                },
            )
            return False

        available = response.status_code < 400
        logger.debug(
            f"Availability probe for {self.name}",
            extra={
                "event": "adapter.probe.completed",
                "source": self.name,
                "status_code": response.status_code,
                "available": available,
            },
        )
        return available

    def close(self) -> None:
        self._session.close()

    def _fetch_text(
        self,
        url: str,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        allow_partial: bool = False,
    ) -> str:
        """GET a URL and return the decoded body.

        Args:
            url: URL to fetch
            params: Query parameters
            headers: Extra headers merged over the session defaults
            allow_partial: Decode leniently; set for ``Range`` requests whose
                body may end in the middle of a multi-byte character

        Returns:
            Response body as text

        Raises:
            NetworkError: On timeout, connection failure or HTTP 4xx
            SourceUnavailable: On HTTP 5xx, 429 or 403
            ParsingError: If the body cannot be decoded
        """
        logger.debug(
            f"HTTP GET request to {url}",
            extra={
                "event": "adapter.fetch.request",
                "source": self.name,
                "url": url,
                "timeout": self.timeout,
            },
        )

        try:
            response = self._session.request(
                method="GET",
                url=url,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "adapter.fetch.timeout",
                    "source": self.name,
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise NetworkError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            logger.warning(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "adapter.fetch.error",
                    "source": self.name,
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise NetworkError(f"Request to {url} failed: {e}", url=url) from e

        status_code = response.status_code
        if status_code >= 400:
            unavailable = status_code >= 500 or status_code in UNAVAILABLE_STATUS_CODES
            logger.warning(
                f"HTTP {status_code} from {url}",
                extra={
                    "event": "adapter.fetch.unavailable" if unavailable else "adapter.fetch.error",
                    "source": self.name,
                    "status_code": status_code,
                    "url": url,
                },
            )
            message = f"HTTP {status_code}: {response.reason}"
            if unavailable:
                raise SourceUnavailable(message, url=url, status_code=status_code)
            raise NetworkError(message, url=url, status_code=status_code)

        return self._decode_body(response, url, allow_partial)

    def _decode_body(self, response: requests.Response, url: str, allow_partial: bool) -> str:
        # requests assumes ISO-8859-1 for text/* without a charset; boards serve UTF-8
        content_type = response.headers.get("Content-Type", "") or ""
        encoding = response.encoding if "charset" in content_type.lower() else "utf-8"
        try:
            return response.content.decode(encoding or "utf-8", errors="replace" if allow_partial else "strict")
        except (UnicodeDecodeError, LookupError) as e:
            logger.warning(
                f"Failed to decode response from {url}",
                extra={
                    "event": "adapter.fetch.decode_failed",
                    "source": self.name,
                    "url": url,
                    "encoding": encoding,
                },
            )
            raise ParsingError(f"Failed to decode response from {url}: {e}") from e

    @staticmethod
    def _parse_html(page: str) -> BeautifulSoup:
        return BeautifulSoup(page, "html.parser")

    @staticmethod
    def _node_text(node: Tag, selectors: Sequence[str]) -> Optional[str]:
        """Text of the first selector match with non-blank text."""
        for selector in selectors:
            for match in node.select(selector):
                text = normalize_whitespace(match.get_text(" ", strip=True))
                if text:
                    return text
        return None

    @staticmethod
    def _node_attr(node: Tag, selectors: Sequence[str], attr: str) -> Optional[str]:
        """Attribute of the first selector match where it is non-blank."""
        for selector in selectors:
            for match in node.select(selector):
                value = str(match.get(attr) or "").strip()
                if value:
                    return value
        return None

    @staticmethod
    def _extract_meta(soup: BeautifulSoup, prop: str) -> Optional[str]:
        """Content of a ``<meta property=... content=...>`` (or ``name=``) tag."""
        for key in ("property", "name"):
            for tag in soup.find_all("meta", attrs={key: prop}):
                value = normalize_whitespace(tag.get("content"))
                if value:
                    return value
        return None

    def _absolute_url(self, url: Optional[str]) -> str:
        if not url or not url.strip():
            return ""
        return urljoin(self.BASE_URL + "/", url.strip())

    @staticmethod
    def _matches_keywords(text: str, keywords: str) -> bool:
        """True when every whitespace-separated keyword occurs in text."""
        haystack = text.lower()
        return all(word in haystack for word in keywords.lower().split())

    def _build_candidate(
        self,
        title: Optional[str],
        url: Optional[str],
        company: Optional[str] = "",
        location: Optional[str] = "",
        salary: Optional[str] = None,
        contract_type: Optional[str] = None,
    ) -> Optional[ListingCandidate]:
        """Assemble a candidate from raw fragments, or None if title/URL are missing."""
        clean_title = normalize_whitespace(title)
        clean_url = self._absolute_url(url)

        if not clean_title or not clean_url:
            logger.debug(
                "Skipping listing without title or URL",
                extra={
                    "event": "adapter.listing.skipped",
                    "source": self.name,
                    "has_title": bool(clean_title),
                    "has_url": bool(clean_url),
                },
            )
            return None

        try:
            return ListingCandidate(
                title=clean_title,
                company=normalize_whitespace(company),
                location=normalize_whitespace(location),
                salary=normalize_whitespace(salary) or None,
                contract_type=normalize_whitespace(contract_type) or None,
                source_url=clean_url,
                source_name=self.name,
                scraped_at=utc_now(),
            )
        except ValidationError as e:
            logger.debug(
                "Skipping invalid listing",
                extra={
                    "event": "adapter.listing.invalid",
                    "source": self.name,
                    "url": clean_url,
                    "error": str(e),
                },
            )
            return None

    def _truncate(self, listings: List[ListingCandidate]) -> List[ListingCandidate]:
        """Truncate to max_jobs if configured."""
        if self.max_jobs > 0 and len(listings) > self.max_jobs:
            logger.warning(
                "Truncating listings to max_jobs limit",
                extra={
                    "event": "adapter.listings.truncated",
                    "source": self.name,
                    "total": len(listings),
                    "max": self.max_jobs,
                },
            )
            return listings[: self.max_jobs]

        return listings

    def __repr__(self) -> str:
        return f"{type(self).__name__}(timeout={self.timeout}, max_jobs={self.max_jobs})"

