"""Base class for boards searched through their XML sitemap.

Some boards have no usable search page. For those, the sitemap is fetched,
candidate posting URLs are picked from it, and the posting pages are fetched
in parallel on a bounded thread pool and read through their OpenGraph tags.
"""

from abc import abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from jobsearch.domain.models import ListingCandidate
from jobsearch.logging import get_logger
from jobsearch.logging.context import run_with_context
from jobsearch.utils.timestamps import parse_iso_datetime

from .base import DEFAULT_USER_AGENT, BaseSourceAdapter
from .exceptions import AdapterConfigurationError, SourceAdapterError

logger = get_logger(__name__, component="adapter")


@dataclass(frozen=True)
class SitemapEntry:
    """One ``<url>`` element of a sitemap."""

    url: str
    lastmod: Optional[datetime] = None


def parse_sitemap(xml_text: str) -> List[SitemapEntry]:
    """Extract entries from sitemap XML, document order.

    ``<url>`` elements are read with their ``<lastmod>`` when present; bare
    ``<loc>`` elements (as in sitemap indexes) are read without a date.
    """
    soup = BeautifulSoup(xml_text, "html.parser")

    entries = []
    for element in soup.find_all("url"):
        loc = element.find("loc")
        url = loc.get_text(strip=True) if loc else ""
        if url:
            lastmod = element.find("lastmod")
            entries.append(
                SitemapEntry(
                    url=url,
                    lastmod=parse_iso_datetime(lastmod.get_text(strip=True) if lastmod else None),
                )
            )

    if entries:
        return entries

    return [
        SitemapEntry(url=loc.get_text(strip=True))
        for loc in soup.find_all("loc")
        if loc.get_text(strip=True)
    ]


class SitemapSourceAdapter(BaseSourceAdapter):
    """Adapter that discovers postings through a sitemap.

    Subclasses choose which sitemap entries are worth fetching, read one
    posting page, and may reject a parsed listing (keyword or location
    mismatch).
    """

    SITEMAP_URL: str = ""
    DETAIL_HEADERS: Dict[str, str] = {}
    DETAIL_PARTIAL: bool = False

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str = DEFAULT_USER_AGENT,
        max_jobs: int = 200,
        detail_workers: int = 8,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent, max_jobs=max_jobs)
        if detail_workers < 1:
            raise AdapterConfigurationError(
                f"detail_workers must be at least 1, got: {detail_workers}"
            )
        self.detail_workers = detail_workers

    @property
    def availability_url(self) -> str:
        return self.SITEMAP_URL

    def search(self, keywords: str, location: Optional[str] = None) -> List[ListingCandidate]:
        logger.info(
            f"Fetching sitemap from {self.name}",
            extra={"event": "adapter.sitemap.fetching", "source": self.name, "url": self.SITEMAP_URL},
        )

        entries = parse_sitemap(self._fetch_text(self.SITEMAP_URL))
        selected = self.select_entries(entries, keywords)

        logger.info(
            f"Checking {len(selected)} postings from {self.name}",
            extra={
                "event": "adapter.sitemap.selected",
                "source": self.name,
                "entry_count": len(entries),
                "selected_count": len(selected),
            },
        )

        if not selected:
            return []

        workers = min(self.detail_workers, len(selected))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"{self.SOURCE_TYPE}-detail") as pool:
            parsed = list(pool.map(run_with_context(self._fetch_detail), selected))

        listings = [
            candidate
            for candidate in parsed
            if candidate is not None and self.accept(candidate, keywords, location)
        ]

        logger.info(
            f"Successfully fetched listings from {self.name}",
            extra={"event": "adapter.search.completed", "source": self.name, "count": len(listings)},
        )
        return self._truncate(listings)

    def _fetch_detail(self, entry: SitemapEntry) -> Optional[ListingCandidate]:
        # One unreachable posting only costs that posting
        try:
            page = self._fetch_text(
                entry.url, headers=self.DETAIL_HEADERS or None, allow_partial=self.DETAIL_PARTIAL
            )
        except SourceAdapterError as e:
            logger.debug(
                "Skipping posting that could not be fetched",
                extra={
                    "event": "adapter.detail.failed",
                    "source": self.name,
                    "url": entry.url,
                    "error_type": type(e).__name__,
                },
            )
            return None

        return self.parse_detail(page, entry)

    @abstractmethod
    def select_entries(self, entries: List[SitemapEntry], keywords: str) -> List[SitemapEntry]:
        """Pick the sitemap entries whose pages are fetched."""

    @abstractmethod
    def parse_detail(self, page: str, entry: SitemapEntry) -> Optional[ListingCandidate]:
        """Read one posting page, or None when no title can be found."""

    def accept(self, candidate: ListingCandidate, keywords: str, location: Optional[str]) -> bool:
        return True
