"""Base class for boards that render search results as one HTML page."""

from abc import abstractmethod
from typing import Dict, List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import Tag

from jobsearch.domain.models import ListingCandidate
from jobsearch.logging import get_logger
from jobsearch.ranking import dedup_by_url

from .base import BaseSourceAdapter

logger = get_logger(__name__, component="adapter")


class ResultPageSourceAdapter(BaseSourceAdapter):
    """Adapter for a board with a query-string search page.

    Subclasses describe the page: where it lives, which query parameters carry
    the keywords and location, which CSS selector matches one listing block,
    and how to read a block.
    """

    SEARCH_PATH: str = ""
    KEYWORDS_PARAM: str = "q"
    LOCATION_PARAM: str = "l"
    BLOCK_SELECTOR: str = ""

    def build_search_request(
        self, keywords: str, location: Optional[str] = None
    ) -> Tuple[str, Dict[str, str]]:
        """URL and query parameters for a search."""
        params = {self.KEYWORDS_PARAM: keywords}
        if location and location.strip():
            params[self.LOCATION_PARAM] = location.strip()
        return urljoin(self.BASE_URL + "/", self.SEARCH_PATH.lstrip("/")), params

    def search(self, keywords: str, location: Optional[str] = None) -> List[ListingCandidate]:
        url, params = self.build_search_request(keywords, location)

        logger.info(
            f"Fetching listings from {self.name}",
            extra={"event": "adapter.search.started", "source": self.name, "url": url},
        )

        page = self._fetch_text(url, params=params)
        blocks = self.split_blocks(page)

        listings = []
        for block in blocks:
            candidate = self.parse_block(block)
            if candidate is not None:
                listings.append(candidate)

        # Separate blocks can link the same posting
        listings = dedup_by_url(listings)

        logger.info(
            f"Successfully fetched listings from {self.name}",
            extra={
                "event": "adapter.search.completed",
                "source": self.name,
                "block_count": len(blocks),
                "count": len(listings),
            },
        )
        return self._truncate(listings)

    def split_blocks(self, page: str) -> List[Tag]:
        """Listing blocks in page order.

        Loose selectors can match both a results wrapper and parts of one
        listing. A match holding two or more matches is a wrapper and is
        skipped; a match nested inside a listing block belongs to that
        listing and is not read on its own.
        """
        matches = self._parse_html(page).select(self.BLOCK_SELECTOR)
        matched = {id(node) for node in matches}

        inner_counts: Dict[int, int] = {}
        for node in matches:
            outer = next((parent for parent in node.parents if id(parent) in matched), None)
            if outer is not None:
                inner_counts[id(outer)] = inner_counts.get(id(outer), 0) + 1

        def is_wrapper(node: Tag) -> bool:
            return inner_counts.get(id(node), 0) > 1

        return [
            node
            for node in matches
            if not is_wrapper(node)
            and not any(
                id(parent) in matched and not is_wrapper(parent) for parent in node.parents
            )
        ]

    @abstractmethod
    def parse_block(self, block: Tag) -> Optional[ListingCandidate]:
        """Read one listing block, or None when title/URL are missing."""
