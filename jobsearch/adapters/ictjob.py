"""ICTJob adapter."""

from typing import Optional

from bs4 import Tag

from jobsearch.domain.models import ListingCandidate

from .results_page import ResultPageSourceAdapter


class ICTJobAdapter(ResultPageSourceAdapter):
    """Adapter for ictjob.be, an IT-only board.

    Each result is an ``<li class="search-item">``; the title link carries
    the ``job-title`` class. The employer is the logo's alt text, or the
    ``hiringOrganization`` microdata when there is no logo.

    Search URL: https://www.ictjob.be/fr/chercher-emplois-it?keywords=...&location=...
    """

    SOURCE_NAME = "ICTJob"
    SOURCE_TYPE = "ictjob"
    BASE_URL = "https://www.ictjob.be"
    SEARCH_PATH = "/fr/chercher-emplois-it"
    KEYWORDS_PARAM = "keywords"
    LOCATION_PARAM = "location"

    DEFAULT_HEADERS = {
        **ResultPageSourceAdapter.DEFAULT_HEADERS,
        "Referer": "https://www.ictjob.be/",
    }

    BLOCK_SELECTOR = "li.search-item"

    TITLE_LINK_SELECTOR = "a.job-title[href]"
    LOGO_SELECTORS = ("img.search-item-logo[alt]",)
    COMPANY_SELECTORS = ("[itemprop=hiringOrganization]",)
    LOCATION_SELECTORS = ("[itemprop=jobLocation]",)

    DEFAULT_COMPANY = "ICTJob"
    DEFAULT_LOCATION = "Belgique"

    def parse_block(self, block: Tag) -> Optional[ListingCandidate]:
        link = block.select_one(self.TITLE_LINK_SELECTOR)
        if link is None:
            return None

        company = self._node_attr(block, self.LOGO_SELECTORS, "alt") or self._node_text(
            block, self.COMPANY_SELECTORS
        )
        return self._build_candidate(
            title=link.get_text(" ", strip=True),
            url=link.get("href"),
            company=company or self.DEFAULT_COMPANY,
            location=self._node_text(block, self.LOCATION_SELECTORS) or self.DEFAULT_LOCATION,
        )
