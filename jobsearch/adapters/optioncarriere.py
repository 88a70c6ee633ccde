"""OptionCarriere adapter."""

from typing import Optional

from bs4 import Tag

from jobsearch.domain.models import ListingCandidate

from .results_page import ResultPageSourceAdapter


class OptionCarriereAdapter(ResultPageSourceAdapter):
    """Adapter for optioncarriere.be, a job search aggregator.

    Results are ``<article class="job clicky" data-url="...">`` blocks; the
    canonical link is the ``data-url`` attribute rather than the anchor.

    Search URL: https://www.optioncarriere.be/recherche/emplois?s=...&l=...
    """

    SOURCE_NAME = "OptionCarriere"
    SOURCE_TYPE = "optioncarriere"
    BASE_URL = "https://www.optioncarriere.be"
    SEARCH_PATH = "/recherche/emplois"
    KEYWORDS_PARAM = "s"
    LOCATION_PARAM = "l"

    DEFAULT_HEADERS = {
        **ResultPageSourceAdapter.DEFAULT_HEADERS,
        "Referer": "https://www.optioncarriere.be/",
    }

    BLOCK_SELECTOR = "article.job.clicky"

    TITLE_SELECTORS = ("h2 a",)
    COMPANY_SELECTORS = ("p.company",)
    LOCATION_SELECTORS = ("ul.location li",)
    SALARY_SELECTORS = ("li[class*=salary]",)

    DEFAULT_COMPANY = "OptionCarriere"
    DEFAULT_LOCATION = "Belgique"

    def parse_block(self, block: Tag) -> Optional[ListingCandidate]:
        return self._build_candidate(
            title=self._node_text(block, self.TITLE_SELECTORS),
            url=block.get("data-url"),
            company=self._node_text(block, self.COMPANY_SELECTORS) or self.DEFAULT_COMPANY,
            location=self._node_text(block, self.LOCATION_SELECTORS) or self.DEFAULT_LOCATION,
            salary=self._node_text(block, self.SALARY_SELECTORS),
        )
