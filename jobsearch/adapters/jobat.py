"""Jobat adapter."""

from typing import Optional

from bs4 import Tag

from jobsearch.domain.models import ListingCandidate

from .results_page import ResultPageSourceAdapter


class JobatAdapter(ResultPageSourceAdapter):
    """Adapter for jobat.be.

    The results page has no stable markup, so blocks and fields are located
    with loose class-name selectors and the first selector that matches wins.

    Search URL: https://www.jobat.be/fr/jobs/results?k={keywords}&l={location}
    """

    SOURCE_NAME = "Jobat"
    SOURCE_TYPE = "jobat"
    BASE_URL = "https://www.jobat.be"
    SEARCH_PATH = "/fr/jobs/results"
    KEYWORDS_PARAM = "k"
    LOCATION_PARAM = "l"

    BLOCK_SELECTOR = "div[class*=job], article[class*=job], li[class*=vacancy]"

    TITLE_SELECTORS = ("h1, h2, h3, h4, h5, h6",)
    TITLE_ATTR_SELECTORS = ("a[title]",)
    TITLE_CLASS_SELECTORS = ("[class*=title]",)
    LINK_SELECTORS = (
        "a[href][title]",
        "a[class*=job][href]",
        "a[href]:not([href^='#'])",
    )
    COMPANY_SELECTORS = (
        "[itemprop=hiringOrganization]",
        "[class*=company], [class*=entreprise], [class*=employer]",
    )
    LOCATION_SELECTORS = (
        "[itemprop=jobLocation]",
        "[class*=location], [class*=lieu], [class*=city], [class*=ville]",
    )
    SALARY_SELECTORS = (
        "[itemprop=baseSalary]",
        "[class*=salary], [class*=salaire]",
    )
    CONTRACT_SELECTORS = ("[class*=contract], [class*=contrat]",)

    def parse_block(self, block: Tag) -> Optional[ListingCandidate]:
        title = (
            self._node_text(block, self.TITLE_SELECTORS)
            or self._node_attr(block, self.TITLE_ATTR_SELECTORS, "title")
            or self._node_text(block, self.TITLE_CLASS_SELECTORS)
        )
        return self._build_candidate(
            title=title,
            url=self._node_attr(block, self.LINK_SELECTORS, "href"),
            company=self._node_text(block, self.COMPANY_SELECTORS),
            location=self._node_text(block, self.LOCATION_SELECTORS),
            salary=self._node_text(block, self.SALARY_SELECTORS),
            contract_type=self._node_text(block, self.CONTRACT_SELECTORS),
        )
