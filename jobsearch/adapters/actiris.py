"""Actiris adapter."""

import re
from typing import List, Optional

from jobsearch.domain.models import ListingCandidate

from .sitemap import SitemapEntry, SitemapSourceAdapter

_REFERENCE_SUFFIX_RE = re.compile(r"^(.*?) - Ref\.")


class ActirisAdapter(SitemapSourceAdapter):
    """Adapter for Actiris, the Brussels public employment service.

    The offer sitemap is a high-volume general feed, so only the newest
    entries are inspected. Posting pages are fetched with a ``Range`` header
    because the OpenGraph tags sit in the first few kilobytes.

    Listings are kept when every keyword word appears in the title, company
    or location, and when the location contains the requested location.
    """

    SOURCE_NAME = "Actiris"
    SOURCE_TYPE = "actiris"
    BASE_URL = "https://www.actiris.brussels"
    SITEMAP_URL = "https://www.actiris.brussels/sitemapoffers-fr.xml"

    DETAIL_HEADERS = {"Range": "bytes=0-30000"}
    DETAIL_PARTIAL = True

    MAX_CANDIDATES = 200
    DEFAULT_COMPANY = "Actiris / Employer"
    DEFAULT_LOCATION = "Bruxelles"

    def select_entries(self, entries: List[SitemapEntry], keywords: str) -> List[SitemapEntry]:
        """Newest dated entries first; undated entries are ignored."""
        dated = [entry for entry in entries if entry.lastmod is not None]
        dated.sort(key=lambda entry: entry.lastmod, reverse=True)
        return dated[: self.MAX_CANDIDATES]

    def parse_detail(self, page: str, entry: SitemapEntry) -> Optional[ListingCandidate]:
        soup = self._parse_html(page)
        title = self._extract_meta(soup, "og:title")
        if title:
            reference = _REFERENCE_SUFFIX_RE.match(title)
            if reference:
                title = reference.group(1)

        # "Title - Ref 123 - Belgique - Saint-Vith - Temps plein"
        description = self._extract_meta(soup, "og:description") or ""
        parts = description.split(" - ")
        location = self.DEFAULT_LOCATION
        if len(parts) >= 4:
            location = parts[3]
        elif len(parts) >= 3:
            location = parts[2]

        contract_type = parts[4] if len(parts) >= 5 else None

        return self._build_candidate(
            title=title,
            url=entry.url,
            company=self.DEFAULT_COMPANY,
            location=location.strip() or self.DEFAULT_LOCATION,
            contract_type=contract_type,
        )

    def accept(self, candidate: ListingCandidate, keywords: str, location: Optional[str]) -> bool:
        content = f"{candidate.title} {candidate.company} {candidate.location}"
        if not self._matches_keywords(content, keywords):
            return False
        if location and location.strip():
            return location.strip().lower() in candidate.location.lower()
        return True
