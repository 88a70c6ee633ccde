"""Editx adapter."""

import re
from typing import List, Optional

from jobsearch.domain.models import ListingCandidate

from .sitemap import SitemapEntry, SitemapSourceAdapter

_DESCRIPTION_RE = re.compile(r"^(.*?) is looking for .*? in (.*?) (?:with|at)", re.IGNORECASE)


class EditxAdapter(SitemapSourceAdapter):
    """Adapter for editx.eu, a Belgian IT job board.

    Posting slugs carry the job title, so the keyword filter runs on the
    sitemap URLs before any posting is fetched. The employer and location are
    read from the OpenGraph description
    ("<Company> is looking for <Role> in <Location> with ...").
    """

    SOURCE_NAME = "Editx"
    SOURCE_TYPE = "editx"
    BASE_URL = "https://editx.eu"
    SITEMAP_URL = "https://editx.eu/sitemap.xml"

    MAX_CANDIDATES = 20
    DEFAULT_COMPANY = "Editx"
    DEFAULT_LOCATION = "Belgium"

    @property
    def availability_url(self) -> str:
        return self.BASE_URL

    def select_entries(self, entries: List[SitemapEntry], keywords: str) -> List[SitemapEntry]:
        selected = [
            entry
            for entry in entries
            if self.is_posting_url(entry.url) and self._matches_keywords(entry.url, keywords)
        ]
        return selected[: self.MAX_CANDIDATES]

    @staticmethod
    def is_posting_url(url: str) -> bool:
        """Posting pages live under /it-jobs/, excluding search and the index."""
        path = url.rstrip("/")
        return "/it-jobs/" in path and "/it-jobs/search" not in path

    def parse_detail(self, page: str, entry: SitemapEntry) -> Optional[ListingCandidate]:
        soup = self._parse_html(page)
        title = self._extract_meta(soup, "og:title")
        if not title and soup.title is not None:
            title = soup.title.get_text(" ", strip=True)
        if title:
            title = title.replace(" | Editx", "").replace(" - Editx", "")

        company = self.DEFAULT_COMPANY
        location = self.DEFAULT_LOCATION

        description = self._extract_meta(soup, "og:description") or ""
        match = _DESCRIPTION_RE.search(description)
        if match:
            company, location = match.group(1), match.group(2)
        elif " is looking for" in description:
            company = description.split(" is looking for", 1)[0] or company

        location = location.strip().rstrip(".")

        return self._build_candidate(
            title=title,
            url=entry.url,
            company=company.strip() or self.DEFAULT_COMPANY,
            location=location or self.DEFAULT_LOCATION,
        )
