"""In-memory adapters for testing.

These adapters implement the board contract without any HTTP traffic:
- FixtureAdapter serves listings loaded from a YAML fixture file
- StaticAdapter serves a fixed list of listings
- FailingAdapter raises on every search
- SlowAdapter blocks until released, to exercise fan-out deadlines
"""

import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from jobsearch.adapters.base import BaseSourceAdapter
from jobsearch.adapters.exceptions import NetworkError
from jobsearch.domain.models import ListingCandidate

BASE_TIME = datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)


def make_listing(
    title: str,
    company: str = "ACME",
    location: str = "Bruxelles",
    source_name: str = "Fixture",
    url: Optional[str] = None,
    minutes_ago: int = 0,
    salary: Optional[str] = None,
    contract_type: Optional[str] = None,
) -> ListingCandidate:
    """Build a listing with a deterministic URL and scrape time."""
    slug = "-".join(f"{title} {company} {location}".lower().split())
    return ListingCandidate(
        title=title,
        company=company,
        location=location,
        salary=salary,
        contract_type=contract_type,
        source_url=url or f"https://jobs.example/{source_name.lower()}/{slug}",
        source_name=source_name,
        scraped_at=BASE_TIME - timedelta(minutes=minutes_ago),
    )


def load_fixture_listings(fixture_path: Path) -> Dict[str, List[Dict[str, Any]]]:
    """Load listing fixtures keyed by source name.

    Raises:
        FileNotFoundError: If the fixture file doesn't exist
    """
    if not fixture_path.exists():
        raise FileNotFoundError(f"Fixture file not found: {fixture_path}")

    with open(fixture_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return data.get("sources", {})


class StaticAdapter(BaseSourceAdapter):
    """Adapter returning the same listings for every search."""

    def __init__(self, name: str, listings: Sequence[ListingCandidate] = (), **kwargs):
        super().__init__(**kwargs)
        self._name = name
        self.listings = list(listings)
        self.calls: List[tuple] = []
        self.available = True

    @property
    def name(self) -> str:
        return self._name

    def matches_source(self, selected) -> bool:
        return self._name.lower() in {name.lower() for name in selected}

    def search(self, keywords: str, location: Optional[str] = None) -> List[ListingCandidate]:
        self.calls.append((keywords, location))
        return self._truncate(list(self.listings))

    def is_available(self) -> bool:
        return self.available


class FixtureAdapter(StaticAdapter):
    """Adapter serving the listings of one source from a YAML fixture.

    Fixture format::

        sources:
          Jobat:
            - title: DevOps Engineer
              company: ACME
              location: Gent
              minutes_ago: 5
    """

    def __init__(self, name: str, fixture_path: Path, **kwargs):
        entries = load_fixture_listings(fixture_path).get(name, [])
        listings = [
            make_listing(
                title=entry["title"],
                company=entry.get("company", ""),
                location=entry.get("location", ""),
                source_name=name,
                url=entry.get("url"),
                minutes_ago=entry.get("minutes_ago", 0),
                salary=entry.get("salary"),
            )
            for entry in entries
        ]
        super().__init__(name, listings, **kwargs)


class FailingAdapter(StaticAdapter):
    """Adapter whose every search raises ``error``."""

    def __init__(self, name: str, error: Optional[Exception] = None, **kwargs):
        super().__init__(name, **kwargs)
        self.error = error or NetworkError("Connection refused", url=f"https://{name.lower()}.example")
        self.available = False

    def search(self, keywords: str, location: Optional[str] = None) -> List[ListingCandidate]:
        self.calls.append((keywords, location))
        raise self.error


class SlowAdapter(StaticAdapter):
    """Adapter that blocks until ``release`` is set (or ``max_wait`` passes)."""

    def __init__(self, name: str, listings: Sequence[ListingCandidate] = (), max_wait: float = 5.0, **kwargs):
        super().__init__(name, listings, **kwargs)
        self.release = threading.Event()
        self.finished = threading.Event()
        self.max_wait = max_wait

    def search(self, keywords: str, location: Optional[str] = None) -> List[ListingCandidate]:
        self.calls.append((keywords, location))
        self.release.wait(self.max_wait)
        self.finished.set()
        return list(self.listings)

    def is_available(self) -> bool:
        self.release.wait(self.max_wait)
        return True
