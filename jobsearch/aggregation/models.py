"""Data models for one aggregator fan-out."""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from jobsearch.domain.models import ListingCandidate


@dataclass
class SourceRunStats:
    """
    Outcome of one adapter within one fan-out.

    Attributes:
        source_name: Board display name
        fetched_count: Listings the adapter returned
        kept_count: Listings kept after the per-source cap
        duration_seconds: Time the adapter ran (0 when it timed out)
        had_errors: Whether the adapter raised
        timed_out: Whether the adapter was abandoned at the fan-out deadline
        error_type: Exception class name when the adapter raised
        error_message: Exception text when the adapter raised
    """

    source_name: str
    fetched_count: int = 0
    kept_count: int = 0
    duration_seconds: float = 0.0
    had_errors: bool = False
    timed_out: bool = False
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return not (self.had_errors or self.timed_out)


@dataclass
class AggregationResult:
    """
    Listings collected for one keyword across every selected board.

    Attributes:
        keyword: Search term the fan-out ran for
        listings: Signature-deduplicated listings, most recent first
        source_stats: Per-adapter outcomes, in adapter order
        started_at: UTC time the fan-out began
        finished_at: UTC time the fan-out ended
        collected_count: Listings collected before dedup
        timed_out: Whether the fan-out deadline abandoned any adapter
    """

    keyword: str
    listings: List[ListingCandidate]
    started_at: datetime
    finished_at: datetime
    source_stats: List[SourceRunStats] = field(default_factory=list)
    collected_count: int = 0
    timed_out: bool = False

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def duplicates_removed(self) -> int:
        return self.collected_count - len(self.listings)

    @property
    def failed_sources(self) -> List[str]:
        return [stats.source_name for stats in self.source_stats if not stats.succeeded]


class ListingCollector:
    """Thread-safe append-only collection shared by concurrent adapters.

    Adapters running on worker threads append their listings as they finish.
    Once the fan-out joins (or its deadline passes) the collector is closed;
    listings delivered after that are discarded.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listings: List[ListingCandidate] = []
        self._closed = False

    def extend(self, listings: Iterable[ListingCandidate]) -> bool:
        """Append listings in order.

        Returns:
            False if the collector was already closed and nothing was added
        """
        batch = list(listings)
        with self._lock:
            if self._closed:
                return False
            self._listings.extend(batch)
            return True

    def close(self) -> List[ListingCandidate]:
        """Stop accepting listings and return everything collected."""
        with self._lock:
            self._closed = True
            return list(self._listings)
