"""Concurrent fan-out of one search term across every job board."""

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Sequence

from jobsearch.adapters.base import BaseSourceAdapter
from jobsearch.adapters.exceptions import NoResultsFound, SourceAdapterError
from jobsearch.logging import get_logger
from jobsearch.logging.context import log_context, run_with_context
from jobsearch.ranking import dedup_by_signature, sort_by_recency
from jobsearch.utils.timestamps import utc_now

from .models import AggregationResult, ListingCollector, SourceRunStats

logger = get_logger(__name__, component="aggregator")


class SourceAggregator:
    """
    Runs every selected adapter concurrently for one keyword.

    Adapters are blocking (they use ``requests``), so each one runs on a
    worker thread of a pool owned by the fan-out. Failures are isolated per
    adapter: a raising adapter contributes nothing and is logged, the others
    are unaffected. Adapters still running when the deadline passes are
    abandoned and whatever they deliver later is discarded.

    The aggregator itself never raises for source problems. An empty result
    means "no listings", never "error".
    """

    def __init__(
        self,
        adapters: Sequence[BaseSourceAdapter],
        timeout_seconds: float = 45.0,
        max_results_per_source: int = 20,
    ):
        """
        Initialize the aggregator.

        Args:
            adapters: Board adapters to fan out to
            timeout_seconds: Deadline for one fan-out
            max_results_per_source: Listings kept from one adapter per keyword
                (0 keeps everything)
        """
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got: {timeout_seconds}")
        if max_results_per_source < 0:
            raise ValueError(
                f"max_results_per_source cannot be negative, got: {max_results_per_source}"
            )

        self._adapters = list(adapters)
        self.timeout_seconds = timeout_seconds
        self.max_results_per_source = max_results_per_source

    @property
    def adapters(self) -> List[BaseSourceAdapter]:
        return list(self._adapters)

    def source_names(self) -> List[str]:
        return [adapter.name for adapter in self._adapters]

    def select_adapters(self, selected_sources: Optional[Iterable[str]] = None) -> List[BaseSourceAdapter]:
        """Adapters named in selected_sources (case-insensitive), or all when empty."""
        selected = [name for name in (selected_sources or ()) if name and name.strip()]
        if not selected:
            return self.adapters
        return [adapter for adapter in self._adapters if adapter.matches_source(selected)]

    async def collect(
        self,
        keywords: str,
        location: Optional[str] = None,
        selected_sources: Optional[Iterable[str]] = None,
    ) -> AggregationResult:
        """
        Query the selected boards concurrently for one search term.

        Steps:
        1. Start one worker per adapter
        2. Wait until all finish or the deadline passes
        3. Cap each adapter's output, then dedup by signature keeping the
           first arrival
        4. Sort most recently scraped first

        Args:
            keywords: Search term
            location: Optional location filter
            selected_sources: Source names to query (empty = all)

        Returns:
            AggregationResult; its listings are empty when every board failed
        """
        selected = sorted(selected_sources or ())
        adapters = self.select_adapters(selected)
        started_at = utc_now()

        logger.info(
            f"Fan-out started for '{keywords}' across {len(adapters)} sources",
            extra={
                "event": "aggregator.run.started",
                "keyword": keywords,
                "location": location,
                "source_count": len(adapters),
                "timeout_seconds": self.timeout_seconds,
            },
        )

        if not adapters:
            logger.info(
                "No adapters match the selected sources",
                extra={
                    "event": "aggregator.run.no_sources",
                    "selected_sources": selected,
                },
            )
            return AggregationResult(
                keyword=keywords, listings=[], started_at=started_at, finished_at=utc_now()
            )

        collector = ListingCollector()
        loop = asyncio.get_running_loop()

        # Dedicated pool: abandoned workers must not hold up asyncio.run() shutdown
        executor = ThreadPoolExecutor(max_workers=len(adapters), thread_name_prefix="aggregator")
        try:
            futures = [
                loop.run_in_executor(
                    executor,
                    run_with_context(self._run_adapter),
                    adapter,
                    keywords,
                    location,
                    collector,
                )
                for adapter in adapters
            ]
            done, pending = await asyncio.wait(futures, timeout=self.timeout_seconds)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        collected = collector.close()

        source_stats = []
        for adapter, future in zip(adapters, futures):
            if future in done:
                source_stats.append(future.result())
                continue

            future.cancel()
            source_stats.append(SourceRunStats(source_name=adapter.name, timed_out=True))
            logger.warning(
                f"Source {adapter.name} abandoned after {self.timeout_seconds}s",
                extra={
                    "event": "aggregator.source.timed_out",
                    "source": adapter.name,
                    "keyword": keywords,
                    "timeout_seconds": self.timeout_seconds,
                },
            )

        listings = sort_by_recency(dedup_by_signature(collected))

        result = AggregationResult(
            keyword=keywords,
            listings=listings,
            started_at=started_at,
            finished_at=utc_now(),
            source_stats=source_stats,
            collected_count=len(collected),
            timed_out=bool(pending),
        )

        logger.info(
            f"Fan-out completed for '{keywords}': {len(listings)} unique listings",
            extra={
                "event": "aggregator.run.completed",
                "keyword": keywords,
                "collected_count": result.collected_count,
                "unique_count": len(listings),
                "duplicates_removed": result.duplicates_removed,
                "failed_sources": result.failed_sources,
                "duration_seconds": round(result.duration_seconds, 3),
            },
        )
        return result

    def _run_adapter(
        self,
        adapter: BaseSourceAdapter,
        keywords: str,
        location: Optional[str],
        collector: ListingCollector,
    ) -> SourceRunStats:
        """Run one adapter on a worker thread. Never raises."""
        stats = SourceRunStats(source_name=adapter.name)
        start = time.monotonic()

        with log_context(source=adapter.name):
            try:
                listings = adapter.search(keywords, location)
            except NoResultsFound:
                stats.duration_seconds = time.monotonic() - start
                logger.info(
                    f"No results from {adapter.name}",
                    extra={"event": "aggregator.source.empty", "keyword": keywords},
                )
                return stats
            except SourceAdapterError as e:
                stats.duration_seconds = time.monotonic() - start
                stats.had_errors = True
                stats.error_type = type(e).__name__
                stats.error_message = str(e)
                logger.warning(
                    f"Source {adapter.name} failed: {e}",
                    extra={
                        "event": "aggregator.source.failed",
                        "keyword": keywords,
                        "error_type": stats.error_type,
                    },
                )
                return stats
            except Exception as e:
                stats.duration_seconds = time.monotonic() - start
                stats.had_errors = True
                stats.error_type = type(e).__name__
                stats.error_message = str(e)
                logger.error(
                    f"Unexpected error from source {adapter.name}",
                    extra={
                        "event": "aggregator.source.crashed",
                        "keyword": keywords,
                        "error_type": stats.error_type,
                    },
                    exc_info=True,
                )
                return stats

            stats.duration_seconds = time.monotonic() - start
            stats.fetched_count = len(listings)

            if self.max_results_per_source > 0:
                listings = listings[: self.max_results_per_source]
            stats.kept_count = len(listings)

            if not collector.extend(listings):
                logger.debug(
                    f"Discarding late results from {adapter.name}",
                    extra={"event": "aggregator.source.late", "count": len(listings)},
                )
            else:
                logger.info(
                    f"Collected {len(listings)} listings from {adapter.name}",
                    extra={
                        "event": "aggregator.source.completed",
                        "keyword": keywords,
                        "fetched_count": stats.fetched_count,
                        "kept_count": stats.kept_count,
                        "duration_seconds": round(stats.duration_seconds, 3),
                    },
                )

        return stats

    async def probe_sources(self) -> Dict[str, bool]:
        """Run every adapter's availability probe concurrently.

        Probes still running at the fan-out deadline count as unavailable.
        """
        if not self._adapters:
            return {}

        loop = asyncio.get_running_loop()
        executor = ThreadPoolExecutor(max_workers=len(self._adapters), thread_name_prefix="probe")
        try:
            futures = [
                loop.run_in_executor(executor, run_with_context(adapter.is_available))
                for adapter in self._adapters
            ]
            done, pending = await asyncio.wait(futures, timeout=self.timeout_seconds)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        availability = {}
        for adapter, future in zip(self._adapters, futures):
            if future in done and future.exception() is None:
                availability[adapter.name] = bool(future.result())
            else:
                future.cancel()
                availability[adapter.name] = False

        logger.info(
            "Source availability checked",
            extra={
                "event": "aggregator.probe.completed",
                "available": sorted(name for name, ok in availability.items() if ok),
                "unavailable": sorted(name for name, ok in availability.items() if not ok),
            },
        )
        return availability
