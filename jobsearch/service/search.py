"""Caller-facing job search service."""

import asyncio
from datetime import timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import uuid4

from jobsearch.adapters.base import BaseSourceAdapter
from jobsearch.adapters.factory import build_adapters
from jobsearch.aggregation import AggregationResult, SourceAggregator
from jobsearch.config.models import AppConfig
from jobsearch.domain.models import ScoredListing, SearchRequest
from jobsearch.language import LanguageClassifier, filter_by_language
from jobsearch.logging import get_logger
from jobsearch.logging.context import log_context
from jobsearch.planning import plan_keywords
from jobsearch.ranking import (
    cap_results,
    filter_contract_types,
    filter_min_score,
    filter_posted_within,
    merge_keyword_batches,
)
from jobsearch.scoring import CommandListingScorer, ListingScorer, ScoringPipeline
from jobsearch.utils.timestamps import utc_now

from .exceptions import SearchRequestError
from .models import SearchRunResult

logger = get_logger(__name__, component="search")


class JobSearchService:
    """
    Runs a complete search: plan keywords, fan out to the boards per keyword,
    filter by language, merge across keywords, score the head and rank.

    Nothing in a search raises for source problems, scoring problems or empty
    results. The only error is SearchRequestError when no search term can be
    determined at all.
    """

    def __init__(
        self,
        app_config: AppConfig,
        adapters: Optional[Sequence[BaseSourceAdapter]] = None,
        scorer: Optional[ListingScorer] = None,
        classifier: Optional[LanguageClassifier] = None,
    ):
        """
        Initialize the service.

        Args:
            app_config: Application configuration
            adapters: Board adapters (default: built from the enabled sources)
            scorer: Listing scorer (default: the configured scoring command)
            classifier: Language classifier (default: the standard rule table)
        """
        self.app_config = app_config
        search_config = app_config.search
        scoring_config = app_config.scoring

        if adapters is None:
            adapters = build_adapters(app_config)

        self.aggregator = SourceAggregator(
            adapters,
            timeout_seconds=search_config.aggregator_timeout_seconds,
            max_results_per_source=search_config.max_results_per_source,
        )

        if scorer is None:
            scorer = CommandListingScorer(
                scoring_config.command,
                prompt_mode=scoring_config.prompt_mode,
                call_timeout=scoring_config.call_timeout_seconds,
            )

        self.scoring_pipeline = ScoringPipeline(
            scorer,
            max_concurrent=scoring_config.max_concurrent,
            top_n=scoring_config.top_n,
            batch_timeout=scoring_config.batch_timeout_seconds,
            enabled=scoring_config.enabled,
        )
        self.classifier = classifier or LanguageClassifier()

    def search(self, request: SearchRequest) -> List[ScoredListing]:
        """Run a search and return the ranked listings.

        Blocking wrapper around run_async(); do not call it from inside a
        running event loop.
        """
        return self.run(request).listings

    def run(self, request: SearchRequest) -> SearchRunResult:
        """Blocking wrapper around run_async()."""
        return asyncio.run(self.run_async(request))

    async def run_async(self, request: SearchRequest) -> SearchRunResult:
        """
        Execute one search.

        Steps:
        1. Use the request keywords, or plan them from the profile
        2. Fan out to the selected boards per keyword, a few keywords at a time
        3. Drop listings in unaccepted languages
        4. Merge keyword batches, deduplicating by URL (first keyword wins)
        5. Drop listings of unselected contract types or outside the recency window
        6. Score the head of the list against the profile
        7. Drop scored listings below the minimum score and cap the output

        Args:
            request: What to search for

        Returns:
            SearchRunResult; its listings may be empty

        Raises:
            SearchRequestError: If no search term can be determined
        """
        run_id = uuid4().hex
        started_at = utc_now()
        search_config = self.app_config.search

        with log_context(run_id=run_id):
            keywords, planned = self._resolve_keywords(request)
            location = request.location or search_config.default_location
            max_results = request.max_results or search_config.max_results
            min_score = (
                request.min_score if request.min_score is not None else search_config.min_score
            )
            accepted = (
                request.accepted_languages
                if request.accepted_languages is not None
                else search_config.accepted_languages
            )
            contract_types = request.contract_types or search_config.contract_types
            posted_within = request.posted_within
            if posted_within is None and search_config.posted_within_seconds:
                posted_within = timedelta(seconds=search_config.posted_within_seconds)

            logger.info(
                f"Search started with {len(keywords)} keywords",
                extra={
                    "event": "search.run.started",
                    "keywords": keywords,
                    "keywords_planned": planned,
                    "location": location,
                    "max_results": max_results,
                    "selected_sources": sorted(request.selected_sources),
                    "contract_types": contract_types,
                    "posted_within_seconds": (
                        int(posted_within.total_seconds()) if posted_within else None
                    ),
                },
            )

            aggregation_results = await self._collect_all(
                keywords, location, request.selected_sources
            )

            batches = []
            language_filtered = 0
            for result in aggregation_results:
                kept = filter_by_language(result.listings, accepted, classifier=self.classifier)
                language_filtered += len(result.listings) - len(kept)
                batches.append(kept)

            merged = merge_keyword_batches(batches)

            # Filtered before scoring so the scored head only holds eligible listings
            by_contract = filter_contract_types(merged, contract_types)
            eligible = filter_posted_within(by_contract, posted_within)

            scoring_result = None
            if request.use_scoring:
                scoring_result = await self.scoring_pipeline.score_batch(eligible, request.profile)
                ranked = scoring_result.listings
            else:
                ranked = [ScoredListing.unscored(listing) for listing in eligible]

            filtered = filter_min_score(ranked, min_score)
            listings = cap_results(filtered, max_results)

            result = SearchRunResult(
                run_id=run_id,
                keywords=keywords,
                listings=listings,
                started_at=started_at,
                finished_at=utc_now(),
                aggregation_results=aggregation_results,
                scoring=scoring_result,
                merged_count=len(merged),
                language_filtered_count=language_filtered,
                contract_filtered_count=len(merged) - len(by_contract),
                age_filtered_count=len(by_contract) - len(eligible),
                below_min_score_count=len(ranked) - len(filtered),
                keywords_planned=planned,
            )

            logger.info(
                f"Search completed: {len(listings)} listings",
                extra={
                    "event": "search.run.completed",
                    "result_count": len(listings),
                    "collected_count": result.collected_count,
                    "merged_count": result.merged_count,
                    "language_filtered_count": result.language_filtered_count,
                    "contract_filtered_count": result.contract_filtered_count,
                    "age_filtered_count": result.age_filtered_count,
                    "scored_count": result.scored_count,
                    "failed_sources": result.failed_sources,
                    "duration_seconds": round(result.duration_seconds, 3),
                },
            )
            return result

    def _resolve_keywords(self, request: SearchRequest) -> Tuple[List[str], bool]:
        max_keywords = self.app_config.search.max_keywords
        if request.keywords:
            return list(request.keywords[:max_keywords]), False

        keywords = plan_keywords(request.profile, max_keywords=max_keywords)
        if not keywords:
            logger.error(
                "No search terms could be determined",
                extra={"event": "search.request.invalid"},
            )
            raise SearchRequestError(
                "No search terms: give keywords or a profile with experience, skills or education"
            )
        return keywords, True

    async def _collect_all(
        self, keywords: List[str], location: Optional[str], selected_sources: Iterable[str]
    ) -> List[AggregationResult]:
        """Fan out per keyword; results come back in keyword order."""
        semaphore = asyncio.Semaphore(self.app_config.search.max_concurrent_keywords)

        async def collect(keyword: str) -> AggregationResult:
            async with semaphore:
                with log_context(keyword=keyword):
                    return await self.aggregator.collect(keyword, location, selected_sources)

        return list(await asyncio.gather(*(collect(keyword) for keyword in keywords)))

    async def check_sources_async(self) -> Dict[str, bool]:
        return await self.aggregator.probe_sources()

    def check_sources(self) -> Dict[str, bool]:
        """Probe every configured board; maps source name to reachability."""
        return asyncio.run(self.check_sources_async())

    def available_sources(self) -> List[str]:
        """Names of the configured boards, in query order."""
        return self.aggregator.source_names()

    def close(self) -> None:
        """Release the adapters' HTTP sessions."""
        for adapter in self.aggregator.adapters:
            adapter.close()
