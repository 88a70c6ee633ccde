"""Result model for one search run."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from jobsearch.aggregation.models import AggregationResult
from jobsearch.domain.models import ScoredListing
from jobsearch.scoring.models import ScoringBatchResult


@dataclass
class SearchRunResult:
    """
    Everything one search produced, for callers that want more than the list.

    Attributes:
        run_id: Identifier stamped on every log record of the run
        keywords: Search terms actually used, in query order
        listings: Final ranked listings (at most max_results)
        aggregation_results: One fan-out result per keyword, in keyword order
        scoring: Scoring batch outcome, None when scoring was not requested
        merged_count: Listings left after the cross-keyword URL dedup
        language_filtered_count: Listings dropped for their language
        contract_filtered_count: Merged listings dropped for their contract type
        age_filtered_count: Merged listings older than the recency window
        below_min_score_count: Scored listings dropped by the minimum score
        keywords_planned: Whether keywords came from the profile
        started_at: UTC start of the run
        finished_at: UTC end of the run
    """

    run_id: str
    keywords: List[str]
    listings: List[ScoredListing]
    started_at: datetime
    finished_at: datetime
    aggregation_results: List[AggregationResult] = field(default_factory=list)
    scoring: Optional[ScoringBatchResult] = None
    merged_count: int = 0
    language_filtered_count: int = 0
    contract_filtered_count: int = 0
    age_filtered_count: int = 0
    below_min_score_count: int = 0
    keywords_planned: bool = False

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def collected_count(self) -> int:
        """Unique listings across keywords before the cross-keyword merge."""
        return sum(len(result.listings) for result in self.aggregation_results)

    @property
    def scored_count(self) -> int:
        return sum(1 for listing in self.listings if listing.is_scored)

    @property
    def failed_sources(self) -> List[str]:
        """Sources that failed or timed out for at least one keyword."""
        failed = []
        for result in self.aggregation_results:
            for name in result.failed_sources:
                if name not in failed:
                    failed.append(name)
        return failed
