"""Bounded-concurrency scoring of the top listings of a search."""

import asyncio
import time
from typing import List, Optional, Sequence

from jobsearch.domain.models import CandidateProfile, ListingCandidate, ScoredListing
from jobsearch.logging import get_logger
from jobsearch.ranking import sort_by_score

from .exceptions import ScoringError
from .models import ScoringBatchResult
from .scorer import ListingScorer

logger = get_logger(__name__, component="scoring")


class ScoringPipeline:
    """
    Scores the first ``top_n`` listings and passes the rest through unscored.

    At most ``max_concurrent`` scoring calls run at once; further calls wait
    on a semaphore rather than fail. The whole batch runs under
    ``batch_timeout`` seconds. When the deadline passes, in-flight calls are
    cancelled and every listing comes back unscored. A failing call only
    leaves its own listing unscored.

    Output order: scored listings by descending score, then the listings of
    the head whose scoring failed, then the unscored tail in input order.
    """

    def __init__(
        self,
        scorer: ListingScorer,
        max_concurrent: int = 5,
        top_n: int = 5,
        batch_timeout: float = 180.0,
        enabled: bool = True,
    ):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got: {max_concurrent}")
        if top_n < 0:
            raise ValueError(f"top_n cannot be negative, got: {top_n}")
        if batch_timeout <= 0:
            raise ValueError(f"batch_timeout must be positive, got: {batch_timeout}")

        self.scorer = scorer
        self.max_concurrent = max_concurrent
        self.top_n = top_n
        self.batch_timeout = batch_timeout
        self.enabled = enabled

    async def score_listings(
        self, candidates: Sequence[ListingCandidate], profile: Optional[CandidateProfile]
    ) -> List[ScoredListing]:
        """Score candidates; see score_batch for details."""
        result = await self.score_batch(candidates, profile)
        return result.listings

    async def score_batch(
        self, candidates: Sequence[ListingCandidate], profile: Optional[CandidateProfile]
    ) -> ScoringBatchResult:
        """
        Score the head of the candidate list against the profile.

        Every candidate appears exactly once in the output, scored or not.
        Never raises for scoring problems.

        Args:
            candidates: Listings in presentation order
            profile: Candidate profile; scoring is skipped without one

        Returns:
            ScoringBatchResult with the merged listing order
        """
        candidates = list(candidates)
        skipped_reason = self._skip_reason(candidates, profile)
        if skipped_reason:
            logger.info(
                f"Scoring skipped: {skipped_reason}",
                extra={
                    "event": "scoring.batch.skipped",
                    "reason": skipped_reason,
                    "listing_count": len(candidates),
                },
            )
            return ScoringBatchResult(
                listings=[ScoredListing.unscored(candidate) for candidate in candidates],
                skipped_reason=skipped_reason,
            )

        head = candidates[: self.top_n]
        tail = candidates[self.top_n :]
        start = time.monotonic()

        logger.info(
            f"Scoring {len(head)} of {len(candidates)} listings",
            extra={
                "event": "scoring.batch.started",
                "attempted_count": len(head),
                "passthrough_count": len(tail),
                "max_concurrent": self.max_concurrent,
                "batch_timeout_seconds": self.batch_timeout,
            },
        )

        semaphore = asyncio.Semaphore(self.max_concurrent)
        try:
            scored_head = await asyncio.wait_for(
                asyncio.gather(
                    *(self._score_one(candidate, profile, semaphore) for candidate in head)
                ),
                timeout=self.batch_timeout,
            )
        except asyncio.TimeoutError:
            duration = time.monotonic() - start
            logger.warning(
                f"Scoring batch timed out after {self.batch_timeout}s; returning unscored listings",
                extra={
                    "event": "scoring.batch.timed_out",
                    "batch_timeout_seconds": self.batch_timeout,
                    "attempted_count": len(head),
                },
            )
            return ScoringBatchResult(
                listings=[ScoredListing.unscored(candidate) for candidate in candidates],
                attempted_count=len(head),
                timed_out=True,
                duration_seconds=duration,
            )

        merged = sort_by_score(scored_head) + [ScoredListing.unscored(c) for c in tail]
        scored_count = sum(1 for listing in scored_head if listing.is_scored)

        result = ScoringBatchResult(
            listings=merged,
            attempted_count=len(head),
            scored_count=scored_count,
            failed_count=len(head) - scored_count,
            duration_seconds=time.monotonic() - start,
        )

        logger.info(
            f"Scoring batch completed: {scored_count}/{len(head)} scored",
            extra={
                "event": "scoring.batch.completed",
                "scored_count": result.scored_count,
                "failed_count": result.failed_count,
                "duration_seconds": round(result.duration_seconds, 3),
            },
        )
        return result

    def _skip_reason(
        self, candidates: Sequence[ListingCandidate], profile: Optional[CandidateProfile]
    ) -> Optional[str]:
        if not self.enabled:
            return "disabled"
        if profile is None:
            return "no_profile"
        if not candidates:
            return "no_listings"
        if self.top_n == 0:
            return "top_n_zero"
        return None

    async def _score_one(
        self,
        candidate: ListingCandidate,
        profile: CandidateProfile,
        semaphore: asyncio.Semaphore,
    ) -> ScoredListing:
        """Score one candidate. Never raises except on cancellation."""
        async with semaphore:
            try:
                result = await self.scorer.score(candidate, profile)
            except ScoringError as e:
                logger.warning(
                    f"Scoring failed for '{candidate.title}': {e}",
                    extra={
                        "event": "scoring.call.failed",
                        "source_url": candidate.source_url,
                        "error_type": type(e).__name__,
                    },
                )
                return ScoredListing.unscored(candidate)
            except Exception as e:
                logger.error(
                    f"Unexpected error scoring '{candidate.title}'",
                    extra={
                        "event": "scoring.call.crashed",
                        "source_url": candidate.source_url,
                        "error_type": type(e).__name__,
                    },
                    exc_info=True,
                )
                return ScoredListing.unscored(candidate)

        return ScoredListing.from_candidate(
            candidate,
            score=result.score,
            match_reason=result.reason,
            missing_requirements=result.missing,
        )
