"""Scoring result models."""

from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, Field

from jobsearch.domain.models import ScoredListing


class ScoreResult(BaseModel):
    """Parsed answer of the scoring command for one listing."""

    score: int = Field(..., ge=0, le=100, description="Compatibility 0-100")
    reason: Optional[str] = Field(None, description="Why the listing matches")
    missing: List[str] = Field(default_factory=list, description="Requirements not covered")

    model_config = {"frozen": True}


@dataclass
class ScoringBatchResult:
    """Outcome of scoring one batch of listings."""

    listings: List[ScoredListing] = field(default_factory=list)
    attempted_count: int = 0
    scored_count: int = 0
    failed_count: int = 0
    timed_out: bool = False
    skipped_reason: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def unscored_count(self) -> int:
        return len(self.listings) - self.scored_count
