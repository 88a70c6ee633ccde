"""AI compatibility scoring of listings against the candidate profile."""

from .exceptions import (
    ScoringError,
    ScoringProcessError,
    ScoringResponseError,
    ScoringTimeoutError,
)
from .models import ScoreResult, ScoringBatchResult
from .parser import parse_score_response, strip_code_fences
from .pipeline import ScoringPipeline
from .prompt import PromptRenderer
from .scorer import CommandListingScorer, ListingScorer

__all__ = [
    "CommandListingScorer",
    "ListingScorer",
    "PromptRenderer",
    "ScoreResult",
    "ScoringBatchResult",
    "ScoringError",
    "ScoringPipeline",
    "ScoringProcessError",
    "ScoringResponseError",
    "ScoringTimeoutError",
    "parse_score_response",
    "strip_code_fences",
]
