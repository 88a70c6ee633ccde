"""Concurrent multi-source listing aggregation."""

from .aggregator import SourceAggregator
from .models import AggregationResult, ListingCollector, SourceRunStats

__all__ = [
    "SourceAggregator",
    "AggregationResult",
    "ListingCollector",
    "SourceRunStats",
]
