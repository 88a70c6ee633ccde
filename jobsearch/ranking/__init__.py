"""Listing dedup and ordering."""

from .ordering import (
    cap_results,
    dedup_by_signature,
    dedup_by_url,
    filter_contract_types,
    filter_min_score,
    filter_posted_within,
    merge_keyword_batches,
    sort_by_recency,
    sort_by_score,
)

__all__ = [
    "dedup_by_signature",
    "dedup_by_url",
    "merge_keyword_batches",
    "sort_by_recency",
    "sort_by_score",
    "filter_min_score",
    "filter_contract_types",
    "filter_posted_within",
    "cap_results",
]
