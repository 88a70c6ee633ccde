"""Dedup passes and orderings applied to listing lists.

All functions are pure: they return new lists and keep the relative order
of anything they do not explicitly reorder.
"""

from datetime import datetime, timedelta
from typing import Collection, Iterable, List, Optional, Sequence, TypeVar

from jobsearch.domain.models import ListingCandidate, ScoredListing
from jobsearch.utils.timestamps import utc_now

L = TypeVar("L", bound=ListingCandidate)


def dedup_by_signature(listings: Iterable[L]) -> List[L]:
    """Keep the first listing per (title, company, location) signature.

    Idempotent: applying it twice gives the same list as applying it once.
    """
    seen = set()
    unique = []
    for listing in listings:
        signature = listing.signature
        if signature in seen:
            continue
        seen.add(signature)
        unique.append(listing)
    return unique


def dedup_by_url(listings: Iterable[L]) -> List[L]:
    """Keep the first listing per source URL."""
    seen = set()
    unique = []
    for listing in listings:
        if listing.source_url in seen:
            continue
        seen.add(listing.source_url)
        unique.append(listing)
    return unique


def merge_keyword_batches(batches: Iterable[Sequence[L]]) -> List[L]:
    """Concatenate per-keyword batches, dropping URLs already seen.

    Batches are taken in the order given, so a posting surfaced by several
    keywords keeps the version from the first keyword that found it.
    """
    return dedup_by_url(listing for batch in batches for listing in batch)


def sort_by_recency(listings: Iterable[L]) -> List[L]:
    """Most recently scraped first; ties keep their arrival order."""
    return sorted(listings, key=lambda listing: listing.scraped_at, reverse=True)


def sort_by_score(listings: Iterable[ScoredListing]) -> List[ScoredListing]:
    """Highest score first, unscored listings after every scored one.

    The sort is stable, so equal scores and the unscored group keep their
    original relative order.
    """
    return sorted(
        listings,
        key=lambda listing: (listing.score is None, -(listing.score or 0)),
    )


def filter_min_score(listings: Iterable[ScoredListing], min_score: int) -> List[ScoredListing]:
    """Drop scored listings below min_score. Unscored listings always pass."""
    if min_score <= 0:
        return list(listings)
    return [
        listing
        for listing in listings
        if listing.score is None or listing.score >= min_score
    ]


def filter_contract_types(listings: Iterable[L], contract_types: Collection[str]) -> List[L]:
    """Keep listings whose contract type contains one of contract_types.

    Matching is a case-insensitive substring test, so "CDI" keeps
    "CDI - Temps plein". Listings with no published contract type always
    pass. An empty selection keeps everything.
    """
    wanted = [kind.strip().lower() for kind in contract_types if kind and kind.strip()]
    if not wanted:
        return list(listings)
    return [
        listing
        for listing in listings
        if listing.contract_type is None
        or any(kind in listing.contract_type.lower() for kind in wanted)
    ]


def filter_posted_within(
    listings: Iterable[L], max_age: Optional[timedelta], now: Optional[datetime] = None
) -> List[L]:
    """Keep listings scraped no longer than max_age before now. None keeps everything."""
    if max_age is None:
        return list(listings)
    cutoff = (now or utc_now()) - max_age
    return [listing for listing in listings if listing.scraped_at >= cutoff]


def cap_results(listings: Sequence[L], max_results: int) -> List[L]:
    """First max_results listings."""
    return list(listings[: max(max_results, 0)])
