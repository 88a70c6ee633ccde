"""Test helper utilities for the job search engine tests."""

from .fake_scorer import FakeScorer
from .fixture_adapter import (
    FailingAdapter,
    FixtureAdapter,
    SlowAdapter,
    StaticAdapter,
    load_fixture_listings,
    make_listing,
)

__all__ = [
    "FailingAdapter",
    "FakeScorer",
    "FixtureAdapter",
    "SlowAdapter",
    "StaticAdapter",
    "load_fixture_listings",
    "make_listing",
]
