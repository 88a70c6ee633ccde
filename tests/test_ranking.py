"""Tests for listing dedup and ordering."""

from datetime import timedelta

import pytest

from jobsearch.domain.models import ScoredListing
from jobsearch.ranking import (
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
from tests.helpers import make_listing
from tests.helpers.fixture_adapter import BASE_TIME


def scored(title, score, **kwargs):
    return ScoredListing.from_candidate(make_listing(title, **kwargs), score=score)


class TestDedupBySignature:
    """Tests for signature-based dedup."""

    def test_keeps_first_occurrence(self):
        first = make_listing("DevOps Engineer", "ACME", "Gent", source_name="Jobat")
        duplicate = make_listing("devops engineer", "Acme", "gent", source_name="ICTJob")
        other = make_listing("Cloud Engineer", "ACME", "Gent")

        result = dedup_by_signature([first, duplicate, other])

        assert result == [first, other]

    def test_whitespace_and_case_do_not_change_signature(self):
        a = make_listing("Site  Reliability Engineer", "Smals", "Bruxelles")
        b = make_listing("site reliability   engineer", " SMALS ", "bruxelles ")

        assert a.signature == b.signature
        assert len(dedup_by_signature([a, b])) == 1

    def test_different_location_is_not_a_duplicate(self):
        a = make_listing("DevOps Engineer", "ACME", "Gent")
        b = make_listing("DevOps Engineer", "ACME", "Antwerpen")

        assert len(dedup_by_signature([a, b])) == 2

    def test_idempotent(self):
        listings = [
            make_listing("A", "X", "Gent"),
            make_listing("a", "x", "gent"),
            make_listing("B", "X", "Gent"),
            make_listing("B", "X", "Gent", source_name="Other"),
        ]

        once = dedup_by_signature(listings)

        assert dedup_by_signature(once) == once
        assert len(once) <= len(listings)

    def test_empty(self):
        assert dedup_by_signature([]) == []


class TestDedupByUrl:
    """Tests for URL-based dedup and cross-keyword merging."""

    def test_dedup_by_url(self):
        a = make_listing("DevOps Engineer", url="https://jobs.example/1")
        b = make_listing("DevOps Engineer (updated)", url="https://jobs.example/1")
        c = make_listing("Cloud Engineer", url="https://jobs.example/2")

        assert dedup_by_url([a, b, c]) == [a, c]

    def test_merge_keeps_first_keyword_version(self):
        """Test that a posting found by two keywords keeps the first one's copy."""
        from_devops = make_listing("DevOps Engineer", minutes_ago=1, url="https://jobs.example/1")
        from_cloud = make_listing("DevOps Engineer", minutes_ago=9, url="https://jobs.example/1")
        only_cloud = make_listing("Cloud Engineer", url="https://jobs.example/2")

        merged = merge_keyword_batches([[from_devops], [from_cloud, only_cloud]])

        assert merged == [from_devops, only_cloud]
        assert merged[0].scraped_at == from_devops.scraped_at

    def test_merge_same_signature_different_urls_kept(self):
        """Test that the merge dedups by URL, not signature."""
        a = make_listing("DevOps Engineer", url="https://jobat.example/1")
        b = make_listing("DevOps Engineer", url="https://ictjob.example/7")

        assert len(merge_keyword_batches([[a], [b]])) == 2

    def test_merge_empty_batches(self):
        assert merge_keyword_batches([[], []]) == []


class TestSorting:
    """Tests for recency and score ordering."""

    def test_sort_by_recency(self):
        old = make_listing("Old", minutes_ago=30)
        new = make_listing("New", minutes_ago=1)
        middle = make_listing("Middle", minutes_ago=10)

        assert sort_by_recency([old, new, middle]) == [new, middle, old]

    def test_sort_by_recency_is_stable(self):
        a = make_listing("A", minutes_ago=5)
        b = make_listing("B", minutes_ago=5)

        assert sort_by_recency([a, b]) == [a, b]
        assert sort_by_recency([b, a]) == [b, a]

    def test_sort_by_score_descending_unscored_last(self):
        unscored = ScoredListing.unscored(make_listing("Unscored"))
        low = scored("Low", 20)
        high = scored("High", 90)
        zero = scored("Zero", 0)

        result = sort_by_score([unscored, low, high, zero])

        assert [listing.title for listing in result] == ["High", "Low", "Zero", "Unscored"]

    def test_sort_by_score_keeps_unscored_order(self):
        first = ScoredListing.unscored(make_listing("First"))
        second = ScoredListing.unscored(make_listing("Second"))

        result = sort_by_score([first, scored("Scored", 50), second])

        assert [listing.title for listing in result] == ["Scored", "First", "Second"]


class TestFilters:
    """Tests for min-score filter and output cap."""

    def test_filter_min_score_drops_low_scores(self):
        listings = [scored("High", 80), scored("Low", 30), ScoredListing.unscored(make_listing("None"))]

        result = filter_min_score(listings, 50)

        assert [listing.title for listing in result] == ["High", "None"]

    def test_filter_min_score_boundary_is_inclusive(self):
        assert len(filter_min_score([scored("Edge", 50)], 50)) == 1

    def test_filter_min_score_zero_keeps_everything(self):
        listings = [scored("Zero", 0)]

        assert filter_min_score(listings, 0) == listings

    @pytest.mark.parametrize("cap,expected", [(2, 2), (5, 3), (0, 0)])
    def test_cap_results(self, cap, expected):
        listings = [make_listing(f"Job {i}") for i in range(3)]

        assert len(cap_results(listings, cap)) == expected

    def test_cap_results_keeps_head(self):
        listings = [make_listing(f"Job {i}") for i in range(3)]

        assert cap_results(listings, 2) == listings[:2]


class TestContractAndRecencyFilters:
    """Tests for the contract type and posting window filters."""

    def test_contract_type_substring_match(self):
        listings = [
            make_listing("Full time", contract_type="CDI - Temps plein"),
            make_listing("Fixed term", contract_type="CDD"),
            make_listing("Mission", contract_type="Freelance"),
        ]

        result = filter_contract_types(listings, ["CDI", "Freelance"])

        assert [listing.title for listing in result] == ["Full time", "Mission"]

    def test_contract_type_is_case_insensitive(self):
        listings = [make_listing("Internship", contract_type="stage")]

        assert filter_contract_types(listings, ["Stage"]) == listings

    def test_listing_without_contract_type_is_kept(self):
        untyped = make_listing("Untyped")
        typed = make_listing("Interim", contract_type="Intérim")

        result = filter_contract_types([untyped, typed], ["CDI"])

        assert result == [untyped]

    def test_empty_contract_selection_keeps_everything(self):
        listings = [make_listing("A", contract_type="CDD"), make_listing("B")]

        assert filter_contract_types(listings, []) == listings
        assert filter_contract_types(listings, ["  "]) == listings

    def test_posted_within_drops_older_listings(self):
        fresh = make_listing("Fresh", minutes_ago=30)
        day_old = make_listing("Day old", minutes_ago=24 * 60)
        stale = make_listing("Stale", minutes_ago=3 * 24 * 60)

        result = filter_posted_within([fresh, day_old, stale], timedelta(hours=24), now=BASE_TIME)

        assert result == [fresh, day_old]

    def test_posted_within_seven_days(self):
        listings = [make_listing(f"Job {days}", minutes_ago=days * 24 * 60) for days in (1, 6, 8)]

        result = filter_posted_within(listings, timedelta(days=7), now=BASE_TIME)

        assert [listing.title for listing in result] == ["Job 1", "Job 6"]

    def test_posted_within_none_keeps_everything(self):
        listings = [make_listing("Old", minutes_ago=10**6)]

        assert filter_posted_within(listings, None) == listings
