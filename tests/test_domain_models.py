"""Unit tests for domain models."""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from jobsearch.domain.models import (
    CandidateProfile,
    Language,
    ListingCandidate,
    ScoredListing,
    SearchRequest,
    listing_signature,
)


def candidate(**overrides):
    fields = {
        "title": "DevOps Engineer",
        "company": "ACME",
        "location": "Gent",
        "source_url": "https://www.jobat.be/fr/emplois/123",
        "source_name": "Jobat",
    }
    fields.update(overrides)
    return ListingCandidate(**fields)


class TestListingCandidate:
    """Tests for ListingCandidate model."""

    def test_valid_candidate(self):
        listing = candidate(salary="€ 4.000", contract_type="CDI")

        assert listing.title == "DevOps Engineer"
        assert listing.salary == "€ 4.000"
        assert listing.contract_type == "CDI"
        assert listing.scraped_at.tzinfo == timezone.utc

    def test_whitespace_collapsed(self):
        """Test that string fields are stripped and collapsed."""
        listing = candidate(title="  DevOps \n Engineer ", company="  ACME  ", location=None)

        assert listing.title == "DevOps Engineer"
        assert listing.company == "ACME"
        assert listing.location == ""

    @pytest.mark.parametrize("field", ["title", "source_url", "source_name"])
    def test_required_fields_cannot_be_blank(self, field):
        with pytest.raises(ValidationError):
            candidate(**{field: "   "})

    def test_blank_optional_text_becomes_none(self):
        listing = candidate(salary="  ", contract_type="")

        assert listing.salary is None
        assert listing.contract_type is None

    def test_naive_scraped_at_treated_as_utc(self):
        listing = candidate(scraped_at=datetime(2025, 11, 4, 12, 0))

        assert listing.scraped_at == datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)

    def test_aware_scraped_at_converted_to_utc(self):
        listing = candidate(scraped_at=datetime(2025, 11, 4, 13, 0, tzinfo=timezone(timedelta(hours=1))))

        assert listing.scraped_at.hour == 12

    def test_immutable(self):
        listing = candidate()

        with pytest.raises(ValidationError):
            listing.title = "Other"

    def test_signature(self):
        listing = candidate(title="DevOps  Engineer", company="ACME", location=" Gent ")

        assert listing.signature == "devops engineer|acme|gent"
        assert listing.signature == listing_signature("devops engineer", "Acme", "GENT")

    def test_signature_ignores_source(self):
        a = candidate(source_name="Jobat", source_url="https://jobat.example/1")
        b = candidate(source_name="ICTJob", source_url="https://ictjob.example/9")

        assert a.signature == b.signature


class TestScoredListing:
    """Tests for ScoredListing model."""

    def test_from_candidate(self):
        listing = candidate()

        scored = ScoredListing.from_candidate(
            listing, score=77, match_reason="Cloud skills", missing_requirements=["Dutch"]
        )

        assert scored.is_scored
        assert scored.score == 77
        assert scored.match_reason == "Cloud skills"
        assert scored.missing_requirements == ["Dutch"]
        assert scored.source_url == listing.source_url
        assert scored.signature == listing.signature

    def test_unscored(self):
        scored = ScoredListing.unscored(candidate())

        assert not scored.is_scored
        assert scored.score is None
        assert scored.missing_requirements == []

    def test_rescoring_replaces_previous_result(self):
        first = ScoredListing.from_candidate(candidate(), score=30, match_reason="Weak")

        second = ScoredListing.from_candidate(first, score=90)

        assert second.score == 90
        assert second.match_reason is None

    @pytest.mark.parametrize("score", [-1, 101])
    def test_score_range(self, score):
        with pytest.raises(ValidationError):
            ScoredListing.from_candidate(candidate(), score=score)


class TestCandidateProfile:
    """Tests for CandidateProfile model."""

    def test_flat_skills_become_group(self):
        profile = CandidateProfile.model_validate({"skills": ["Python", " ", "SQL"]})

        assert len(profile.skill_groups) == 1
        assert profile.flattened_skills == ["Python", "SQL"]

    def test_flat_skills_appended_to_groups(self):
        profile = CandidateProfile.model_validate(
            {
                "skill_groups": [{"name": "Cloud", "skills": ["AWS"]}],
                "skills": ["Python"],
            }
        )

        assert profile.flattened_skills == ["AWS", "Python"]

    def test_experiences_by_recency(self):
        profile = CandidateProfile.model_validate(
            {
                "experiences": [
                    {"position": "Undated", "company": "A"},
                    {"position": "Old", "company": "B", "start_date": "2015-01-01"},
                    {"position": "New", "company": "C", "start_date": "2023-06-01"},
                ]
            }
        )

        assert [exp.position for exp in profile.experiences_by_recency()] == ["New", "Old", "Undated"]
        assert profile.experiences[1].start_date == date(2015, 1, 1)

    def test_degrees_skip_blanks(self):
        profile = CandidateProfile.model_validate(
            {"educations": [{"degree": "Bachelor"}, {"degree": "  "}, {"institution": "ULB"}]}
        )

        assert profile.degrees == ["Bachelor"]

    def test_full_name(self):
        assert CandidateProfile(first_name="Camille").full_name == "Camille"
        assert CandidateProfile(first_name="Camille", last_name="Dupont").full_name == "Camille Dupont"

    def test_is_empty(self, profile):
        assert CandidateProfile().is_empty()
        assert not profile.is_empty()


class TestSearchRequest:
    """Tests for SearchRequest model."""

    def test_defaults(self):
        request = SearchRequest()

        assert request.keywords == []
        assert request.location is None
        assert request.max_results is None
        assert request.selected_sources == set()
        assert request.accepted_languages is None
        assert request.contract_types == []
        assert request.posted_within is None
        assert request.use_scoring is True

    def test_keywords_normalized(self):
        request = SearchRequest(keywords=["  devops ", "", "cloud  engineer", "devops"])

        assert request.keywords == ["devops", "cloud engineer"]

    def test_single_keyword_string(self):
        assert SearchRequest(keywords="devops").keywords == ["devops"]

    def test_sources_lowercased(self):
        request = SearchRequest(selected_sources=["Jobat", " ICTJob ", ""])

        assert request.selected_sources == {"jobat", "ictjob"}

    def test_blank_location(self):
        assert SearchRequest(location="   ").location is None

    def test_accepted_languages(self):
        request = SearchRequest(accepted_languages=["fr", "nl"])

        assert request.accepted_languages == {Language.FRENCH, Language.DUTCH}

    def test_contract_types_normalized(self):
        request = SearchRequest(contract_types=[" CDI ", "cdi", "", "Freelance"])

        assert request.contract_types == ["CDI", "Freelance"]

    def test_single_contract_type_string(self):
        assert SearchRequest(contract_types="Stage").contract_types == ["Stage"]

    def test_posted_within(self):
        assert SearchRequest(posted_within=timedelta(days=7)).posted_within == timedelta(days=7)

    @pytest.mark.parametrize("window", [timedelta(0), timedelta(hours=-1)])
    def test_posted_within_must_be_positive(self, window):
        with pytest.raises(ValidationError, match="positive"):
            SearchRequest(posted_within=window)

    @pytest.mark.parametrize(
        "kwargs", [{"max_results": 0}, {"min_score": -1}, {"min_score": 101}, {"accepted_languages": ["de"]}]
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValidationError):
            SearchRequest(**kwargs)
