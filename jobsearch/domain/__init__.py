"""Domain models for the job search engine."""

from .models import (
    CandidateProfile,
    EducationEntry,
    ExperienceEntry,
    Language,
    ListingCandidate,
    ScoredListing,
    SearchRequest,
    SkillGroup,
    listing_signature,
)

__all__ = [
    "ListingCandidate",
    "ScoredListing",
    "SearchRequest",
    "CandidateProfile",
    "ExperienceEntry",
    "EducationEntry",
    "SkillGroup",
    "Language",
    "listing_signature",
]
