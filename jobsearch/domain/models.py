"""Core domain models for listings, search requests and candidate profiles.

This module defines the data structures that flow through one search:
- ListingCandidate: immutable listing produced by a source adapter
- ScoredListing: a candidate plus its optional compatibility score
- SearchRequest: what the caller asks for
- CandidateProfile: read-only profile projection used for keyword planning
  and scoring prompts
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, List, Optional, Set

from pydantic import BaseModel, Field, field_validator, model_validator

from jobsearch.utils.text import normalize_whitespace
from jobsearch.utils.timestamps import ensure_utc, utc_now


class Language(str, Enum):
    """Working language a listing is written in."""

    FRENCH = "fr"
    DUTCH = "nl"
    ENGLISH = "en"


def listing_signature(title: str, company: str, location: str) -> str:
    """Dedup key for a listing: normalized title, company and location.

    Case and whitespace differences do not change the signature, so the same
    posting scraped from two boards collapses to one entry.

    Example:
        >>> listing_signature("DevOps  Engineer", "ACME", " Gent ")
        'devops engineer|acme|gent'
    """
    return "|".join(
        normalize_whitespace(part).lower() for part in (title, company, location)
    )


class ListingCandidate(BaseModel):
    """One job posting extracted from a source.

    Candidates are immutable once produced. They carry no explicit id; their
    identity for dedup purposes is the derived ``signature``.
    """

    title: str = Field(..., description="Job title")
    company: str = Field("", description="Employer name (may be unknown)")
    location: str = Field("", description="Free-text location")
    salary: Optional[str] = Field(None, description="Salary text as published")
    contract_type: Optional[str] = Field(None, description="Contract type as published")
    source_url: str = Field(..., description="Canonical link to the posting")
    source_name: str = Field(..., description="Board the listing came from")
    scraped_at: datetime = Field(default_factory=utc_now, description="Extraction time (UTC)")

    @field_validator("title", "source_url", "source_name", mode="before")
    @classmethod
    def require_text(cls, v: Any) -> str:
        """Collapse whitespace and reject empty required fields."""
        cleaned = normalize_whitespace(v) if isinstance(v, str) else v
        if not cleaned:
            raise ValueError("Field cannot be empty or whitespace-only")
        return cleaned

    @field_validator("company", "location", mode="before")
    @classmethod
    def optional_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return normalize_whitespace(v) if isinstance(v, str) else v

    @field_validator("salary", "contract_type", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        if isinstance(v, str):
            v = normalize_whitespace(v)
        return v or None

    @field_validator("scraped_at")
    @classmethod
    def scraped_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def signature(self) -> str:
        """Normalized (title, company, location) dedup key."""
        return listing_signature(self.title, self.company, self.location)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "title": "DevOps Engineer (m/v/x)",
                "company": "Example NV",
                "location": "Gent",
                "salary": None,
                "contract_type": "CDI",
                "source_url": "https://www.jobat.be/fr/emplois/123456",
                "source_name": "Jobat",
                "scraped_at": "2025-11-04T12:00:00Z",
            }
        },
    }


class ScoredListing(ListingCandidate):
    """A candidate with its compatibility score against the profile.

    ``score`` is None when scoring was skipped, failed or timed out for this
    listing. That is a normal outcome, not an error.
    """

    score: Optional[int] = Field(None, ge=0, le=100, description="Compatibility 0-100")
    match_reason: Optional[str] = Field(None, description="Short explanation of the score")
    missing_requirements: List[str] = Field(
        default_factory=list, description="Requirements the profile does not cover"
    )

    @property
    def is_scored(self) -> bool:
        return self.score is not None

    @classmethod
    def from_candidate(
        cls,
        candidate: ListingCandidate,
        score: Optional[int] = None,
        match_reason: Optional[str] = None,
        missing_requirements: Optional[List[str]] = None,
    ) -> "ScoredListing":
        """Wrap a candidate with scoring results.

        Only the candidate's listing fields are carried over, so re-scoring an
        already scored listing replaces its previous result.
        """
        listing_fields = candidate.model_dump(include=set(ListingCandidate.model_fields))
        return cls(
            **listing_fields,
            score=score,
            match_reason=match_reason,
            missing_requirements=missing_requirements or [],
        )

    @classmethod
    def unscored(cls, candidate: ListingCandidate) -> "ScoredListing":
        """Wrap a candidate without a score."""
        return cls.from_candidate(candidate)


class SkillGroup(BaseModel):
    """Named group of skills, in importance order."""

    name: str = ""
    skills: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class ExperienceEntry(BaseModel):
    """One professional experience from the profile."""

    position: Optional[str] = None
    company: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None

    model_config = {"frozen": True}


class EducationEntry(BaseModel):
    """One education entry from the profile."""

    degree: str = ""
    institution: str = ""

    model_config = {"frozen": True}


class CandidateProfile(BaseModel):
    """Read-only projection of the candidate's profile.

    Skills may be given either as ``skill_groups`` or, for hand-written
    profile files, as a flat ``skills`` list which becomes a single group.
    """

    first_name: str = ""
    last_name: str = ""
    summary: str = ""
    skill_groups: List[SkillGroup] = Field(default_factory=list)
    experiences: List[ExperienceEntry] = Field(default_factory=list)
    educations: List[EducationEntry] = Field(default_factory=list)
    language: str = Field("fr", description="Language the candidate writes in")

    @model_validator(mode="before")
    @classmethod
    def flat_skills_to_group(cls, data: Any) -> Any:
        if isinstance(data, dict) and "skills" in data:
            data = dict(data)
            skills = data.pop("skills") or []
            groups = list(data.get("skill_groups") or [])
            groups.append({"name": "Skills", "skills": skills})
            data["skill_groups"] = groups
        return data

    @property
    def full_name(self) -> str:
        return normalize_whitespace(f"{self.first_name} {self.last_name}")

    @property
    def flattened_skills(self) -> List[str]:
        """All skills across groups, declaration order, blanks removed."""
        flattened = []
        for group in self.skill_groups:
            for skill in group.skills:
                cleaned = normalize_whitespace(skill)
                if cleaned:
                    flattened.append(cleaned)
        return flattened

    @property
    def degrees(self) -> List[str]:
        return [
            normalize_whitespace(education.degree)
            for education in self.educations
            if normalize_whitespace(education.degree)
        ]

    def experiences_by_recency(self) -> List[ExperienceEntry]:
        """Experiences ordered most recent start date first.

        Entries without a start date go last, keeping their declared order.
        """
        dated = [exp for exp in self.experiences if exp.start_date is not None]
        undated = [exp for exp in self.experiences if exp.start_date is None]
        dated.sort(key=lambda exp: exp.start_date, reverse=True)
        return dated + undated

    def is_empty(self) -> bool:
        return not (self.experiences or self.flattened_skills or self.educations)

    model_config = {"frozen": True}


class SearchRequest(BaseModel):
    """Caller-supplied search parameters.

    ``keywords`` may be empty, in which case search terms are planned from the
    profile. Fields left as None fall back to configured defaults.
    """

    keywords: List[str] = Field(default_factory=list, description="Explicit search terms")
    location: Optional[str] = Field(None, description="Location filter passed to sources")
    max_results: Optional[int] = Field(None, ge=1, description="Upper bound on returned listings")
    selected_sources: Set[str] = Field(
        default_factory=set, description="Source names to query (empty = all)"
    )
    profile: Optional[CandidateProfile] = None
    min_score: Optional[int] = Field(None, ge=0, le=100)
    accepted_languages: Optional[Set[Language]] = None
    contract_types: List[str] = Field(
        default_factory=list, description="Contract types to keep, e.g. CDI (empty = all)"
    )
    posted_within: Optional[timedelta] = Field(
        None, description="Only listings scraped this recently (None = any age)"
    )
    use_scoring: bool = True

    @field_validator("keywords", mode="before")
    @classmethod
    def normalize_keywords(cls, v: Any) -> Any:
        """Accept a single string, drop blanks and exact duplicates."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple)):
            return v

        seen = set()
        keywords = []
        for keyword in v:
            cleaned = normalize_whitespace(keyword) if isinstance(keyword, str) else keyword
            if not cleaned or cleaned in seen:
                continue
            seen.add(cleaned)
            keywords.append(cleaned)
        return keywords

    @field_validator("location", mode="before")
    @classmethod
    def blank_location(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = normalize_whitespace(v)
        return v or None

    @field_validator("contract_types", mode="before")
    @classmethod
    def normalize_contract_types(cls, v: Any) -> Any:
        """Accept a single string, drop blanks and case-insensitive duplicates."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple, set)):
            return v

        seen = set()
        kinds = []
        for kind in v:
            if not isinstance(kind, str):
                kinds.append(kind)
                continue
            cleaned = normalize_whitespace(kind)
            if not cleaned or cleaned.lower() in seen:
                continue
            seen.add(cleaned.lower())
            kinds.append(cleaned)
        return kinds

    @field_validator("posted_within")
    @classmethod
    def positive_window(cls, v: Optional[timedelta]) -> Optional[timedelta]:
        if v is not None and v <= timedelta(0):
            raise ValueError("posted_within must be a positive duration")
        return v

    @field_validator("selected_sources", mode="before")
    @classmethod
    def normalize_sources(cls, v: Any) -> Any:
        """Source names are matched case-insensitively."""
        if v is None:
            return set()
        if isinstance(v, str):
            v = [v]
        return {
            normalize_whitespace(name).lower()
            for name in v
            if isinstance(name, str) and name.strip()
        }

    model_config = {"frozen": True}
