"""Search term planning from a candidate profile."""

import re
from typing import List, Optional, Sequence

from jobsearch.domain.models import CandidateProfile
from jobsearch.logging import get_logger
from jobsearch.utils.text import normalize_whitespace

logger = get_logger(__name__, component="planner")

MAX_KEYWORDS = 8
MAX_SKILL_TERMS = 8
MIN_TERMS_BEFORE_DEGREES = 3

DEFAULT_KEYWORDS = ("Developer", "IT Support", "Project Manager")

SENIORITY_QUALIFIERS = ("junior", "senior", "intern", "stagiaire")
_QUALIFIER_RE = re.compile(
    r"\b(?:" + "|".join(SENIORITY_QUALIFIERS) + r")\b", re.IGNORECASE
)


def strip_seniority(position: str) -> str:
    """Remove seniority/intern qualifiers from a job title.

    Example:
        >>> strip_seniority("Senior DevOps Engineer")
        'DevOps Engineer'
    """
    return normalize_whitespace(_QUALIFIER_RE.sub(" ", position))


class _OrderedTerms:
    """Insertion-ordered set of exact strings."""

    def __init__(self) -> None:
        self._terms: List[str] = []
        self._seen = set()

    def add(self, term: Optional[str]) -> None:
        cleaned = normalize_whitespace(term)
        if cleaned and cleaned not in self._seen:
            self._seen.add(cleaned)
            self._terms.append(cleaned)

    def __len__(self) -> int:
        return len(self._terms)

    def as_list(self) -> List[str]:
        return list(self._terms)


def plan_keywords(
    profile: Optional[CandidateProfile],
    max_keywords: int = MAX_KEYWORDS,
    default_keywords: Sequence[str] = DEFAULT_KEYWORDS,
) -> List[str]:
    """
    Derive search terms from a profile.

    Priority order:
    1. Experience positions, most recent first, each followed by its variant
       without seniority qualifiers
    2. Up to eight skills, in declared order
    3. Education degrees, only when fewer than three terms exist so far
    4. The default terms when nothing was found

    The result is truncated to max_keywords in insertion order. Total over
    any input, including None.

    Args:
        profile: Candidate profile, or None
        max_keywords: Upper bound on returned terms (at most 8)
        default_keywords: Terms used when the profile yields nothing

    Returns:
        Ordered list of unique search terms
    """
    limit = max(1, min(max_keywords, MAX_KEYWORDS))
    terms = _OrderedTerms()

    if profile is not None:
        for experience in profile.experiences_by_recency():
            if not experience.position:
                continue
            terms.add(experience.position)
            terms.add(strip_seniority(experience.position))

        for skill in profile.flattened_skills[:MAX_SKILL_TERMS]:
            terms.add(skill)

        if len(terms) < MIN_TERMS_BEFORE_DEGREES:
            for degree in profile.degrees:
                terms.add(degree)

    planned = terms.as_list()
    source = "profile"
    if not planned:
        planned = [term for term in default_keywords if term]
        source = "defaults"

    planned = planned[:limit]

    logger.debug(
        f"Planned {len(planned)} search terms",
        extra={
            "event": "planner.keywords.planned",
            "keyword_source": source,
            "keywords": planned,
        },
    )
    return planned
