"""Heuristic language classification of job listings.

Belgian boards mix French, Dutch and English postings. The classifier looks
only at title, company and location, and resolves through an ordered rule
table: the first rule whose predicate holds decides the language. The order
is the behavior, so it is kept in one auditable list.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Pattern, Sequence, Tuple, TypeVar

from jobsearch.domain.models import Language, ListingCandidate
from jobsearch.logging import get_logger

logger = get_logger(__name__, component="language")

L = TypeVar("L", bound=ListingCandidate)

# Gender-neutral suffixes and vacancy wording only Dutch postings use
STRONG_DUTCH_MARKERS = (r"m/v(?:/x)?", r"vacature", r"wij zoeken", r"solliciteer")
# Gender-pair suffixes and "apply" wording only French postings use
STRONG_FRENCH_MARKERS = (r"h/f(?:/x)?", r"f/h", r"postuler", r"postulez")

FRENCH_KEYWORDS = (
    "bruxelles", "liège", "liege", "namur", "développeur", "ingénieur",
    "société", "équipe", "emploi", "wallonie",
)
DUTCH_KEYWORDS = (
    "brussel", "antwerpen", "gent", "ontwikkelaar", "bedrijf", "vlaanderen", "werken",
)
ENGLISH_KEYWORDS = (
    "developer", "engineer", "software", "manager", "analyst", "consultant",
    "architect", "company", "team",
)


def _compile(terms: Sequence[str], plural: bool = False) -> Pattern[str]:
    suffix = r"s?" if plural else ""
    return re.compile(r"(?<!\w)(?:" + "|".join(terms) + r")" + suffix + r"(?!\w)")


@dataclass(frozen=True)
class LanguageSignals:
    """Everything the rules look at, computed once per listing."""

    text: str
    strong_dutch: bool
    strong_french: bool
    french_hits: int
    dutch_hits: int
    english_hits: int
    mentions_brussels: bool


@dataclass(frozen=True)
class LanguageRule:
    """One (predicate, outcome) row of the rule table."""

    name: str
    predicate: Callable[[LanguageSignals], bool]
    language: Language


DEFAULT_RULES: Tuple[LanguageRule, ...] = (
    LanguageRule("strong-dutch-marker", lambda s: s.strong_dutch, Language.DUTCH),
    LanguageRule("strong-french-marker", lambda s: s.strong_french, Language.FRENCH),
    LanguageRule("english-keyword", lambda s: s.english_hits > 0, Language.ENGLISH),
    LanguageRule(
        "french-majority",
        lambda s: s.french_hits > s.dutch_hits and s.french_hits > 0,
        Language.FRENCH,
    ),
    LanguageRule(
        "dutch-majority",
        lambda s: s.dutch_hits > s.french_hits and s.dutch_hits > 0,
        Language.DUTCH,
    ),
    LanguageRule("brussels-default", lambda s: s.mentions_brussels, Language.FRENCH),
    LanguageRule("fallback", lambda s: True, Language.ENGLISH),
)


class LanguageClassifier:
    """Ordered-rule language classifier.

    Example:
        >>> LanguageClassifier().classify("Software Engineer (m/v/x) Gent")
        <Language.DUTCH: 'nl'>
    """

    def __init__(self, rules: Sequence[LanguageRule] = DEFAULT_RULES):
        if not rules:
            raise ValueError("At least one language rule is required")
        self.rules = tuple(rules)
        self._strong_dutch = _compile(STRONG_DUTCH_MARKERS)
        self._strong_french = _compile(STRONG_FRENCH_MARKERS)
        self._french_terms = [_compile([term]) for term in FRENCH_KEYWORDS]
        self._dutch_terms = [_compile([term]) for term in DUTCH_KEYWORDS]
        self._english_terms = [_compile([term], plural=True) for term in ENGLISH_KEYWORDS]
        self._brussels = _compile(["brussels", "bruxelles"])

    def signals(self, text: str) -> LanguageSignals:
        lowered = (text or "").lower()
        return LanguageSignals(
            text=lowered,
            strong_dutch=bool(self._strong_dutch.search(lowered)),
            strong_french=bool(self._strong_french.search(lowered)),
            french_hits=sum(1 for term in self._french_terms if term.search(lowered)),
            dutch_hits=sum(1 for term in self._dutch_terms if term.search(lowered)),
            english_hits=sum(1 for term in self._english_terms if term.search(lowered)),
            mentions_brussels=bool(self._brussels.search(lowered)),
        )

    def explain(self, text: str) -> Tuple[Language, str]:
        """Language and the name of the rule that decided it."""
        signals = self.signals(text)
        for rule in self.rules:
            if rule.predicate(signals):
                return rule.language, rule.name
        # Only reachable with a custom table lacking a catch-all row
        return Language.ENGLISH, "fallback"

    def classify(self, text: str) -> Language:
        return self.explain(text)[0]

    def classify_listing(self, listing: ListingCandidate) -> Language:
        return self.classify(f"{listing.title} {listing.company} {listing.location}")


_default_classifier = LanguageClassifier()


def classify_listing(
    listing: ListingCandidate, classifier: Optional[LanguageClassifier] = None
) -> Language:
    """Classify a listing from its title, company and location."""
    return (classifier or _default_classifier).classify_listing(listing)


def filter_by_language(
    listings: Iterable[L],
    accepted: Iterable[Language],
    classifier: Optional[LanguageClassifier] = None,
) -> List[L]:
    """Keep listings whose language is accepted, preserving order."""
    accepted_set = {Language(language) for language in accepted}
    classifier = classifier or _default_classifier

    kept = []
    dropped = 0
    for listing in listings:
        if classifier.classify_listing(listing) in accepted_set:
            kept.append(listing)
        else:
            dropped += 1

    if dropped:
        logger.debug(
            f"Dropped {dropped} listings in unaccepted languages",
            extra={
                "event": "language.filter.dropped",
                "dropped_count": dropped,
                "kept_count": len(kept),
                "accepted": sorted(language.value for language in accepted_set),
            },
        )
    return kept
