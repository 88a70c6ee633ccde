"""Tests for listing language classification."""

import pytest

from jobsearch.domain.models import Language
from jobsearch.language import (
    DEFAULT_RULES,
    LanguageClassifier,
    LanguageRule,
    classify_listing,
    filter_by_language,
)
from tests.helpers import make_listing


@pytest.fixture
def classifier():
    return LanguageClassifier()


class TestLanguageClassifier:
    """Tests for the ordered rule table."""

    @pytest.mark.parametrize(
        "text,language,rule",
        [
            ("Software Engineer (m/v/x) Gent", Language.DUTCH, "strong-dutch-marker"),
            ("Vacature: Boekhouder", Language.DUTCH, "strong-dutch-marker"),
            ("Développeur Full Stack H/F Bruxelles", Language.FRENCH, "strong-french-marker"),
            ("Postulez maintenant: Comptable", Language.FRENCH, "strong-french-marker"),
            ("Software Developer", Language.ENGLISH, "english-keyword"),
            ("Software Engineer Bruxelles", Language.ENGLISH, "english-keyword"),
            ("Développeur Java Bruxelles", Language.FRENCH, "french-majority"),
            ("Ontwikkelaar Antwerpen", Language.DUTCH, "dutch-majority"),
            ("Comptable Brussels", Language.FRENCH, "brussels-default"),
            ("Ingénieur Gent", Language.ENGLISH, "fallback"),
            ("Boekhouder", Language.ENGLISH, "fallback"),
            ("", Language.ENGLISH, "fallback"),
        ],
    )
    def test_explain(self, classifier, text, language, rule):
        assert classifier.explain(text) == (language, rule)

    def test_strong_dutch_overrides_english_keywords(self, classifier):
        """Test that a strong Dutch marker beats English tech vocabulary."""
        text = "Senior Software Engineer Team Manager m/v"

        assert classifier.signals(text).english_hits > 0
        assert classifier.classify(text) == Language.DUTCH

    def test_strong_dutch_checked_before_strong_french(self, classifier):
        assert classifier.classify("Comptable H/F - Vacature") == Language.DUTCH

    def test_english_overrides_weak_french_counts(self, classifier):
        assert classifier.classify("Développeur Software Engineer Liège Namur") == Language.ENGLISH

    def test_case_insensitive(self, classifier):
        assert classifier.classify("SOFTWARE ENGINEER") == Language.ENGLISH

    def test_english_plural(self, classifier):
        assert classifier.signals("Consultants wanted").english_hits == 1

    def test_keywords_match_whole_words(self, classifier):
        """Test that keywords embedded in longer words do not count."""
        signals = classifier.signals("Gentbrugge Teamleider")

        assert signals.dutch_hits == 0
        assert signals.english_hits == 0

    def test_custom_rule_table(self):
        rules = [LanguageRule("always-dutch", lambda signals: True, Language.DUTCH)]

        assert LanguageClassifier(rules).explain("Software Engineer") == (Language.DUTCH, "always-dutch")

    def test_empty_rule_table_rejected(self):
        with pytest.raises(ValueError):
            LanguageClassifier([])

    def test_default_rule_order(self):
        assert [rule.name for rule in DEFAULT_RULES] == [
            "strong-dutch-marker",
            "strong-french-marker",
            "english-keyword",
            "french-majority",
            "dutch-majority",
            "brussels-default",
            "fallback",
        ]


class TestClassifyListing:
    """Tests for listing-level helpers."""

    def test_uses_title_company_and_location(self):
        listing = make_listing("Boekhouder", company="Bedrijf NV", location="Antwerpen")

        assert classify_listing(listing) == Language.DUTCH

    def test_filter_by_language_keeps_order(self):
        french = make_listing("Développeur H/F", location="Namur")
        dutch = make_listing("Ontwikkelaar (m/v)", location="Gent")
        english = make_listing("Software Engineer", location="Leuven")

        result = filter_by_language([french, dutch, english], [Language.FRENCH, Language.ENGLISH])

        assert result == [french, english]

    def test_filter_accepts_string_codes(self):
        dutch = make_listing("Ontwikkelaar (m/v)", location="Gent")

        assert filter_by_language([dutch], ["nl"]) == [dutch]
        assert filter_by_language([dutch], ["fr", "en"]) == []
