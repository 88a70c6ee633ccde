"""Listing language classification."""

from .classifier import (
    DEFAULT_RULES,
    LanguageClassifier,
    LanguageRule,
    LanguageSignals,
    classify_listing,
    filter_by_language,
)

__all__ = [
    "LanguageClassifier",
    "LanguageRule",
    "LanguageSignals",
    "DEFAULT_RULES",
    "classify_listing",
    "filter_by_language",
]
