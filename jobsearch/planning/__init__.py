"""Search term planning."""

from .keywords import DEFAULT_KEYWORDS, MAX_KEYWORDS, plan_keywords, strip_seniority

__all__ = ["plan_keywords", "strip_seniority", "DEFAULT_KEYWORDS", "MAX_KEYWORDS"]
