"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List

from .duration import DurationParseError, parse_duration


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Look for settings that are valid but probably not what the user wants.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    sources = config_dict.get("sources") or []
    if isinstance(sources, list):
        for source in sources:
            if isinstance(source, dict) and not source.get("enabled", True):
                name = source.get("type", "Unknown")
                warning_messages.append(f"Source '{name}' is disabled and will be skipped")

    search = config_dict.get("search") or {}
    if isinstance(search, dict):
        per_source = search.get("max_results_per_source")
        max_results = search.get("max_results")
        if isinstance(per_source, int) and isinstance(max_results, int) and per_source > max_results:
            warning_messages.append(
                f"max_results_per_source ({per_source}) is larger than max_results "
                f"({max_results}); extra listings are discarded"
            )

        timeout = search.get("aggregator_timeout")
        if isinstance(timeout, str):
            try:
                if parse_duration(timeout) < 15:
                    warning_messages.append(
                        f"Short aggregator_timeout ({timeout}) may cut off slower job boards"
                    )
            except DurationParseError:
                # Reported as a hard error during validation
                pass

    scoring = config_dict.get("scoring") or {}
    if isinstance(scoring, dict):
        top_n = scoring.get("top_n")
        max_concurrent = scoring.get("max_concurrent", 5)
        if isinstance(top_n, int) and top_n == 0 and scoring.get("enabled", True):
            warning_messages.append("scoring.top_n is 0; no listing will be scored")
        if isinstance(max_concurrent, int) and max_concurrent > 10:
            warning_messages.append(
                f"High scoring.max_concurrent ({max_concurrent}) may hit model rate limits"
            )

    advanced = config_dict.get("advanced") or {}
    if isinstance(advanced, dict):
        max_jobs = advanced.get("max_jobs_per_source", 200)
        if isinstance(max_jobs, int) and max_jobs > 1000:
            warning_messages.append(
                f"Large max_jobs_per_source ({max_jobs}) makes sitemap boards slow"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message as a UserWarning."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
