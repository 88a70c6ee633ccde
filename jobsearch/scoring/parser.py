"""Parse the JSON object a scoring command prints on stdout.

Text-generation CLIs often wrap their answer in markdown fences or add a
sentence before it, so the parser first strips ```json fences and, failing
that, falls back to the outermost ``{...}`` span in the output.
"""

import json
import math
import re
from typing import Any, Dict, List, Optional

from .exceptions import ScoringResponseError
from .models import ScoreResult

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*\n?", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def strip_code_fences(raw: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence."""
    cleaned = _FENCE_OPEN_RE.sub("", raw.strip())
    cleaned = _FENCE_CLOSE_RE.sub("", cleaned)
    return cleaned.strip()


def _load_object(raw: str) -> Dict[str, Any]:
    cleaned = strip_code_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        match = _OBJECT_RE.search(cleaned)
        if not match:
            raise ScoringResponseError("No JSON object in scoring output", raw_output=raw)
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise ScoringResponseError(
                f"Invalid JSON in scoring output: {e}", raw_output=raw
            ) from e

    if not isinstance(data, dict):
        raise ScoringResponseError(
            f"Expected a JSON object, got {type(data).__name__}", raw_output=raw
        )
    return data


def _coerce_score(value: Any, raw: str) -> int:
    # bool is an int subclass; "true" is not a score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScoringResponseError(f"Score must be a number, got: {value!r}", raw_output=raw)
    if isinstance(value, float) and not math.isfinite(value):
        raise ScoringResponseError(f"Score must be finite, got: {value!r}", raw_output=raw)
    return max(0, min(100, int(round(value))))


def _coerce_missing(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _coerce_reason(value: Any) -> Optional[str]:
    if value is None:
        return None
    reason = str(value).strip()
    return reason or None


def parse_score_response(raw: str) -> ScoreResult:
    """Parse scoring command output into a ScoreResult.

    Args:
        raw: Full stdout of the scoring command

    Returns:
        ScoreResult with the score clamped to 0-100

    Raises:
        ScoringResponseError: If no JSON object with a numeric ``score`` can be found

    Example:
        >>> parse_score_response('```json\\n{"score": 85, "reason": "Good fit"}\\n```').score
        85
    """
    if not raw or not raw.strip():
        raise ScoringResponseError("Scoring output is empty", raw_output=raw or "")

    data = _load_object(raw)
    if "score" not in data:
        raise ScoringResponseError("Scoring output has no 'score' field", raw_output=raw)

    return ScoreResult(
        score=_coerce_score(data["score"], raw),
        reason=_coerce_reason(data.get("reason")),
        missing=_coerce_missing(data.get("missing")),
    )
