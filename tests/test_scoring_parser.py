"""Tests for scoring output parsing."""

import pytest

from jobsearch.scoring import ScoreResult, ScoringResponseError, parse_score_response, strip_code_fences


class TestStripCodeFences:
    """Tests for markdown fence removal."""

    def test_json_fence(self):
        assert strip_code_fences('```json\n{"score": 1}\n```') == '{"score": 1}'

    def test_bare_fence(self):
        assert strip_code_fences('```\n{"score": 1}\n```') == '{"score": 1}'

    def test_no_fence(self):
        assert strip_code_fences('  {"score": 1}  ') == '{"score": 1}'


class TestParseScoreResponse:
    """Tests for parse_score_response."""

    def test_plain_json(self):
        result = parse_score_response(
            '{"score": 85, "reason": "Strong cloud background", "missing": ["Kubernetes"]}'
        )

        assert result == ScoreResult(score=85, reason="Strong cloud background", missing=["Kubernetes"])

    def test_fenced_json(self):
        raw = '```json\n{"score": 72, "reason": "Good fit", "missing": []}\n```'

        assert parse_score_response(raw).score == 72

    def test_json_surrounded_by_prose(self):
        raw = 'Here is my assessment:\n{"score": 40, "reason": "Partial match"}\nHope this helps.'

        result = parse_score_response(raw)

        assert result.score == 40
        assert result.reason == "Partial match"

    @pytest.mark.parametrize("raw_score,expected", [(150, 100), (-5, 0), (72.6, 73), (0, 0), (100, 100)])
    def test_score_clamped_and_rounded(self, raw_score, expected):
        assert parse_score_response(f'{{"score": {raw_score}}}').score == expected

    def test_missing_reason_and_missing_list(self):
        result = parse_score_response('{"score": 55}')

        assert result.reason is None
        assert result.missing == []

    def test_blank_reason_becomes_none(self):
        assert parse_score_response('{"score": 55, "reason": "  "}').reason is None

    def test_non_string_missing_items_dropped(self):
        result = parse_score_response('{"score": 55, "missing": ["Dutch", 3, "", null, " AWS "]}')

        assert result.missing == ["Dutch", "AWS"]

    def test_missing_not_a_list(self):
        assert parse_score_response('{"score": 55, "missing": "Dutch"}').missing == []

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "   ",
            "I cannot score this listing.",
            '{"score": 85',
            '{"reason": "no score here"}',
            '{"score": "high"}',
            '{"score": true}',
            '{"score": null}',
            "[85]",
        ],
    )
    def test_unusable_output_raises(self, raw):
        with pytest.raises(ScoringResponseError):
            parse_score_response(raw)

    @pytest.mark.parametrize("raw", ['{"score": NaN}', '{"score": Infinity}', '{"score": -Infinity}'])
    def test_non_finite_score_raises(self, raw):
        with pytest.raises(ScoringResponseError, match="finite"):
            parse_score_response(raw)

    def test_huge_integer_score_is_clamped(self):
        assert parse_score_response('{"score": ' + "9" * 400 + "}").score == 100

    def test_error_keeps_raw_output(self):
        with pytest.raises(ScoringResponseError) as exc_info:
            parse_score_response("not json")

        assert exc_info.value.raw_output == "not json"
