"""Tests for the prompt renderer and the external-command scorer.

Scorer tests run the current Python interpreter as the scoring command, so
they exercise real process spawning, piping and killing.
"""

import sys
import time

import pytest

from jobsearch.domain.models import CandidateProfile
from jobsearch.scoring import (
    CommandListingScorer,
    PromptRenderer,
    ScoringError,
    ScoringProcessError,
    ScoringResponseError,
    ScoringTimeoutError,
)
from tests.helpers import make_listing

# Reports whether the prompt it received mentions the listing
ARGV_SCRIPT = (
    "import json, sys; "
    "seen = 'Title: DevOps Engineer' in sys.argv[-1]; "
    "print(json.dumps({'score': 81, 'reason': 'saw listing' if seen else 'no listing', 'missing': ['Dutch']}))"
)
STDIN_SCRIPT = (
    "import json, sys; "
    "prompt = sys.stdin.buffer.read().decode('utf-8'); "
    "print('```json'); "
    "print(json.dumps({'score': 64, 'reason': 'Camille' in prompt and 'saw profile' or 'no profile'})); "
    "print('```')"
)


def python_command(script):
    return [sys.executable, "-c", script]


@pytest.fixture
def listing():
    return make_listing("DevOps Engineer", "ACME", "Gent", source_name="Jobat", salary="€4000")


# ============================================================================
# PromptRenderer
# ============================================================================


class TestPromptRenderer:
    """Tests for prompt rendering."""

    def test_contains_listing_and_profile(self, listing, profile):
        prompt = PromptRenderer().render(listing, profile)

        assert "Title: DevOps Engineer" in prompt
        assert "Company: ACME" in prompt
        assert "Location: Gent" in prompt
        assert "Salary: €4000" in prompt
        assert "Source: Jobat" in prompt
        assert "Name: Camille Dupont" in prompt
        assert "Skills: AWS, Terraform, Python" in prompt
        assert "Senior DevOps Engineer at Example SA; System Administrator at Hosting SPRL" in prompt
        assert "Education: Master in Computer Science" in prompt
        assert '"score"' in prompt

    def test_optional_fields_omitted(self, profile):
        listing = make_listing("Comptable", company="", location="")

        prompt = PromptRenderer().render(listing, profile)

        assert "Salary:" not in prompt
        assert "Contract:" not in prompt
        assert "Company: Unknown" in prompt

    def test_empty_profile_placeholders(self, listing):
        prompt = PromptRenderer().render(listing, CandidateProfile())

        assert "Name: Not provided" in prompt
        assert "No skills listed" in prompt
        assert "No experience listed" in prompt
        assert "No education listed" in prompt

    def test_unknown_template_raises_scoring_error(self, listing, profile):
        renderer = PromptRenderer(template_name="missing.txt.j2")

        with pytest.raises(ScoringError):
            renderer.render(listing, profile)


# ============================================================================
# CommandListingScorer
# ============================================================================


class TestCommandListingScorer:
    """Tests for CommandListingScorer."""

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            CommandListingScorer([])
        with pytest.raises(ValueError):
            CommandListingScorer(["ollama"], call_timeout=0)
        with pytest.raises(ValueError):
            CommandListingScorer(["ollama"], prompt_mode="pipe")

    def test_build_argv(self):
        assert CommandListingScorer(["ollama", "run", "llama3"]).build_argv("hi") == [
            "ollama",
            "run",
            "llama3",
            "hi",
        ]
        assert CommandListingScorer(["ollama", "run"], prompt_mode="stdin").build_argv("hi") == [
            "ollama",
            "run",
        ]

    @pytest.mark.asyncio
    async def test_prompt_as_argument(self, listing, profile):
        scorer = CommandListingScorer(python_command(ARGV_SCRIPT), call_timeout=20)

        result = await scorer.score(listing, profile)

        assert result.score == 81
        assert result.reason == "saw listing"
        assert result.missing == ["Dutch"]

    @pytest.mark.asyncio
    async def test_prompt_on_stdin_with_fenced_output(self, listing, profile):
        scorer = CommandListingScorer(python_command(STDIN_SCRIPT), prompt_mode="stdin", call_timeout=20)

        result = await scorer.score(listing, profile)

        assert result.score == 64
        assert result.reason == "saw profile"

    @pytest.mark.asyncio
    async def test_warn_lines_on_stderr_are_ignored(self, listing, profile):
        script = (
            "import sys; "
            "sys.stderr.write('[WARN] model loaded slowly\\n'); "
            "print('{\"score\": 50}')"
        )
        scorer = CommandListingScorer(python_command(script), call_timeout=20)

        assert (await scorer.score(listing, profile)).score == 50

    @pytest.mark.asyncio
    async def test_non_zero_exit(self, listing, profile):
        script = "import sys; sys.stderr.write('model not found\\n'); sys.exit(3)"
        scorer = CommandListingScorer(python_command(script), call_timeout=20)

        with pytest.raises(ScoringProcessError) as exc_info:
            await scorer.score(listing, profile)

        assert exc_info.value.returncode == 3
        assert "model not found" in exc_info.value.stderr

    @pytest.mark.asyncio
    async def test_missing_executable(self, listing, profile):
        scorer = CommandListingScorer(["/nonexistent/bin/scorer-command"])

        with pytest.raises(ScoringProcessError):
            await scorer.score(listing, profile)

    @pytest.mark.asyncio
    async def test_unparseable_output(self, listing, profile):
        scorer = CommandListingScorer(python_command("print('I would rate it highly')"), call_timeout=20)

        with pytest.raises(ScoringResponseError):
            await scorer.score(listing, profile)

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self, listing, profile):
        scorer = CommandListingScorer(python_command("import time; time.sleep(30)"), call_timeout=0.5)
        start = time.monotonic()

        with pytest.raises(ScoringTimeoutError) as exc_info:
            await scorer.score(listing, profile)

        assert exc_info.value.timeout_seconds == 0.5
        assert time.monotonic() - start < 10

    def test_repr(self):
        scorer = CommandListingScorer(["ollama", "run", "llama3"], prompt_mode="stdin", call_timeout=30)

        assert repr(scorer) == "CommandListingScorer(command='ollama', prompt_mode='stdin', call_timeout=30)"
