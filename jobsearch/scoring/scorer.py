"""Scorers that rate one listing against the candidate profile."""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from jobsearch.config.models import PromptMode
from jobsearch.domain.models import CandidateProfile, ListingCandidate
from jobsearch.logging import get_logger

from .exceptions import ScoringProcessError, ScoringTimeoutError
from .models import ScoreResult
from .parser import parse_score_response
from .prompt import PromptRenderer

logger = get_logger(__name__, component="scoring")


class ListingScorer(ABC):
    """Rates one listing. Implementations raise ScoringError on failure."""

    @abstractmethod
    async def score(self, listing: ListingCandidate, profile: CandidateProfile) -> ScoreResult:
        """Score a listing against a profile."""


def _filter_stderr(stderr: str) -> str:
    # Model CLIs print benign [WARN] lines on every call
    lines = [line for line in stderr.splitlines() if line.strip() and "[WARN]" not in line]
    return "\n".join(lines)


class CommandListingScorer(ListingScorer):
    """Scores listings by running an external text-generation command.

    The prompt is passed either as the last argv element or on stdin. The
    command must print a JSON object ``{"score", "reason", "missing"}``,
    optionally wrapped in markdown fences.

    Attributes:
        command: Command argv without the prompt
        prompt_mode: 'argv' or 'stdin'
        call_timeout: Seconds one process may run before it is killed
    """

    def __init__(
        self,
        command: Sequence[str],
        prompt_mode: str = PromptMode.ARGV.value,
        call_timeout: float = 90.0,
        renderer: Optional[PromptRenderer] = None,
    ):
        if not command:
            raise ValueError("command cannot be empty")
        if call_timeout <= 0:
            raise ValueError(f"call_timeout must be positive, got: {call_timeout}")

        self.command: List[str] = list(command)
        self.prompt_mode = PromptMode(prompt_mode).value
        self.call_timeout = call_timeout
        self.renderer = renderer or PromptRenderer()

    def build_argv(self, prompt: str) -> List[str]:
        if self.prompt_mode == PromptMode.ARGV.value:
            return [*self.command, prompt]
        return list(self.command)

    async def score(self, listing: ListingCandidate, profile: CandidateProfile) -> ScoreResult:
        """Run the scoring command for one listing.

        Raises:
            ScoringProcessError: Executable missing or non-zero exit
            ScoringTimeoutError: The call exceeded call_timeout
            ScoringResponseError: Output is not a usable score object
        """
        prompt = self.renderer.render(listing, profile)
        stdout = await self._run(prompt, listing)
        result = parse_score_response(stdout)

        logger.debug(
            f"Scored '{listing.title}': {result.score}",
            extra={
                "event": "scoring.call.completed",
                "source_url": listing.source_url,
                "score": result.score,
            },
        )
        return result

    async def _run(self, prompt: str, listing: ListingCandidate) -> str:
        argv = self.build_argv(prompt)
        use_stdin = self.prompt_mode == PromptMode.STDIN.value
        start = time.monotonic()

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE if use_stdin else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ScoringProcessError(f"Cannot start scoring command {self.command[0]!r}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(prompt.encode("utf-8") if use_stdin else None),
                timeout=self.call_timeout,
            )
        except asyncio.TimeoutError as e:
            await self._kill(process)
            logger.warning(
                f"Scoring command timed out after {self.call_timeout}s",
                extra={
                    "event": "scoring.call.timed_out",
                    "source_url": listing.source_url,
                    "timeout_seconds": self.call_timeout,
                },
            )
            raise ScoringTimeoutError(
                f"Scoring command timed out after {self.call_timeout}s",
                timeout_seconds=self.call_timeout,
            ) from e
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        stderr_text = _filter_stderr(stderr.decode("utf-8", errors="replace"))
        if stderr_text:
            logger.debug(
                "Scoring command wrote to stderr",
                extra={"event": "scoring.call.stderr", "stderr": stderr_text[:500]},
            )

        if process.returncode != 0:
            raise ScoringProcessError(
                f"Scoring command exited with code {process.returncode}",
                returncode=process.returncode,
                stderr=stderr_text,
            )

        logger.debug(
            "Scoring command finished",
            extra={
                "event": "scoring.call.finished",
                "duration_seconds": round(time.monotonic() - start, 3),
            },
        )
        return stdout.decode("utf-8", errors="replace")

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                # exited between the check and the kill
                pass
            await process.wait()

    def __repr__(self) -> str:
        return (
            f"CommandListingScorer(command={self.command[0]!r}, "
            f"prompt_mode={self.prompt_mode!r}, call_timeout={self.call_timeout})"
        )
