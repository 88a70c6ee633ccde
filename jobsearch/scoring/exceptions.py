"""Exceptions raised while scoring one listing."""

from typing import Optional


class ScoringError(Exception):
    """Base exception for scoring failures.

    The scoring pipeline catches this per listing: the listing is returned
    unscored and the rest of the batch carries on.
    """


class ScoringProcessError(ScoringError):
    """The scoring command could not be started or exited with an error."""

    def __init__(
        self, message: str, returncode: Optional[int] = None, stderr: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ScoringTimeoutError(ScoringError):
    """The scoring command ran past its per-call deadline and was killed."""

    def __init__(self, message: str, timeout_seconds: float) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds


class ScoringResponseError(ScoringError):
    """The scoring command's output is not a usable score object."""

    def __init__(self, message: str, raw_output: str = "") -> None:
        super().__init__(message)
        self.raw_output = raw_output
