"""Environment variable loading and validation."""

import os
import shlex
from typing import List, Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Settings read from the process environment (and ``.env``)."""

    def __init__(
        self,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
        scorer_command: Optional[List[str]] = None,
    ):
        self.log_level = log_level
        self.environment = environment or "local"
        self.scorer_command = scorer_command


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Label stamped on log records (default: local)
    - JOBSEARCH_SCORER_COMMAND: Scoring command line, shell-split, replacing
      ``scoring.command`` from the config file

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    log_level = os.getenv("LOG_LEVEL")
    environment = os.getenv("ENVIRONMENT")
    scorer_command_raw = os.getenv("JOBSEARCH_SCORER_COMMAND")

    if log_level:
        log_level = log_level.strip().upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    scorer_command = None
    if scorer_command_raw and scorer_command_raw.strip():
        try:
            scorer_command = shlex.split(scorer_command_raw)
        except ValueError as e:
            errors.append(f"Invalid JOBSEARCH_SCORER_COMMAND: {e}")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "Quote arguments containing spaces in JOBSEARCH_SCORER_COMMAND",
            ],
        )

    return EnvironmentConfig(
        log_level=log_level or None,
        environment=environment.strip() if environment else None,
        scorer_command=scorer_command,
    )
