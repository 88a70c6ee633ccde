"""Configuration and profile loaders."""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import ValidationError

from jobsearch.domain.models import CandidateProfile
from jobsearch.logging import get_logger

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

logger = get_logger(__name__, component="config")

DEFAULT_CONFIG_LOCATIONS = (Path("config.yaml"), Path("config") / "config.yaml")


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and validate configuration from YAML and environment variables.

    Config file lookup:
    1. Use config_path if given (it must exist)
    2. Try config.yaml in the current directory
    3. Try ./config/config.yaml
    4. Fall back to built-in defaults, since every setting has one

    ``JOBSEARCH_SCORER_COMMAND`` from the environment replaces
    ``scoring.command``.

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If configuration is invalid or the explicit file is missing
    """
    config_file = _find_config_file(config_path)

    if config_file is None:
        logger.info(
            "No configuration file found, using defaults",
            extra={"event": "config.defaults_used"},
        )
        config_dict: Dict[str, Any] = {}
    else:
        config_dict = _read_yaml(config_file, "configuration")

    warnings = check_for_warnings(config_dict)
    if warnings:
        emit_warnings(warnings)

    try:
        app_config = AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError.from_validation_error(
            "Configuration validation failed",
            e,
            suggestions=[
                "Review config.example.yaml for correct format",
                "Durations look like '45s', '3m' or 'PT45S'",
                "Verify field types match the expected schema",
            ],
        ) from e

    env_config = load_environment_config()

    if env_config.scorer_command:
        app_config.scoring = app_config.scoring.model_copy(
            update={"command": env_config.scorer_command}
        )

    return app_config, env_config


def load_profile(profile_path: Path) -> CandidateProfile:
    """
    Load the candidate profile projection from a YAML file.

    The file is read only; nothing is ever written back.

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    profile_path = Path(profile_path)
    if not profile_path.exists():
        raise ConfigurationError(
            f"Profile file not found: {profile_path}",
            suggestions=[
                "Copy profile.example.yaml and fill in your experience and skills",
                "Omit --profile to search with explicit --keywords only",
            ],
        )

    profile_dict = _read_yaml(profile_path, "profile")

    try:
        return CandidateProfile.model_validate(profile_dict)
    except ValidationError as e:
        raise ConfigurationError.from_validation_error(
            "Profile validation failed",
            e,
            suggestions=[
                "Review profile.example.yaml for correct format",
                "Dates must be written as YYYY-MM-DD",
            ],
        ) from e


def _read_yaml(path: Path, kind: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML {kind}: {e}",
            suggestions=[
                f"Check YAML syntax in {path}",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read {kind} file: {e}",
            suggestions=[f"Ensure {path} is readable", "Check file permissions"],
        ) from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"The {kind} file must contain a YAML mapping, got {type(data).__name__}",
            suggestions=[f"Review {path}"],
        )

    return data


def _find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """Resolve the config file, or None when only defaults apply."""
    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                suggestions=[
                    f"Ensure {config_path} exists",
                    "Copy config.example.yaml to config.yaml",
                ],
            )
        return config_path

    for candidate in DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return candidate

    return None


def validate_config_file(config_path: Path) -> bool:
    """
    Validate a configuration file without touching the environment.

    Returns:
        True if valid, False otherwise (errors are printed)
    """
    try:
        AppConfig.model_validate(_read_yaml(Path(config_path), "configuration"))
    except ConfigurationError as e:
        print(f"✗ Configuration validation failed:\n{e}")
        return False
    except ValidationError as e:
        print(f"✗ Configuration validation failed:\n"
              f"{ConfigurationError.from_validation_error('Invalid configuration', e)}")
        return False

    print(f"✓ Configuration file {config_path} is valid")
    return True
