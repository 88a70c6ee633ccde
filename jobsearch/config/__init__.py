"""Configuration management for the job search engine."""

from .duration import DurationParseError, parse_duration, validate_duration_range
from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, load_profile, validate_config_file
from .models import (
    AdvancedConfig,
    AppConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    PromptMode,
    ScoringConfig,
    SearchConfig,
    SourceConfig,
    SourceType,
)

__all__ = [
    # Loaders
    "load_config",
    "load_profile",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "SourceConfig",
    "SearchConfig",
    "ScoringConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    # Enums
    "SourceType",
    "LogLevel",
    "LogFormat",
    "PromptMode",
    # Durations
    "parse_duration",
    "validate_duration_range",
    "DurationParseError",
    # Exceptions
    "ConfigurationError",
]
