"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from jobsearch.domain.models import Language

from .duration import DurationParseError, parse_duration, validate_duration_range


class SourceType(str, Enum):
    """Supported Belgian job boards."""

    JOBAT = "jobat"
    ACTIRIS = "actiris"
    OPTIONCARRIERE = "optioncarriere"
    ICTJOB = "ictjob"
    EDITX = "editx"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class PromptMode(str, Enum):
    """How the scoring prompt is handed to the external command."""

    ARGV = "argv"
    STDIN = "stdin"


def _duration_seconds(value: str, min_seconds: int, max_seconds: int, label: str) -> int:
    try:
        seconds = parse_duration(value)
        validate_duration_range(seconds, min_seconds, max_seconds, label=label)
    except DurationParseError as e:
        raise ValueError(str(e)) from e
    return seconds


class SourceConfig(BaseModel):
    """One job board and whether it is queried."""

    type: SourceType = Field(..., description="Board identifier")
    enabled: bool = Field(True, description="Whether searches query this board")

    @field_validator("type", mode="before")
    @classmethod
    def lowercase_type(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    model_config = {"use_enum_values": True}


def _default_sources() -> List[SourceConfig]:
    return [SourceConfig(type=source_type) for source_type in SourceType]


class SearchConfig(BaseModel):
    """Defaults for one search run."""

    max_results: int = Field(50, ge=1, le=1000, description="Cap on returned listings")
    max_results_per_source: int = Field(
        20, ge=1, le=500, description="Cap on listings kept from one board per keyword"
    )
    aggregator_timeout: str = Field("45s", description="Fan-out deadline per keyword")
    max_keywords: int = Field(8, ge=1, le=8, description="Cap on planned search terms")
    max_concurrent_keywords: int = Field(
        2, ge=1, le=8, description="Keyword fan-outs running at the same time"
    )
    accepted_languages: List[Language] = Field(
        default_factory=lambda: [Language.FRENCH, Language.DUTCH, Language.ENGLISH],
        min_length=1,
        description="Listing languages kept after classification",
    )
    min_score: int = Field(0, ge=0, le=100, description="Drop scored listings below this")
    default_location: Optional[str] = Field(None, description="Location used when none is given")
    contract_types: List[str] = Field(
        default_factory=list, description="Contract types to keep, e.g. CDI (empty = all)"
    )
    posted_within: Optional[str] = Field(
        None, description="Recency window such as 24h or 7d (unset = any age)"
    )

    aggregator_timeout_seconds: Optional[int] = None
    posted_within_seconds: Optional[int] = None

    @field_validator("default_location")
    @classmethod
    def blank_location(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("contract_types")
    @classmethod
    def strip_contract_types(cls, v: List[str]) -> List[str]:
        return [kind.strip() for kind in v if kind.strip()]

    @model_validator(mode="after")
    def compute_durations(self):
        self.aggregator_timeout_seconds = _duration_seconds(
            self.aggregator_timeout, 5, 600, "aggregator_timeout"
        )
        if self.posted_within:
            self.posted_within_seconds = _duration_seconds(
                self.posted_within, 3600, 365 * 86400, "posted_within"
            )
        return self


class ScoringConfig(BaseModel):
    """External scoring command settings."""

    enabled: bool = Field(True, description="Score listings against the profile")
    command: List[str] = Field(
        default_factory=lambda: ["gemini", "-m", "flash"],
        min_length=1,
        description="Scoring command argv",
    )
    prompt_mode: PromptMode = Field(PromptMode.ARGV, description="argv or stdin")
    max_concurrent: int = Field(5, ge=1, le=20, description="Scoring processes at once")
    top_n: int = Field(5, ge=0, le=100, description="Listings sent to the scorer")
    batch_timeout: str = Field("3m", description="Deadline for the whole scoring batch")
    call_timeout: str = Field("90s", description="Deadline for one scoring process")

    batch_timeout_seconds: Optional[int] = None
    call_timeout_seconds: Optional[int] = None

    @field_validator("command")
    @classmethod
    def strip_command(cls, v: List[str]) -> List[str]:
        cleaned = [part.strip() for part in v if part and part.strip()]
        if not cleaned:
            raise ValueError("command cannot be empty")
        return cleaned

    @model_validator(mode="after")
    def compute_timeouts(self):
        self.batch_timeout_seconds = _duration_seconds(self.batch_timeout, 10, 1800, "batch_timeout")
        self.call_timeout_seconds = _duration_seconds(self.call_timeout, 5, 1800, "call_timeout")
        if self.call_timeout_seconds > self.batch_timeout_seconds:
            raise ValueError(
                f"call_timeout ({self.call_timeout}) cannot exceed batch_timeout "
                f"({self.batch_timeout})"
            )
        return self

    model_config = {"use_enum_values": True}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """HTTP and adapter tuning."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Timeout for one HTTP request (seconds)"
    )
    user_agent: str = Field(
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        min_length=1,
        description="User-Agent header sent to job boards",
    )
    max_jobs_per_source: int = Field(
        200, ge=0, description="Hard cap on listings one adapter returns (0 = unlimited)"
    )
    detail_fetch_workers: int = Field(
        8, ge=1, le=32, description="Threads fetching detail pages for sitemap boards"
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for the job search engine."""

    sources: List[SourceConfig] = Field(
        default_factory=_default_sources, min_length=1, description="Job boards to query"
    )
    search: SearchConfig = Field(default_factory=SearchConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)

    @model_validator(mode="after")
    def validate_sources(self):
        if not any(source.enabled for source in self.sources):
            raise ValueError(
                "At least one source must be enabled. All sources have enabled=false."
            )

        seen = set()
        for source in self.sources:
            if source.type in seen:
                raise ValueError(f"Duplicate source: {source.type} appears multiple times")
            seen.add(source.type)

        return self

    def get_enabled_sources(self) -> List[SourceConfig]:
        """Get list of enabled sources."""
        return [source for source in self.sources if source.enabled]
