"""Command-line entry point for the Belgian job search engine."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
from datetime import timedelta
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from jobsearch.config.duration import DurationParseError, parse_duration
from jobsearch.config.environment import EnvironmentConfig
from jobsearch.config.exceptions import ConfigurationError
from jobsearch.config.loader import load_config, load_profile
from jobsearch.config.models import AppConfig
from jobsearch.domain.models import ScoredListing, SearchRequest
from jobsearch.logging import get_logger
from jobsearch.logging.config import configure_logging
from jobsearch.service import JobSearchService, SearchRequestError
from jobsearch.utils.text import truncate_text
from jobsearch.utils.timestamps import format_timestamp

logger = get_logger(__name__, component="cli")

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobsearch",
        description="Search Belgian job boards and rank listings against your profile",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml if present)",
    )
    parser.add_argument(
        "--profile",
        type=Path,
        default=None,
        help="Candidate profile YAML used for keyword planning and scoring",
    )
    parser.add_argument(
        "--keywords",
        nargs="+",
        default=None,
        help="Search terms (default: planned from the profile)",
    )
    parser.add_argument("--location", default=None, help="Location filter, e.g. Bruxelles")
    parser.add_argument(
        "--source",
        action="append",
        default=None,
        dest="sources",
        help="Only query this board (repeatable, case-insensitive)",
    )
    parser.add_argument(
        "--max-results", type=int, default=None, help="Cap on returned listings"
    )
    parser.add_argument(
        "--min-score", type=int, default=None, help="Drop scored listings below this score"
    )
    parser.add_argument(
        "--contract-type",
        action="append",
        dest="contract_types",
        default=None,
        help="Keep only this contract type, e.g. CDI (repeatable; untyped listings are kept)",
    )
    parser.add_argument(
        "--posted-within",
        default=None,
        help="Keep only listings from this recent window, e.g. 24h or 7d",
    )
    parser.add_argument(
        "--no-scoring", action="store_true", help="Skip AI scoring entirely"
    )
    parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        dest="output_format",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--check-sources",
        action="store_true",
        help="Probe every configured board and exit",
    )
    parser.add_argument(
        "--list-sources", action="store_true", help="List configured boards and exit"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVELS,
        help="Log level (overrides config and environment)",
    )
    return parser


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > environment > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def format_table(listings: Sequence[ScoredListing]) -> str:
    """Render listings as a plain-text table, one block per listing."""
    if not listings:
        return "No listings found."

    lines = []
    for index, listing in enumerate(listings, start=1):
        score = f"{listing.score:>3}" if listing.is_scored else "  -"
        header = f"{index:>3}. [{score}] {truncate_text(listing.title, 80)}"
        details = " | ".join(
            part
            for part in (
                listing.company,
                listing.location,
                listing.salary,
                listing.contract_type,
                listing.source_name,
            )
            if part
        )
        lines.append(header)
        lines.append(f"       {details}")
        lines.append(f"       {listing.source_url}")
        if listing.match_reason:
            lines.append(f"       {truncate_text(listing.match_reason, 160)}")
        if listing.missing_requirements:
            lines.append(f"       Missing: {', '.join(listing.missing_requirements)}")
        lines.append(f"       Scraped {format_timestamp(listing.scraped_at)}")
    return "\n".join(lines)


def format_json(listings: Sequence[ScoredListing]) -> str:
    return json.dumps(
        [listing.model_dump(mode="json") for listing in listings],
        ensure_ascii=False,
        indent=2,
    )


def format_availability(availability: Dict[str, bool]) -> str:
    return "\n".join(
        f"{'✓' if available else '✗'} {name}" for name, available in availability.items()
    )


def build_request(args: argparse.Namespace) -> SearchRequest:
    """Build the search request from CLI arguments.

    Raises:
        ConfigurationError: If the profile file is missing or invalid
        SearchRequestError: If an argument is out of range
    """
    profile = load_profile(args.profile) if args.profile else None
    posted_within = None
    if args.posted_within:
        try:
            posted_within = timedelta(seconds=parse_duration(args.posted_within))
        except DurationParseError as e:
            raise SearchRequestError(f"Invalid --posted-within: {e}") from e

    try:
        return SearchRequest(
            keywords=args.keywords or [],
            location=args.location,
            max_results=args.max_results,
            min_score=args.min_score,
            contract_types=args.contract_types or [],
            posted_within=posted_within,
            selected_sources=args.sources or [],
            profile=profile,
            use_scoring=not args.no_scoring,
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise SearchRequestError(f"Invalid search arguments: {problems}") from e


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the job search CLI.

    Results go to stdout, logs to stderr.

    Returns:
        Exit code: 0 on success (including empty results), 1 on configuration
        or request errors
    """
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "config_path": str(args.config) if args.config else None,
                "enabled_source_count": len(app_config.get_enabled_sources()),
                "scoring_enabled": app_config.scoring.enabled,
            },
        )

        service = JobSearchService(app_config)
        try:
            if args.list_sources:
                print("\n".join(service.available_sources()))
                return 0

            if args.check_sources:
                print(format_availability(service.check_sources()))
                return 0

            request = build_request(args)
            result = service.run(request)
        finally:
            service.close()

        if args.output_format == "json":
            print(format_json(result.listings))
        else:
            print(format_table(result.listings))

        logger.info(
            f"Search finished with {len(result.listings)} listings",
            extra={
                "event": "cli.search.completed",
                "run_id": result.run_id,
                "result_count": len(result.listings),
                "duration_seconds": round(result.duration_seconds, 3),
            },
        )
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except SearchRequestError as e:
        print(f"Search Error: {e}", file=sys.stderr)
        logger.error(
            f"Invalid search request: {e}",
            extra={"event": "cli.request.invalid", "error_type": "SearchRequestError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nSearch interrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during search",
            extra={
                "event": "cli.search.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
