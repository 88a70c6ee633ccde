#!/usr/bin/env python3
"""Sample search harness for manual end-to-end validation.

Runs a complete search without touching the network: every board is served
from a YAML fixture file. Scoring uses canned in-process scores unless a real
scoring command is given.

Usage:
    # Fixture boards, canned scores
    python scripts/run_sample_search.py --keywords devops cloud

    # Plan keywords from a profile and score with a real command
    python scripts/run_sample_search.py --profile profile.example.yaml \\
        --scorer-command "claude -p"
"""

import argparse
import shlex
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from jobsearch.config.exceptions import ConfigurationError
from jobsearch.config.loader import load_config, load_profile
from jobsearch.domain.models import SearchRequest
from jobsearch.logging.config import configure_logging
from jobsearch.main import format_table
from jobsearch.scoring import CommandListingScorer
from jobsearch.service import JobSearchService
from tests.helpers import FakeScorer, FixtureAdapter, load_fixture_listings

DEFAULT_FIXTURES = Path("tests/fixtures/sample_listings.yaml")


def print_header(title: str):
    """Print a formatted section header."""
    width = 80
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width + "\n")


def print_summary_table(result):
    """Print a formatted summary table of the search run."""
    print_header("Search Summary")

    metrics = [
        ("Keywords", ", ".join(result.keywords)),
        ("Keywords Planned", "Yes" if result.keywords_planned else "No"),
        ("Listings Collected", result.collected_count),
        ("Language Filtered", result.language_filtered_count),
        ("Listings Merged", result.merged_count),
        ("Contract Filtered", result.contract_filtered_count),
        ("Too Old", result.age_filtered_count),
        ("Listings Scored", result.scored_count),
        ("Below Min Score", result.below_min_score_count),
        ("Listings Returned", len(result.listings)),
        ("Failed Sources", ", ".join(result.failed_sources) or "-"),
        ("Duration (seconds)", f"{result.duration_seconds:.2f}"),
    ]

    max_label_width = max(len(label) for label, _ in metrics)

    print("┌" + "─" * (max_label_width + 2) + "┬" + "─" * 32 + "┐")
    print(f"│ {'Metric':<{max_label_width}} │ {'Value':<30} │")
    print("├" + "─" * (max_label_width + 2) + "┼" + "─" * 32 + "┤")
    for label, value in metrics:
        print(f"│ {label:<{max_label_width}} │ {str(value)[:30]:<30} │")
    print("└" + "─" * (max_label_width + 2) + "┴" + "─" * 32 + "┘")

    print("\n" + "-" * 80)
    print(" Per-Keyword Breakdown")
    print("-" * 80 + "\n")
    for aggregation in result.aggregation_results:
        print(f"Keyword: {aggregation.keyword}")
        for stats in aggregation.source_stats:
            status = "timed out" if stats.timed_out else ("failed" if stats.had_errors else "ok")
            print(f"  {stats.source_name}: {stats.kept_count}/{stats.fetched_count} kept ({status})")
        print(f"  Duplicates removed: {aggregation.duplicates_removed}")
        print()


def main():
    """Main entry point for the sample search harness."""
    parser = argparse.ArgumentParser(
        description="Run a sample search against fixture boards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to configuration file")
    parser.add_argument(
        "--fixtures",
        type=Path,
        default=DEFAULT_FIXTURES,
        help=f"Path to listing fixtures (default: {DEFAULT_FIXTURES})",
    )
    parser.add_argument("--profile", type=Path, default=None, help="Candidate profile YAML")
    parser.add_argument("--keywords", nargs="+", default=None, help="Search terms")
    parser.add_argument("--location", default=None, help="Location filter")
    parser.add_argument(
        "--scorer-command",
        default=None,
        help="Real scoring command, e.g. \"claude -p\" (default: canned scores)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: WARNING)",
    )

    args = parser.parse_args()
    load_dotenv()

    print_header("Belgian Job Search - Sample Search Harness")
    print(f"Fixtures: {args.fixtures}")

    if not args.fixtures.exists():
        print(f"\n❌ Error: Fixture file not found: {args.fixtures}")
        return 1

    try:
        app_config, _ = load_config(args.config)
        configure_logging(
            level=args.log_level,
            format_type=app_config.logging.format,
            environment="validation",
        )

        source_names = list(load_fixture_listings(args.fixtures))
        adapters = [FixtureAdapter(name, args.fixtures) for name in source_names]
        print(f"✓ {len(adapters)} fixture boards: {', '.join(source_names)}")

        if args.scorer_command:
            scorer = CommandListingScorer(
                shlex.split(args.scorer_command),
                prompt_mode=app_config.scoring.prompt_mode,
                call_timeout=app_config.scoring.call_timeout_seconds,
            )
            print(f"✓ Scoring with: {args.scorer_command}")
        else:
            scorer = FakeScorer()
            print("✓ Scoring with canned scores")

        profile = load_profile(args.profile) if args.profile else None
        request = SearchRequest(
            keywords=args.keywords or [],
            location=args.location,
            profile=profile,
            use_scoring=profile is not None,
        )

        service = JobSearchService(app_config, adapters=adapters, scorer=scorer)
        try:
            result = service.run(request)
        finally:
            service.close()

        print_summary_table(result)
        print_header("Listings")
        print(format_table(result.listings))
        return 0

    except ConfigurationError as e:
        print(f"\n❌ Configuration error: {e}")
        return 1
    except Exception as e:
        print(f"\n❌ Fatal error: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
