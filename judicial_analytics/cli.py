"""
Command-line interface for the judicial analytics engine.
"""

import argparse
import json
import logging
import sys

from . import (
    AnalyticsError,
    AnalyticsResult,
    EngineConfig,
    build_orchestrator,
    setup_logger,
)
from .utils.data_models import CATEGORIES, METRIC_FIELDS, confidence_field, sample_field


def format_result_output(result: AnalyticsResult, format_type: str = "text") -> str:
    """Format an analytics result for output."""
    if format_type == "json":
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)

    analytics = result.analytics
    output = []
    output.append(str(analytics))
    output.append(f"Source: {result.source} (cached: {'yes' if result.cached else 'no'})")
    output.append("-" * 80)
    for category in CATEGORIES:
        metric = METRIC_FIELDS[category]
        output.append(
            f"{metric:32} {getattr(analytics, metric):>3}%  "
            f"confidence {getattr(analytics, confidence_field(category)):>2}%  "
            f"n={getattr(analytics, sample_field(category))}"
        )
    if analytics.notable_patterns:
        output.append("Patterns:")
        output.extend(f"  - {pattern}" for pattern in analytics.notable_patterns)
    if analytics.data_limitations:
        output.append("Limitations:")
        output.extend(f"  - {limitation}" for limitation in analytics.data_limitations)
    output.append("-" * 80)
    return "\n".join(output)


def get_command(args) -> None:
    """Execute get command."""
    logger = setup_logger("cli", level=args.verbose)
    orchestrator = build_orchestrator(EngineConfig.from_env())

    try:
        logger.info(f"Fetching analytics for judge {args.judge_id}")
        result = orchestrator.get_analytics(
            args.judge_id, caller=args.caller, force_refresh=args.force_refresh
        )
    except AnalyticsError as e:
        logger.error(f"Analytics retrieval failed: {str(e)}")
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    output = format_result_output(result, args.format)
    print(output)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)


def invalidate_command(args) -> None:
    """Execute invalidate command."""
    logger = setup_logger("cli", level=args.verbose)
    orchestrator = build_orchestrator(EngineConfig.from_env())

    orchestrator.invalidate(args.judge_id)
    logger.info(f"Invalidated durable cache for judge {args.judge_id}")
    print(f"Invalidated cached analytics for judge {args.judge_id}")


def warm_command(args) -> None:
    """Execute warm command."""
    logger = setup_logger("cli", level=args.verbose)
    orchestrator = build_orchestrator(EngineConfig.from_env())

    try:
        report = orchestrator.warm(args.jurisdiction, limit=args.limit, force=args.force)
    except AnalyticsError as e:
        logger.error(f"Cache warming failed: {str(e)}")
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    print(
        f"Warmed {report.warmed} of {report.limit} judges in {report.jurisdiction} "
        f"({report.regenerated} regenerated)"
    )
    for judge_id, reason in report.failed:
        print(f"  failed {judge_id}: {reason}", file=sys.stderr)

    if report.failed:
        sys.exit(1)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="judicial-analytics",
        description="Judicial Analytics - behavioral analytics for judges",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  judicial-analytics get 8f14e45f --format json
  judicial-analytics get 8f14e45f --force-refresh
  judicial-analytics invalidate 8f14e45f
  judicial-analytics warm --jurisdiction CA --limit 25
        """,
    )

    parser.add_argument(
        "--version", action="version", version="Judicial Analytics 1.0.0"
    )
    parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Increase verbosity"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Get command
    get_parser = subparsers.add_parser("get", help="Get analytics for a judge")
    get_parser.add_argument("judge_id", help="Judge ID")
    get_parser.add_argument(
        "--force-refresh",
        action="store_true",
        help="Drop the durable cache entry before serving",
    )
    get_parser.add_argument(
        "--caller", default="cli", help="Caller identity used for rate limiting"
    )
    get_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format",
    )
    get_parser.add_argument("--output", "-o", help="Output file", type=str)
    get_parser.set_defaults(func=get_command)

    # Invalidate command
    invalidate_parser = subparsers.add_parser(
        "invalidate", help="Drop the durable cached analytics for a judge"
    )
    invalidate_parser.add_argument("judge_id", help="Judge ID")
    invalidate_parser.set_defaults(func=invalidate_command)

    # Warm command
    warm_parser = subparsers.add_parser(
        "warm", help="Precompute analytics for a jurisdiction's busiest judges"
    )
    warm_parser.add_argument(
        "--jurisdiction", default="CA", help="Jurisdiction to warm", type=str
    )
    warm_parser.add_argument(
        "--limit", help="Number of judges (1-200)", type=int, default=50
    )
    warm_parser.add_argument(
        "--force", action="store_true", help="Regenerate even when cached"
    )
    warm_parser.set_defaults(func=warm_command)

    return parser


def main() -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Set verbosity level
    if args.verbose >= 2:
        verbosity = logging.DEBUG
    elif args.verbose >= 1:
        verbosity = logging.INFO
    else:
        verbosity = logging.WARNING

    args.verbose = verbosity

    # Execute command
    args.func(args)


if __name__ == "__main__":
    main()
