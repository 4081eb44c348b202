# main.py

"""Entry point for storefront_search (interactive prompt or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("storefront_search.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="storefront-search",
        description="Federated product search across the local catalog "
        "and remote retailers.",
        epilog=f"Available sources: {valid_ids}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search query. Omit to start an interactive prompt.",
    )
    parser.add_argument(
        "-s",
        "--sources",
        default=None,
        help="Comma-separated source IDs (default: all enabled).",
    )
    parser.add_argument(
        "--sort",
        choices=list(Settings.SORT_STRATEGIES),
        default="relevance",
        dest="sort_by",
        help="Sort strategy (default: relevance).",
    )
    parser.add_argument(
        "-n",
        "--limit",
        type=int,
        default=Settings.DEFAULT_RESULT_LIMIT,
        help=f"Maximum results (default: {Settings.DEFAULT_RESULT_LIMIT}).",
    )
    parser.add_argument(
        "--min-price",
        type=float,
        default=None,
        help="Lower price bound.",
    )
    parser.add_argument(
        "--max-price",
        type=float,
        default=None,
        help="Upper price bound.",
    )
    parser.add_argument(
        "-c",
        "--category",
        default=None,
        help="Restrict results to a category.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--list-sources",
        action="store_true",
        default=False,
        dest="list_sources",
        help="List configured sources and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Echo INFO-level log messages to stderr.",
    )
    return parser


def _run_cli(args: argparse.Namespace) -> None:
    """Run a headless search and exit."""
    from src.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(
            query=args.query,
            source_csv=args.sources,
            sort_by=args.sort_by,
            limit=args.limit,
            min_price=args.min_price,
            max_price=args.max_price,
            category=args.category,
            output_format=args.output_format,
        )
    )
    sys.exit(exit_code)


def _run_interactive(args: argparse.Namespace) -> None:
    """Run the interactive prompt until the user quits."""
    from src.cli.runner import run_interactive

    try:
        exit_code = asyncio.run(
            run_interactive(
                source_csv=args.sources,
                sort_by=args.sort_by,
                limit=args.limit,
            )
        )
    except KeyboardInterrupt:
        exit_code = 0
    finally:
        logger.info("storefront_search interactive session shutting down")
    sys.exit(exit_code)


def main() -> None:
    """Route to the interactive prompt (no query) or headless CLI."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(
        console_level=logging.INFO if args.verbose else logging.WARNING
    )
    logger.info("storefront_search starting, log file: %s", log_file)

    if args.list_sources:
        from src.cli.runner import list_sources

        sys.exit(list_sources())
    elif args.query is None:
        _run_interactive(args)
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
