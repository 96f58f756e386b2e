# main.py

"""Entry point for the storefront application (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("storefront.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Browse a product catalog, keep favorites and check out.",
        epilog=f"Catalog endpoint: {Settings.CATALOG_URL}",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        default=False,
        dest="list_catalog",
        help="Print the catalog and exit. Omit all flags to launch the TUI.",
    )
    parser.add_argument(
        "--checkout",
        default=None,
        metavar="IDS",
        help="Comma-separated product ids to add to the cart and check out.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format for --list and --checkout (default: table).",
    )
    parser.add_argument(
        "-u",
        "--url",
        default=None,
        help="Override the catalog endpoint URL.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on the catalog endpoint.",
    )
    return parser


def _run_tui(url: str | None) -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import StorefrontApp

    try:
        app = StorefrontApp(catalog_url=url)
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("storefront TUI shutting down")


def _run_list(args: argparse.Namespace) -> None:
    """Print the catalog and exit."""
    from src.cli.runner import cli_list

    exit_code = asyncio.run(cli_list(args.output_format, args.url))
    sys.exit(exit_code)


def _run_checkout(args: argparse.Namespace) -> None:
    """Run a scripted cart + checkout and exit."""
    from src.cli.runner import cli_checkout

    exit_code = asyncio.run(
        cli_checkout(args.checkout, args.output_format, args.url)
    )
    sys.exit(exit_code)


def _run_health_check(url: str | None) -> None:
    """Run catalog endpoint health check."""
    from src.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check(url))
    sys.exit(exit_code)


def main() -> None:
    """Route to the TUI (no flags) or one of the headless commands."""
    parser = _build_parser()
    args = parser.parse_args()

    headless = args.health or args.list_catalog or args.checkout is not None
    # Stderr output would draw over the Textual screen
    log_file = setup_logging(console=headless)
    logger.info("storefront starting, log file: %s", log_file)

    if args.health:
        _run_health_check(args.url)
    elif args.checkout is not None:
        _run_checkout(args)
    elif args.list_catalog:
        _run_list(args)
    else:
        _run_tui(args.url)


if __name__ == "__main__":
    main()
