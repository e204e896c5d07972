import argparse
import sys
from typing import List, Optional

from infrastructure.logging import setup_logger
from infrastructure.telemetry import setup_opentelemetry

from adapters.extract_cli import ExtractCLI
from adapters.scrape_cli import ScrapeCLI


def main(argv: Optional[List[str]] = None) -> int:
    """
    Unified entry point for the `ville-ratings` command.

    Subcommands:
        scrape    – Crawl every department of Paris and its suburbs.
        extract   – Extract one record from a saved page or a URL.
    """
    # Setup shared infrastructure
    setup_logger()
    setup_opentelemetry()

    # Top‑level parser only defines subcommands; each subcommand parses its own arguments.
    parser = argparse.ArgumentParser(
        prog="ville-ratings", description="City ratings crawler for ville-ideale.fr"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("scrape", help="Crawl departments and persist city ratings")
    subparsers.add_parser("extract", help="Extract a record from a single page")

    # Parse only the subcommand name; the remaining args are passed through.
    args, remaining = parser.parse_known_args(argv)

    if args.command == "scrape":
        return ScrapeCLI().run(remaining)
    elif args.command == "extract":
        return ExtractCLI().run(remaining)
    else:
        parser.error(f"Unknown subcommand: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
