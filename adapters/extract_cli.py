"""
Command-line interface adapter for single-page extraction.

This module extracts one city or department record from a saved HTML page, or
from a page fetched over plain HTTP, without starting a browser.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from adapters.html_session import StaticHtmlSession
from adapters.http_client import HTTPClientAdapter
from domain.errors import ScraperAssumptionError
from domain.extractors import CityExtractor, DepartmentExtractor
from infrastructure.config import Settings
from infrastructure.telemetry import get_tracer

# Get logger for this module
logger = logging.getLogger(__name__)


def setup_argument_parser() -> argparse.ArgumentParser:
    """Configure and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ville-ratings extract",
        description="Extract a city or department record from a single page.",
    )
    parser.add_argument(
        "-in",
        "--input",
        dest="source",
        help="Path to a saved HTML page, or an http(s) URL",
        required=True,
    )
    parser.add_argument(
        "-out",
        "--output-file",
        dest="output_file",
        help="Path to the output JSON file (default: print to the console)",
    )
    parser.add_argument(
        "--kind",
        choices=("city", "department"),
        default="city",
        help="Kind of page to extract (default: city)",
    )
    return parser


class ExtractCLI:
    """Command-line interface for single-page extraction."""

    def __init__(self, http_client: Optional[HTTPClientAdapter] = None) -> None:
        self.parser = setup_argument_parser()
        self.http_client = http_client
        self.city_extractor = CityExtractor()
        self.department_extractor = DepartmentExtractor()

    def open_page(self, source: str) -> StaticHtmlSession:
        """
        Load the source into a static session.

        Raises:
            FileNotFoundError: If a local source does not exist
            NavigationError: If a URL cannot be fetched
        """
        if source.startswith(("http://", "https://")):
            client = self.http_client
            if client is None:
                settings = Settings.from_env()
                client = HTTPClientAdapter(
                    timeout=settings.http_timeout, max_retries=settings.http_max_retries
                )
            session = StaticHtmlSession(http_client=client)
            session.navigate(source)
            return session

        path = Path(source).resolve()
        logger.debug("Reading HTML file: %s", path)
        html = path.read_text(encoding="utf-8")
        session = StaticHtmlSession()
        session.load_html(html, path.as_uri())
        return session

    def extract(self, session: StaticHtmlSession, kind: str) -> Dict[str, Any]:
        """Run the extractor matching the page kind."""
        if kind == "department":
            return self.department_extractor.extract(session).to_dict()
        return self.city_extractor.extract(session).to_dict()

    def write_output(self, record: Dict[str, Any], output_file: Optional[str]) -> None:
        """Write the record to a JSON file, or to stdout when no file is given."""
        if not output_file:
            json.dump(record, sys.stdout, ensure_ascii=False, indent=2)
            sys.stdout.write("\n")
            return

        parent = os.path.dirname(output_file)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(record, f, ensure_ascii=False, indent=2)
        logger.info("Wrote record to %s", output_file)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run the CLI application.

        Args:
            args: Optional arguments list (defaults to sys.argv)

        Returns:
            Exit code (0 for success, 1 for error)
        """
        with get_tracer().start_as_current_span("cli.run") as span:
            parsed_args = self.parser.parse_args(args)
            span.set_attribute("cli.command", "extract")
            span.set_attribute("input.source", parsed_args.source)
            span.set_attribute("input.kind", parsed_args.kind)

            try:
                session = self.open_page(parsed_args.source)
                record = self.extract(session, parsed_args.kind)
                self.write_output(record, parsed_args.output_file)
                span.set_attribute("success", True)
                return 0

            except FileNotFoundError:
                logger.error("Input file '%s' not found", parsed_args.source)
                span.set_attribute("success", False)
                span.set_attribute("error.type", "FileNotFoundError")
                return 1
            except ScraperAssumptionError as e:
                logger.error("Extraction failed: %s", str(e))
                span.set_attribute("success", False)
                span.set_attribute("error.type", type(e).__name__)
                span.set_attribute("error.message", str(e))
                return 1
            except Exception as e:
                logger.error("Unexpected error: %s", str(e))
                span.set_attribute("success", False)
                span.set_attribute("error.type", type(e).__name__)
                span.set_attribute("error.message", str(e))
                return 1
