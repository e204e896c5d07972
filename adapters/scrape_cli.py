"""
Command-line interface adapter for a full ratings crawl.

This module wires the Tor daemon, the browser session, the traversal engine
and the chosen persistence together, and always releases the external
processes before returning.
"""

import argparse
import dataclasses
import logging
from typing import List, Optional

from adapters.process_launcher import ProcessLauncher
from adapters.storage_adapter import create_storage
from application.traversal_service import TraversalEngine
from infrastructure.config import Settings
from infrastructure.logging import setup_logger
from infrastructure.telemetry import get_tracer

# Get logger for this module
logger = logging.getLogger(__name__)


def setup_argument_parser() -> argparse.ArgumentParser:
    """Configure CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="ville-ratings scrape",
        description="Scrape city ratings of Paris and its inner suburbs through Tor",
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--file",
        dest="persist_mode",
        action="store_const",
        const="file",
        help="Persist ratings as a JSON document (requires --destination)",
    )
    mode.add_argument(
        "--other",
        dest="persist_mode",
        action="store_const",
        const="console",
        help="Print ratings to the console",
    )
    parser.add_argument("--destination", help="Destination file for --file")
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Skip cities and departments that fail to extract instead of aborting",
    )
    parser.add_argument(
        "--headless", action="store_true", help="Run the browser without a window"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Increase logging verbosity"
    )
    parser.add_argument("tor_executable", help="Tor executable file path")
    parser.add_argument("driver_executable", help="Chrome driver executable file path")
    return parser


class ScrapeCLI:
    """CLI running the full region → department → city crawl."""

    def __init__(
        self,
        launcher: Optional[ProcessLauncher] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.parser = setup_argument_parser()
        self.launcher = launcher
        self.settings = settings

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run the crawl.

        Args:
            args: Optional arguments list (defaults to sys.argv)

        Returns:
            Exit code (0 for success, 1 for error)
        """
        parsed_args = self.parser.parse_args(args)
        if parsed_args.persist_mode == "file" and not parsed_args.destination:
            self.parser.error("--file requires --destination")

        if parsed_args.verbose:
            setup_logger(verbose=True)
        logger.debug("Parsed CLI arguments: %s", parsed_args)

        with get_tracer().start_as_current_span("cli.run") as span:
            span.set_attribute("cli.command", "scrape")
            span.set_attribute("cli.persist_mode", parsed_args.persist_mode)
            span.set_attribute("cli.keep_going", parsed_args.keep_going)

            daemon = None
            session = None
            try:
                settings = self.settings or Settings.from_env()
                if parsed_args.headless:
                    settings = dataclasses.replace(settings, browser_headless=True)
                launcher = self.launcher or ProcessLauncher(settings)
                storage = create_storage(
                    parsed_args.persist_mode, parsed_args.destination
                )

                daemon = launcher.start_daemon(parsed_args.tor_executable)
                session = launcher.open_session(parsed_args.driver_executable)

                engine = TraversalEngine(
                    session,
                    index_url=settings.department_index_url,
                    isolate_failures=parsed_args.keep_going,
                )
                departments = engine.run()
                for failure in engine.failures:
                    logger.warning(
                        "Skipped %s in region %s: %s",
                        failure.url,
                        failure.region_code,
                        failure.message,
                    )

                logger.info("Persist ratings")
                storage.persist(departments)

                span.set_attribute("departments.count", len(departments))
                span.set_attribute("failures.count", len(engine.failures))
                span.set_attribute("success", True)
                span.set_attribute("exit_code", 0)
                return 0

            except Exception as e:
                logger.error("Scraping failed: %s", str(e))
                span.set_attribute("success", False)
                span.set_attribute("error.type", type(e).__name__)
                span.set_attribute("error.message", str(e))
                span.set_attribute("exit_code", 1)
                return 1

            finally:
                if session is not None:
                    session.close()
                if daemon is not None:
                    daemon.terminate()
