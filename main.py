#!/usr/bin/env python3
"""
Main entry point for the city ratings crawler.

This module serves as the composition root where all dependencies are wired together.
"""

import sys

from adapters.main_cli import main as unified_main


def main() -> None:
    """Main entry point for the CLI."""
    sys.exit(unified_main())


if __name__ == "__main__":
    main()
