#!/usr/bin/env python3
"""rfml-sync entry point.

Usage:
    python -m rfsync.main new [file_name]     # Scaffold a new spec file
    python -m rfsync.main export              # Pull remote tests into spec/rainforest
    python -m rfsync.main upload              # Validate and push spec files
    python -m rfsync.main validate            # Check spec files only
    python -m rfsync.main status              # Local and remote test counts
    python -m rfsync.main config set token T  # Store the API token
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from rfsync import __version__
from rfsync.cli import add_cli_arguments, run

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )
    # Keep connection chatter out of --debug output.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="rfml-sync",
        description="rfml-sync - keep local RFML spec files and remote tests in sync",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rfml-sync new login_flow              Create spec/rainforest/login_flow.rfml
  rfml-sync --token TOKEN export        Export every remote test
  rfml-sync validate                    Check spec files for errors
  rfml-sync upload                      Validate, then create or update remote tests
""",
    )

    parser.add_argument(
        "-d", "--config-dir",
        type=Path,
        default=None,
        help="Custom configuration directory (default: ~/.config/rfml-sync/)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    add_cli_arguments(parser)
    return parser


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """Main entry point for rfml-sync.

    Parses arguments, configures logging and dispatches to the CLI.
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(run(args.config_dir, args))


if __name__ == "__main__":
    main()
