"""Command-line interface for rfml-sync.

Commands:
    new [file_name]         Create a new spec file from the scaffold
    export                  Write every remote test to a local spec file
    upload                  Validate local spec files and push them
    validate                Check local spec files without uploading
    status                  Show local and remote test counts
    config show|set         Inspect or change the configuration
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from rfsync.core.config import KNOWN_KEYS, Config
from rfsync.core.errors import ConfigError, SyncError, UploadError, ValidationFailedError
from rfsync.core.exporter import export_tests
from rfsync.core.http_client import RemoteClient
from rfsync.core.spec_files import (
    SPEC_FOLDER,
    create_spec_file,
    ensure_spec_folder,
    find_spec_files,
)
from rfsync.core.uploader import upload_tests
from rfsync.core.validation import validate

logger = logging.getLogger(__name__)


def _show_progress() -> bool:
    return sys.stderr.isatty()


def make_client(config: Config, args: argparse.Namespace) -> RemoteClient:
    """Create a remote client from the resolved token and API URL.

    Raises:
        ConfigError: If no token is configured anywhere
    """
    token = config.get_token(getattr(args, "token", None))
    if not token:
        raise ConfigError(
            "token",
            "no API token (use --token, the RFSYNC_TOKEN environment variable "
            "or 'config set token <token>')",
        )
    return RemoteClient(token, config.get_api_url())


def cmd_new(args: argparse.Namespace) -> int:
    """Create a new spec file.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    path = create_spec_file(args.file_name, SPEC_FOLDER)
    print(path)
    return 0


def cmd_export(config: Config, args: argparse.Namespace) -> int:
    """Export every remote test to a spec file.

    Args:
        config: Config instance
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    client = make_client(config, args)
    count = export_tests(
        client, SPEC_FOLDER, debug=args.debug, show_progress=_show_progress()
    )
    logger.info(f"Exported {count} tests")
    return 0


def cmd_upload(config: Config, args: argparse.Namespace) -> int:
    """Validate and upload every spec file.

    Args:
        config: Config instance
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    client = make_client(config, args)
    count = upload_tests(
        client, SPEC_FOLDER, debug=args.debug, show_progress=_show_progress()
    )
    logger.info(f"Processed {count} tests")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate every spec file without uploading."""
    validate(SPEC_FOLDER, debug=args.debug)
    return 0


def cmd_status(config: Config, args: argparse.Namespace) -> int:
    """Show local spec count and, when available, the remote test count.

    Args:
        config: Config instance
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    client = make_client(config, args)
    local_count = len(find_spec_files(SPEC_FOLDER))
    remote_count = client.count_tests()

    if args.format == "json":
        print(json.dumps({
            "spec_folder": str(SPEC_FOLDER),
            "local_tests": local_count,
            "remote_tests": remote_count,
            "api_url": client.api_url,
        }, indent=2))
    else:
        print(f"Spec folder: {SPEC_FOLDER}")
        print(f"Local tests: {local_count}")
        print(f"Remote tests: {remote_count if remote_count is not None else 'unavailable'}")
        print(f"API URL: {client.api_url}")
    return 0


def cmd_config_show(config: Config, args: argparse.Namespace) -> int:
    """Show the configuration, with the token masked."""
    data: Dict[str, Any] = {
        "config_file": str(config.config_file),
        "api_url": config.get_api_url(),
        "token": "(set)" if config.get_token() else "(not set)",
    }
    if args.format == "json":
        print(json.dumps(data, indent=2))
    else:
        for key, value in data.items():
            print(f"{key}: {value}")
    return 0


def cmd_config_set(config: Config, args: argparse.Namespace) -> int:
    """Set a configuration value."""
    config.set(args.key, args.value)
    print(f"Set {args.key}")
    return 0


def add_cli_arguments(parser: argparse.ArgumentParser) -> None:
    """Add global options and subcommands to the parser.

    Args:
        parser: Top-level parser
    """
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="API token (default: RFSYNC_TOKEN or the config file)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Verbose logging and '# step <n>' comments in exported files"
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format for status and config show (default: text)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    new_parser = subparsers.add_parser("new", help="Create a new spec file")
    new_parser.add_argument(
        "file_name",
        nargs="?",
        default=None,
        help="File name (default: a new UUID); the extension is added if missing"
    )

    subparsers.add_parser("export", help="Export remote tests to spec files")
    subparsers.add_parser("upload", help="Validate and upload spec files")
    subparsers.add_parser("validate", help="Validate spec files")
    subparsers.add_parser("status", help="Show local and remote test counts")

    config_parser = subparsers.add_parser("config", help="Show or change configuration")
    config_subparsers = config_parser.add_subparsers(dest="config_command", help="Config commands")
    config_subparsers.add_parser("show", help="Show configuration")
    set_parser = config_subparsers.add_parser("set", help="Set a configuration value")
    set_parser.add_argument("key", choices=KNOWN_KEYS, help="Configuration key")
    set_parser.add_argument("value", type=str, help="Value to store")


def run(config_dir: Optional[Path], args: argparse.Namespace) -> int:
    """Run CLI with given arguments.

    Args:
        config_dir: Custom configuration directory or None for default
        args: Parsed command-line arguments (should have command attribute)

    Returns:
        Exit code (0 for success, 1 for usage errors, 2 for fatal errors)
    """
    if not getattr(args, "command", None):
        print("Error: No command specified. Use --help for available commands.", file=sys.stderr)
        return 1

    try:
        config = Config(config_dir=config_dir)

        if args.command == "config":
            config_cmd = getattr(args, "config_command", None)
            if config_cmd == "set":
                return cmd_config_set(config, args)
            if config_cmd == "show":
                return cmd_config_show(config, args)
            print("Error: No config command specified. Use 'config --help'.", file=sys.stderr)
            return 1

        ensure_spec_folder(SPEC_FOLDER)

        if args.command == "new":
            return cmd_new(args)
        elif args.command == "export":
            return cmd_export(config, args)
        elif args.command == "upload":
            return cmd_upload(config, args)
        elif args.command == "validate":
            return cmd_validate(args)
        elif args.command == "status":
            return cmd_status(config, args)
        else:
            print(f"Error: Unknown command '{args.command}'", file=sys.stderr)
            return 1
    except (ValidationFailedError, UploadError) as e:
        # Details were logged where the failure happened.
        logger.debug(f"Aborting: {e}")
        return e.exit_code
    except SyncError as e:
        logger.critical(str(e))
        return e.exit_code
