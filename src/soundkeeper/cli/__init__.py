"""CLI entry point for soundkeeper.

Provides command-line interface for:
- Scanning plugin directories and exporting a CSV report
- Listing the catalog roots that would be scanned
- Validating configuration files
- Displaying version information

Usage:
    soundkeeper scan
    soundkeeper scan -c soundkeeper.yaml -o plugins.csv --format au
    soundkeeper scan --search reverb --stdout
    soundkeeper roots -c soundkeeper.yaml
    soundkeeper validate -c soundkeeper.yaml
    soundkeeper version
"""

import argparse
import logging
from typing import List, Optional

LOG_LEVELS = ["debug", "info", "warning", "error"]


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="soundkeeper",
        description="Audio plugin discovery and inventory",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: from config, else warning)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # scan command
    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan plugin directories and export a report",
    )
    scan_parser.add_argument(
        "-c", "--config",
        help="Path to YAML configuration file",
    )
    scan_parser.add_argument(
        "-o", "--output",
        help="Report path (default: Audio_Plugins_<date>.csv)",
    )
    scan_parser.add_argument(
        "--format",
        choices=["au", "vst", "aax"],
        help="Only report plugins of this format",
    )
    scan_parser.add_argument(
        "--search",
        help="Only report plugins whose name or manufacturer contains TEXT",
    )
    scan_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the report instead of writing a file",
    )

    # roots command
    roots_parser = subparsers.add_parser(
        "roots",
        help="List catalog roots and whether they exist",
    )
    roots_parser.add_argument(
        "-c", "--config",
        help="Path to YAML configuration file",
    )

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a configuration file",
    )
    validate_parser.add_argument(
        "-c", "--config",
        required=True,
        help="Path to YAML configuration file",
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    return parser


def setup_logging(level: Optional[str]) -> None:
    """Configure root logging for CLI runs."""
    logging.basicConfig(
        level=getattr(logging, (level or "warning").upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Handle --version flag at top level
    if args.version:
        from soundkeeper.cli.commands.version import cmd_version
        return cmd_version()

    if args.command is None:
        parser.print_help()
        return 0

    # Dispatch to command handlers
    if args.command == "scan":
        from soundkeeper.cli.commands.scan import cmd_scan
        return cmd_scan(
            config_path=args.config,
            output=args.output,
            format_name=args.format,
            search=args.search,
            to_stdout=args.stdout,
            log_level=args.log_level,
        )

    elif args.command == "roots":
        from soundkeeper.cli.commands.roots import cmd_roots
        return cmd_roots(config_path=args.config, log_level=args.log_level)

    elif args.command == "validate":
        from soundkeeper.cli.commands.validate import cmd_validate
        return cmd_validate(config_path=args.config)

    elif args.command == "version":
        from soundkeeper.cli.commands.version import cmd_version
        return cmd_version()

    else:
        parser.print_help()
        return 1
