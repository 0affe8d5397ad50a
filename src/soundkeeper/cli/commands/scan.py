"""Scan command for soundkeeper CLI."""

import sys
from typing import Optional

from soundkeeper.api import (
    build_catalog,
    build_scanner,
    configure_observability,
    export_csv,
    load_config,
)
from soundkeeper.cli import setup_logging
from soundkeeper.core.formats import PluginFormat
from soundkeeper.exceptions import ConfigLoadError, ReportError
from soundkeeper.report.delimited import to_delimited_text


def cmd_scan(
    config_path: Optional[str] = None,
    output: Optional[str] = None,
    format_name: Optional[str] = None,
    search: Optional[str] = None,
    to_stdout: bool = False,
    log_level: Optional[str] = None,
) -> int:
    """Scan the catalog and export the records.

    Args:
        config_path: Optional YAML configuration file.
        output: Report path; defaults to a dated name.
        format_name: Keep only records of this format ("au", "vst", "aax").
        search: Keep only records whose name or manufacturer contains this.
        to_stdout: Print the report instead of writing a file.
        log_level: Overrides the configured logging level.

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    try:
        config = load_config(config_path)
    except ConfigLoadError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(log_level or config.logging.level)
    hub = configure_observability(config)

    try:
        catalog = build_catalog(config)
        result = build_scanner(config).scan(catalog)
    finally:
        hub.shutdown()

    fmt = PluginFormat.parse(format_name) if format_name else None
    records = result.filter(format=fmt, text=search)

    if to_stdout:
        sys.stdout.write(to_delimited_text(
            records,
            delimiter=config.report.delimiter,
            include_header=config.report.include_header,
        ))
        return 0

    try:
        path = export_csv(records, output, config=config)
    except ReportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    status = " (cancelled)" if result.cancelled else ""
    print(
        f"Scanned {result.roots_scanned} roots{status}: "
        f"{len(records)} of {len(result)} plugins written to {path}"
    )
    if result.roots_missing:
        print(f"  {result.roots_missing} roots not present")
    if result.errors:
        print(f"  {result.errors} errors (see log)", file=sys.stderr)
    return 0
