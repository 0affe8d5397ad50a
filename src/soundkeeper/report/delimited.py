"""Delimited-text export of scan results.

Every field is quoted. Embedded quote characters are doubled following
the usual CSV convention, so names such as ``12" Mix Bus`` keep the column
layout intact.

Example:
    >>> text = to_delimited_text(result.records)
    >>> write_report(result.records, default_report_name())
"""

import csv
import io
import logging
import os
from datetime import date
from typing import Iterable, List, Optional

from soundkeeper.core.record import PluginRecord
from soundkeeper.exceptions import ReportError

logger = logging.getLogger(__name__)

COLUMNS = (
    "Name",
    "Manufacturer",
    "Version",
    "Format",
    "Path",
    "Size",
    "LastModified",
)

REPORT_EXTENSION = ".csv"
REPORT_PREFIX = "Audio_Plugins_"


def record_row(record: PluginRecord) -> List[str]:
    """Column values for one record, in COLUMNS order."""
    return [
        record.name,
        record.manufacturer,
        record.version,
        record.format.display_name,
        record.path,
        record.formatted_size,
        record.formatted_date,
    ]


def to_delimited_text(
    records: Iterable[PluginRecord],
    delimiter: str = ",",
    include_header: bool = True,
) -> str:
    """Render records as delimited text, one line per record.

    Args:
        records: Records in output order.
        delimiter: Single-character field separator.
        include_header: Emit the column header line first.

    Returns:
        The full text, newline-terminated.

    Raises:
        ValueError: If the delimiter is not a single character or is a quote.
    """
    if len(delimiter) != 1 or delimiter in ('"', "\n", "\r"):
        raise ValueError(f"Invalid delimiter: {delimiter!r}")

    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter=delimiter,
        quoting=csv.QUOTE_ALL,
        lineterminator="\n",
    )
    if include_header:
        writer.writerow(COLUMNS)
    for record in records:
        writer.writerow(record_row(record))
    return buffer.getvalue()


def default_report_name(today: Optional[date] = None) -> str:
    """File name offered for a report, e.g. ``Audio_Plugins_2024-05-01.csv``."""
    today = today or date.today()
    return f"{REPORT_PREFIX}{today.strftime('%Y-%m-%d')}{REPORT_EXTENSION}"


def ensure_extension(path: str) -> str:
    """Append ``.csv`` unless the path already ends with it."""
    if path.lower().endswith(REPORT_EXTENSION):
        return path
    return path + REPORT_EXTENSION


def write_report(
    records: Iterable[PluginRecord],
    path: str,
    delimiter: str = ",",
    include_header: bool = True,
) -> str:
    """Write records to a file.

    Args:
        records: Records in output order.
        path: Destination; ``.csv`` is appended when missing. Parent
            directories are created.
        delimiter: Field separator.
        include_header: Emit the column header line first.

    Returns:
        The path actually written.

    Raises:
        ReportError: If the file cannot be written.
    """
    path = ensure_extension(path)
    text = to_delimited_text(records, delimiter=delimiter, include_header=include_header)

    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", newline="", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise ReportError(path, str(e)) from e

    logger.info(f"Report written to {path}")
    return path


__all__ = [
    "COLUMNS",
    "REPORT_EXTENSION",
    "record_row",
    "to_delimited_text",
    "default_report_name",
    "ensure_extension",
    "write_report",
]
