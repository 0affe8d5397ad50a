"""Report export for soundkeeper."""

from soundkeeper.report.units import format_size, format_date
from soundkeeper.report.delimited import (
    COLUMNS,
    REPORT_EXTENSION,
    record_row,
    to_delimited_text,
    default_report_name,
    ensure_extension,
    write_report,
)

__all__ = [
    "format_size",
    "format_date",
    "COLUMNS",
    "REPORT_EXTENSION",
    "record_row",
    "to_delimited_text",
    "default_report_name",
    "ensure_extension",
    "write_report",
]
