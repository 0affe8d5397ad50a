"""Human-readable size and date strings for reports."""

from datetime import datetime

# (unit, fraction digits), decimal file units
_SIZE_UNITS = (
    ("KB", 0),
    ("MB", 1),
    ("GB", 2),
    ("TB", 2),
    ("PB", 2),
)

_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def format_size(size_bytes: int) -> str:
    """Format a byte count the way file browsers do.

    Example:
        >>> format_size(0)
        'Zero KB'
        >>> format_size(512)
        '512 bytes'
        >>> format_size(12_000)
        '12 KB'
        >>> format_size(3_400_000)
        '3.4 MB'
    """
    size_bytes = max(0, int(size_bytes))
    if size_bytes == 0:
        return "Zero KB"
    if size_bytes == 1:
        return "1 byte"
    if size_bytes < 1000:
        return f"{size_bytes} bytes"

    value = float(size_bytes)
    for unit, digits in _SIZE_UNITS:
        value /= 1000
        text = f"{value:.{digits}f}"
        # 999,999 bytes rounds to 1,000 KB; carry into the next unit
        if float(text) < 1000:
            break

    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {unit}"


def format_date(moment: datetime) -> str:
    """Format a timestamp as ``Mon D, YYYY at H:MM AM``.

    Month names are fixed English abbreviations, independent of locale.
    """
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{_MONTHS[moment.month - 1]} {moment.day}, {moment.year} "
        f"at {hour}:{moment.minute:02d} {meridiem}"
    )


__all__ = ["format_size", "format_date"]
