"""Scan output types.

A :class:`PluginRecord` describes one discovered artifact; a
:class:`ScanResult` is the immutable value a scan pass returns. Records are
never mutated; a rescan produces a new result.

Absent metadata is encoded with the :data:`UNKNOWN` sentinel. Callers that
want an optional value should go through ``version_or_none`` /
``manufacturer_or_none`` rather than comparing against the sentinel.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from soundkeeper.core.formats import PluginFormat

UNKNOWN = "Unknown"


def or_unknown(value: Optional[str]) -> str:
    """Return a stripped value, or the sentinel when it is blank."""
    if value is None:
        return UNKNOWN
    value = value.strip()
    return value or UNKNOWN


def is_known(value: Optional[str]) -> bool:
    """True if the value carries real metadata."""
    return bool(value) and value != UNKNOWN


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class PluginRecord:
    """One discovered plugin.

    Attributes:
        name: Product name with suffix and vendor prefix stripped.
        format: Classified plugin format.
        path: Absolute path of the artifact.
        version: Version string or ``UNKNOWN``.
        manufacturer: Vendor name or ``UNKNOWN``.
        size_bytes: Size on disk at scan time.
        modified_at: Last-modification time at scan time.
        id: Opaque identifier, excluded from equality.
    """

    name: str
    format: PluginFormat
    path: str
    version: str = UNKNOWN
    manufacturer: str = UNKNOWN
    size_bytes: int = 0
    modified_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id, compare=False)

    def __post_init__(self) -> None:
        if not self.version:
            raise ValueError("version must not be empty; use UNKNOWN")
        if not self.manufacturer:
            raise ValueError("manufacturer must not be empty; use UNKNOWN")

    @property
    def version_or_none(self) -> Optional[str]:
        return self.version if is_known(self.version) else None

    @property
    def manufacturer_or_none(self) -> Optional[str]:
        return self.manufacturer if is_known(self.manufacturer) else None

    @property
    def formatted_size(self) -> str:
        from soundkeeper.report.units import format_size
        return format_size(self.size_bytes)

    @property
    def formatted_date(self) -> str:
        from soundkeeper.report.units import format_date
        return format_date(self.modified_at)


@dataclass(frozen=True)
class ScanResult:
    """Complete output of one scan pass.

    Attributes:
        records: Records in family, root, listing order.
        roots_scanned: Roots that existed and were listed.
        roots_missing: Roots that did not exist or could not be listed.
        entries_skipped: Entries rejected or unreadable.
        errors: Non-fatal errors encountered while walking.
        duration_sec: Wall time of the scan.
        cancelled: True if the scan stopped early on request.
    """

    records: Tuple[PluginRecord, ...] = ()
    roots_scanned: int = 0
    roots_missing: int = 0
    entries_skipped: int = 0
    errors: int = 0
    duration_sec: float = 0.0
    cancelled: bool = False

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def by_format(self, fmt: PluginFormat) -> Tuple[PluginRecord, ...]:
        return tuple(r for r in self.records if r.format is fmt)

    def filter(
        self,
        format: Optional[PluginFormat] = None,
        text: Optional[str] = None,
    ) -> Tuple[PluginRecord, ...]:
        """Narrow the records by format and free-text search.

        Args:
            format: Keep only records of this format.
            text: Case-insensitive substring matched against name and
                manufacturer. Blank text matches everything.

        Returns:
            Matching records in scan order.
        """
        records = self.records
        if format is not None:
            records = tuple(r for r in records if r.format is format)
        if text and text.strip():
            needle = text.strip().lower()
            records = tuple(
                r for r in records
                if needle in r.name.lower() or needle in r.manufacturer.lower()
            )
        return records
