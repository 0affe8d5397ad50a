"""Trace record data classes for scan observability.

Record Categories:
- Base: TraceRecord
- Scan: start/end of a scan pass (MINIMAL)
- Root: one summary per catalog root (NORMAL)
- Entry: skipped entries and manifest errors (VERBOSE)
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Any
import time
import json


# Forward reference for TraceLevel
from soundkeeper.observability import TraceLevel


@dataclass
class TraceRecord:
    """Base class for all trace records.

    All trace records have:
    - record_type: String identifying the record type
    - timestamp_ns: When the record was created (wall clock)
    - min_level: Minimum trace level required to emit this record
    """
    record_type: str = field(default="base", init=False)
    timestamp_ns: int = field(default_factory=time.time_ns)
    min_level: TraceLevel = field(default=TraceLevel.NORMAL, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert record to a JSON-ready dictionary."""
        d = asdict(self)
        # min_level is internal
        d.pop("min_level", None)
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


# =============================================================================
# Scan Records
# =============================================================================


@dataclass
class ScanStartRecord(TraceRecord):
    """Emitted when a scan pass begins."""
    record_type: str = field(default="scan_start", init=False)
    min_level: TraceLevel = field(default=TraceLevel.MINIMAL, repr=False)

    scan_id: str = ""
    root_count: int = 0
    families: List[str] = field(default_factory=list)
    max_workers: int = 0


@dataclass
class ScanEndRecord(TraceRecord):
    """Emitted when a scan pass finishes, including cancelled passes."""
    record_type: str = field(default="scan_end", init=False)
    min_level: TraceLevel = field(default=TraceLevel.MINIMAL, repr=False)

    scan_id: str = ""
    duration_sec: float = 0.0

    total_records: int = 0
    roots_scanned: int = 0
    roots_missing: int = 0
    entries_skipped: int = 0
    errors: int = 0
    cancelled: bool = False


# =============================================================================
# Root Records
# =============================================================================


@dataclass
class RootScanRecord(TraceRecord):
    """Summary of one catalog root."""
    record_type: str = field(default="root_scan", init=False)
    min_level: TraceLevel = field(default=TraceLevel.NORMAL, repr=False)

    scan_id: str = ""
    family: str = ""
    path: str = ""
    exists: bool = True
    entries: int = 0
    records: int = 0
    skipped: int = 0
    processing_ms: float = 0.0
    error: str = ""


# =============================================================================
# Entry Records
# =============================================================================


@dataclass
class EntrySkipRecord(TraceRecord):
    """An entry that did not become a record."""
    record_type: str = field(default="entry_skip", init=False)
    min_level: TraceLevel = field(default=TraceLevel.VERBOSE, repr=False)

    scan_id: str = ""
    path: str = ""
    reason: str = ""  # "suffix", "unclassified", "unreadable", "duplicate"


@dataclass
class ManifestErrorRecord(TraceRecord):
    """A manifest that exists but could not be read or parsed."""
    record_type: str = field(default="manifest_error", init=False)
    min_level: TraceLevel = field(default=TraceLevel.VERBOSE, repr=False)

    path: str = ""
    manifest: str = ""
    error: str = ""


__all__ = [
    "TraceRecord",
    "ScanStartRecord",
    "ScanEndRecord",
    "RootScanRecord",
    "EntrySkipRecord",
    "ManifestErrorRecord",
]
