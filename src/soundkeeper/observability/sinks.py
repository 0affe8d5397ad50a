"""Trace output sinks for observability.

Sinks receive trace records and handle their output to various destinations:
- FileSink: JSONL file output
- ConsoleSink: Formatted console output
- MemorySink: In-memory buffer for tests and post-scan analysis
- NullSink: Discards everything
"""

import sys
import threading
from collections import deque
from pathlib import Path
from typing import Deque, List, Optional, TextIO, Callable

from soundkeeper.observability import Sink
from soundkeeper.observability.records import (
    TraceRecord,
    ScanEndRecord,
    RootScanRecord,
    EntrySkipRecord,
    ManifestErrorRecord,
)


class FileSink(Sink):
    """Sink that writes trace records to a JSONL file.

    Each record is written as a single JSON line, suitable for
    post-processing with tools like jq.

    Args:
        path: Path to the output file.
        buffer_size: Number of records to buffer before flushing (default: 100).
        append: Whether to append to existing file (default: False).

    Example:
        >>> sink = FileSink("/tmp/scan.jsonl")
        >>> hub.add_sink(sink)
        >>> # ... scan ...
        >>> sink.close()  # Ensure final flush
    """

    def __init__(
        self,
        path: str,
        buffer_size: int = 100,
        append: bool = False,
    ):
        self._path = Path(path)
        self._buffer_size = buffer_size
        self._append = append

        self._buffer: List[str] = []
        self._file: Optional[TextIO] = None
        self._lock = threading.Lock()

        self._open_file()

    def _open_file(self) -> None:
        mode = "a" if self._append else "w"
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self._path, mode, encoding="utf-8")

    def write(self, record: TraceRecord) -> None:
        line = record.to_json()

        with self._lock:
            self._buffer.append(line)
            if len(self._buffer) >= self._buffer_size:
                self._flush_buffer()

    def _flush_buffer(self) -> None:
        """Flush the buffer to disk. Must be called with lock held."""
        if not self._buffer or self._file is None:
            return

        for line in self._buffer:
            self._file.write(line + "\n")
        self._file.flush()
        self._buffer.clear()

    def flush(self) -> None:
        with self._lock:
            self._flush_buffer()

    def close(self) -> None:
        with self._lock:
            self._flush_buffer()
            if self._file is not None:
                self._file.close()
                self._file = None


class ConsoleSink(Sink):
    """Sink that writes formatted trace records to console.

    Shows root summaries, skipped entries, manifest errors and the final
    scan summary. Other records are ignored unless ``format_fn`` handles them.

    Args:
        stream: Output stream (default: sys.stderr).
        color: Enable ANSI color codes (default: True).
        format_fn: Optional custom format function for records.
    """

    # ANSI color codes
    COLORS = {
        "reset": "\033[0m",
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "cyan": "\033[96m",
        "gray": "\033[90m",
    }

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        color: bool = True,
        format_fn: Optional[Callable[[TraceRecord], Optional[str]]] = None,
    ):
        self._stream = stream or sys.stderr
        self._color = color and self._stream.isatty()
        self._format_fn = format_fn
        self._lock = threading.Lock()

    def _colorize(self, text: str, color: str) -> str:
        if not self._color:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def write(self, record: TraceRecord) -> None:
        if self._format_fn:
            line = self._format_fn(record)
        else:
            line = self._format_record(record)

        if line:
            with self._lock:
                self._stream.write(line + "\n")
                self._stream.flush()

    def _format_record(self, record: TraceRecord) -> Optional[str]:
        """Format a record for console output, or None to skip it."""
        if isinstance(record, RootScanRecord):
            return self._format_root(record)
        elif isinstance(record, EntrySkipRecord):
            tag = self._colorize("[SKIP]", "gray")
            return f"{tag} {record.path} ({record.reason})"
        elif isinstance(record, ManifestErrorRecord):
            tag = self._colorize("[MANIFEST]", "yellow")
            return f"{tag} {record.path}: {record.manifest}: {record.error}"
        elif isinstance(record, ScanEndRecord):
            return self._format_end(record)
        return None

    def _format_root(self, record: RootScanRecord) -> str:
        family = self._colorize(record.family, "cyan")
        if not record.exists:
            tag = self._colorize("[ROOT]", "gray")
            return f"{tag} {family} {record.path} (missing)"
        if record.error:
            tag = self._colorize("[ROOT]", "red")
            return f"{tag} {family} {record.path}: {record.error}"
        tag = self._colorize("[ROOT]", "green")
        return (
            f"{tag} {family} {record.path}: {record.records} plugins, "
            f"{record.skipped} skipped in {record.processing_ms:.0f}ms"
        )

    def _format_end(self, record: ScanEndRecord) -> str:
        tag = self._colorize("[SCAN]", "green" if not record.cancelled else "yellow")
        status = "cancelled" if record.cancelled else "complete"
        return (
            f"{tag} {status}: {record.total_records} plugins from "
            f"{record.roots_scanned} roots ({record.roots_missing} missing) "
            f"in {record.duration_sec:.2f}s"
        )

    def flush(self) -> None:
        with self._lock:
            self._stream.flush()


class MemorySink(Sink):
    """Sink that stores trace records in memory.

    Args:
        max_records: Maximum number of records to keep (default: 10000).

    Example:
        >>> sink = MemorySink()
        >>> hub.add_sink(sink)
        >>> # ... scan ...
        >>> roots = sink.get_records("root_scan")
    """

    def __init__(self, max_records: int = 10000):
        self._max_records = max_records
        self._records: Deque[TraceRecord] = deque(maxlen=max_records)
        self._lock = threading.Lock()

    def write(self, record: TraceRecord) -> None:
        with self._lock:
            self._records.append(record)

    def get_records(self, record_type: Optional[str] = None) -> List[TraceRecord]:
        """Get stored records, optionally filtered by record type."""
        with self._lock:
            records = list(self._records)

        if record_type:
            records = [r for r in records if r.record_type == record_type]

        return records

    def get_by_path(self, path: str) -> List[TraceRecord]:
        """Get all records that refer to a given filesystem path."""
        with self._lock:
            records = list(self._records)

        return [r for r in records if getattr(r, "path", None) == path]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


class NullSink(Sink):
    """Sink that discards all records."""

    def write(self, record: TraceRecord) -> None:
        pass


__all__ = [
    "FileSink",
    "ConsoleSink",
    "MemorySink",
    "NullSink",
]
