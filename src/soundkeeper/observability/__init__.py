"""Observability system for soundkeeper.

Tracks what a scan did beyond the records it returned:
- Scan start and end with summary counts
- Per-root listing results
- Skipped entries and unreadable manifests

Trace Levels:
- OFF: No tracing (default)
- MINIMAL: Scan start/end only
- NORMAL: Plus one record per catalog root
- VERBOSE: Plus skipped entries and manifest errors

Example:
    >>> from soundkeeper.observability import ObservabilityHub, TraceLevel
    >>> hub = ObservabilityHub.get_instance()
    >>> hub.configure(level=TraceLevel.NORMAL)
    >>> hub.add_sink(FileSink("/tmp/scan.jsonl"))
    >>>
    >>> # In scanner code:
    >>> if hub.enabled:
    ...     hub.emit(RootScanRecord(...))
"""

from enum import IntEnum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
import logging
import threading

logger = logging.getLogger(__name__)


class TraceLevel(IntEnum):
    """Observability trace levels.

    Higher levels include all lower level information.
    """
    OFF = 0       # No tracing
    MINIMAL = 1   # Scan boundaries
    NORMAL = 2    # Per-root summaries
    VERBOSE = 3   # Per-entry detail

    @classmethod
    def parse(cls, name: str) -> "TraceLevel":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown trace level: {name}. "
                f"Use one of {[lvl.name.lower() for lvl in cls]}"
            ) from None


class Sink:
    """Base class for trace sinks.

    Sinks receive trace records and handle their output
    (file, console, memory buffer, etc.).
    """

    def write(self, record: "TraceRecord") -> None:
        """Write a trace record.

        Args:
            record: The trace record to write.
        """
        raise NotImplementedError

    def flush(self) -> None:
        """Flush any buffered records."""
        pass

    def close(self) -> None:
        """Close the sink and release resources."""
        pass


class ObservabilityHub:
    """Routes scan trace records to sinks.

    Singleton - use get_instance() to access. Scanner workers emit from
    several threads at once; emission is serialised on an internal lock so
    sinks need not be thread-safe.

    A sink that raises loses that record only. The failure is logged at
    DEBUG and counted in ``get_stats()["sink_errors"]``; other sinks still
    receive the record and the scan carries on.

    Example:
        >>> hub = ObservabilityHub.get_instance()
        >>> hub.configure(level="verbose", sinks=[MemorySink()])
        >>> if hub.enabled:
        ...     hub.emit(record)
    """

    _instance: Optional["ObservabilityHub"] = None
    _lock = threading.Lock()

    def __init__(self):
        """Initialize the hub. Use get_instance() instead."""
        self._level = TraceLevel.OFF
        self._sinks: List[Sink] = []
        self._emit_lock = threading.Lock()
        self._enabled = False

        # Stats
        self._emitted: Dict[str, int] = {}
        self._filtered = 0
        self._sink_errors = 0

    @classmethod
    def get_instance(cls) -> "ObservabilityHub":
        """Get the singleton hub instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. For testing only."""
        with cls._lock:
            if cls._instance is not None:
                cls._instance.shutdown()
            cls._instance = None

    def configure(
        self,
        level: Union[TraceLevel, str] = TraceLevel.OFF,
        sinks: Optional[Iterable[Sink]] = None,
        replace: bool = False,
    ) -> None:
        """Set the trace level and attach sinks.

        Args:
            level: Trace level, or its name as written in config files.
            sinks: Sinks to add.
            replace: Close and drop the current sinks first.
        """
        if isinstance(level, str):
            level = TraceLevel.parse(level)
        if replace:
            self._close_sinks()

        self._level = level
        self._enabled = level > TraceLevel.OFF
        for sink in sinks or ():
            self.add_sink(sink)

    def add_sink(self, sink: Sink) -> None:
        with self._emit_lock:
            self._sinks.append(sink)

    def remove_sink(self, sink: Sink) -> None:
        with self._emit_lock:
            if sink in self._sinks:
                self._sinks.remove(sink)

    @property
    def sinks(self) -> Tuple[Sink, ...]:
        with self._emit_lock:
            return tuple(self._sinks)

    def emit(self, record: "TraceRecord") -> None:
        """Deliver a record to every sink if its level is enabled."""
        if not self._enabled:
            return

        with self._emit_lock:
            if record.min_level > self._level:
                self._filtered += 1
                return
            self._emitted[record.record_type] = self._emitted.get(record.record_type, 0) + 1
            for sink in self._sinks:
                self._call(sink, "write", record)

    def flush(self) -> None:
        with self._emit_lock:
            for sink in self._sinks:
                self._call(sink, "flush")

    def shutdown(self) -> None:
        """Close all sinks and turn tracing off."""
        self._close_sinks()
        self._level = TraceLevel.OFF
        self._enabled = False

    def get_stats(self) -> Dict[str, Any]:
        """Counts of records delivered, filtered by level, and lost to sinks."""
        with self._emit_lock:
            return {
                "level": self._level.name.lower(),
                "sinks": len(self._sinks),
                "emitted": dict(self._emitted),
                "filtered": self._filtered,
                "sink_errors": self._sink_errors,
            }

    @property
    def enabled(self) -> bool:
        """Fast check if tracing is enabled.

        Use this before building records to keep the disabled path cheap.
        """
        return self._enabled

    @property
    def level(self) -> TraceLevel:
        return self._level

    def is_level_enabled(self, level: TraceLevel) -> bool:
        return self._level >= level

    def _close_sinks(self) -> None:
        with self._emit_lock:
            for sink in self._sinks:
                self._call(sink, "flush")
                self._call(sink, "close")
            self._sinks.clear()

    def _call(self, sink: Sink, method: str, *args: Any) -> None:
        # Caller holds _emit_lock
        try:
            getattr(sink, method)(*args)
        except Exception as e:
            self._sink_errors += 1
            logger.debug(f"{type(sink).__name__}.{method} failed: {e}")


# Import records and sinks after defining TraceLevel
from soundkeeper.observability.records import TraceRecord
from soundkeeper.observability.sinks import FileSink, ConsoleSink, MemorySink, NullSink

__all__ = [
    # Core
    "TraceLevel",
    "Sink",
    "ObservabilityHub",
    # Records
    "TraceRecord",
    # Sinks
    "FileSink",
    "ConsoleSink",
    "MemorySink",
    "NullSink",
]
