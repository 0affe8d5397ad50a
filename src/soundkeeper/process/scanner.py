"""Scanner - thread-parallel walk of catalog roots.

Each catalog root is listed by its own worker. Workers share nothing
while running; each returns a partial list of records, and the partials
are merged once in catalog order after every worker has finished.

Architecture:
    PathCatalog ──→ [Thread Pool] ──→ partials ──→ merge ──→ ScanResult
                        │
                        ├── root 1 (worker 1): list → classify → extract
                        ├── root 2 (worker 2)
                        └── root N (worker N)

Example:
    >>> from soundkeeper.core import default_catalog
    >>> from soundkeeper.process import Scanner
    >>>
    >>> scanner = Scanner(max_workers=4)
    >>> result = scanner.scan(default_catalog())
    >>> for record in result:
    ...     print(record.name, record.version)
"""

import os
import time
import uuid
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from concurrent.futures import ThreadPoolExecutor, Future

from soundkeeper.core.catalog import CatalogRoot, PathCatalog
from soundkeeper.core.formats import PluginFamily, PluginFormat
from soundkeeper.core.record import PluginRecord, ScanResult
from soundkeeper.discovery.classifier import classify
from soundkeeper.discovery.metadata import Metadata, extract_metadata
from soundkeeper.discovery.naming import clean_name
from soundkeeper.observability import ObservabilityHub
from soundkeeper.process.cancellation import CancellationToken

logger = logging.getLogger(__name__)


Classifier = Callable[[str, str], Optional[PluginFormat]]
Extractor = Callable[[str, PluginFormat, PluginFamily], Metadata]


@dataclass
class RootOutcome:
    """Partial result of one worker. Owned by that worker until merged."""

    root: CatalogRoot
    records: List[PluginRecord] = field(default_factory=list)
    exists: bool = True
    entries: int = 0
    skipped: int = 0
    errors: int = 0
    error: str = ""
    processing_ms: float = 0.0


def measure_size(path: str, is_dir: bool, recursive: bool = True) -> int:
    """Size of an entry on disk.

    Bundles are directories, so their own ``st_size`` says little. With
    ``recursive`` the sizes of all regular files below are summed.
    Unreadable subpaths are ignored. Symlinks are not followed.
    """
    if not is_dir or not recursive:
        return os.stat(path).st_size

    total = 0
    for dirpath, _dirnames, filenames in os.walk(path):
        for name in filenames:
            try:
                total += os.lstat(os.path.join(dirpath, name)).st_size
            except OSError:
                continue
    return total


class Scanner:
    """Walks catalog roots in parallel and builds plugin records.

    Args:
        max_workers: Maximum number of worker threads. Default: one per
            root, capped at 8.
        measure_bundle_size: Sum file sizes inside bundle directories.
        classifier: Entry classifier, ``classify`` by default.
        extractor: Metadata extractor, ``extract_metadata`` by default.
            Called with the entry path, its format and the root's family.
        observability_hub: Optional custom hub (uses global if None).

    Thread Safety:
        - Workers never touch shared state; partials are merged by the
          calling thread after all workers complete
        - Stats are updated by the calling thread only
        - One Scanner may run several scans in sequence; use ScanService
          to keep requests from overlapping
    """

    DEFAULT_MAX_WORKERS = 8

    def __init__(
        self,
        max_workers: Optional[int] = None,
        measure_bundle_size: bool = True,
        classifier: Classifier = classify,
        extractor: Extractor = extract_metadata,
        observability_hub: Optional[ObservabilityHub] = None,
    ):
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self._max_workers = max_workers
        self._measure_bundle_size = measure_bundle_size
        self._classify = classifier
        self._extract = extractor
        self._hub = observability_hub or ObservabilityHub.get_instance()

        # Stats
        self._scans_completed = 0
        self._total_records = 0
        self._total_errors = 0
        self._total_time_ns = 0

    # =========================================================================
    # Public API
    # =========================================================================

    def scan(
        self,
        catalog: PathCatalog,
        token: Optional[CancellationToken] = None,
    ) -> ScanResult:
        """Scan every root of a catalog.

        Args:
            catalog: Roots to scan, in result order.
            token: Optional cancellation token, checked between entries.

        Returns:
            A new ScanResult. Never raises for filesystem problems.
        """
        token = token or CancellationToken()
        scan_id = uuid.uuid4().hex[:8]
        start_ns = time.perf_counter_ns()

        roots = self._unique_roots(catalog)
        workers = self._worker_count(len(roots))

        if self._hub.enabled:
            from soundkeeper.observability.records import ScanStartRecord
            self._hub.emit(ScanStartRecord(
                scan_id=scan_id,
                root_count=len(roots),
                families=[f.value for f in catalog.families()],
                max_workers=workers,
            ))

        logger.info(f"Scan {scan_id} started: {len(roots)} roots, {workers} workers")

        outcomes = self._run_workers(roots, workers, scan_id, token)
        records, duplicates = self._merge(outcomes, scan_id)

        elapsed_ns = time.perf_counter_ns() - start_ns
        result = ScanResult(
            records=tuple(records),
            roots_scanned=sum(1 for o in outcomes if o.exists),
            roots_missing=sum(1 for o in outcomes if not o.exists),
            entries_skipped=sum(o.skipped for o in outcomes) + duplicates,
            errors=sum(o.errors for o in outcomes),
            duration_sec=elapsed_ns / 1e9,
            cancelled=token.cancelled,
        )

        self._scans_completed += 1
        self._total_records += len(result.records)
        self._total_errors += result.errors
        self._total_time_ns += elapsed_ns

        if self._hub.enabled:
            self._emit_end(scan_id, result)

        logger.info(
            f"Scan {scan_id} {'cancelled' if result.cancelled else 'finished'}: "
            f"{len(result.records)} records, {result.roots_missing} missing roots, "
            f"{result.errors} errors in {result.duration_sec:.2f}s"
        )
        return result

    def scan_root(
        self,
        root: CatalogRoot,
        scan_id: str = "",
        token: Optional[CancellationToken] = None,
    ) -> RootOutcome:
        """List one root and build records for the entries it accepts.

        A missing or unreadable root yields an outcome with ``exists=False``
        and no records.
        """
        token = token or CancellationToken()
        start_ns = time.perf_counter_ns()
        outcome = RootOutcome(root=root)

        try:
            with os.scandir(root.path) as it:
                entries = list(it)
        except (FileNotFoundError, NotADirectoryError):
            outcome.exists = False
            entries = []
        except OSError as e:
            logger.warning(f"Cannot list {root.path}: {e}")
            outcome.exists = False
            outcome.errors += 1
            outcome.error = str(e)
            entries = []

        outcome.entries = len(entries)

        for entry in entries:
            if token.cancelled:
                break
            record = self._build_record(root, entry, scan_id, outcome)
            if record is not None:
                outcome.records.append(record)

        outcome.processing_ms = (time.perf_counter_ns() - start_ns) / 1_000_000

        if self._hub.enabled:
            from soundkeeper.observability.records import RootScanRecord
            self._hub.emit(RootScanRecord(
                scan_id=scan_id,
                family=root.family.value,
                path=root.path,
                exists=outcome.exists,
                entries=outcome.entries,
                records=len(outcome.records),
                skipped=outcome.skipped,
                processing_ms=outcome.processing_ms,
                error=outcome.error,
            ))

        return outcome

    def get_stats(self) -> Dict[str, Any]:
        """Get scanner statistics across all scans run so far."""
        avg_time_ms = (
            (self._total_time_ns / self._scans_completed / 1_000_000)
            if self._scans_completed > 0
            else 0
        )
        return {
            "scans_completed": self._scans_completed,
            "total_records": self._total_records,
            "errors": self._total_errors,
            "avg_time_ms": avg_time_ms,
            "max_workers": self._max_workers or self.DEFAULT_MAX_WORKERS,
        }

    # =========================================================================
    # Internals
    # =========================================================================

    def _worker_count(self, root_count: int) -> int:
        limit = self._max_workers or self.DEFAULT_MAX_WORKERS
        return max(1, min(limit, root_count))

    def _unique_roots(self, catalog: PathCatalog) -> List[CatalogRoot]:
        """Drop roots that normalise to an already listed directory."""
        seen = set()
        roots = []
        for root in catalog:
            key = os.path.normpath(os.path.abspath(root.path))
            if key in seen:
                logger.debug(f"Skipping duplicate root {root.path}")
                continue
            seen.add(key)
            roots.append(CatalogRoot(root.family, key, root.scope))
        return roots

    def _run_workers(
        self,
        roots: List[CatalogRoot],
        workers: int,
        scan_id: str,
        token: CancellationToken,
    ) -> List[RootOutcome]:
        if not roots:
            return []

        with ThreadPoolExecutor(
            max_workers=workers,
            thread_name_prefix="scan_",
        ) as executor:
            futures: List[Future] = [
                executor.submit(self.scan_root, root, scan_id, token)
                for root in roots
            ]

            # Collected in submission order, which is catalog order
            outcomes = []
            for root, future in zip(roots, futures):
                try:
                    outcomes.append(future.result())
                except Exception as e:
                    logger.error(f"Worker for {root.path} failed: {e}")
                    outcomes.append(RootOutcome(root=root, errors=1, error=str(e)))
        return outcomes

    def _merge(self, outcomes: List[RootOutcome], scan_id: str):
        """Concatenate partials, keeping the first record for each path."""
        seen_paths = set()
        records: List[PluginRecord] = []
        duplicates = 0
        for outcome in outcomes:
            for record in outcome.records:
                if record.path in seen_paths:
                    duplicates += 1
                    self._emit_skip(scan_id, record.path, "duplicate")
                    continue
                seen_paths.add(record.path)
                records.append(record)
        return records, duplicates

    def _build_record(
        self,
        root: CatalogRoot,
        entry: os.DirEntry,
        scan_id: str,
        outcome: RootOutcome,
    ) -> Optional[PluginRecord]:
        """Classify and enrich one entry. Problems skip the entry."""
        path = entry.path

        if not root.family.matches(entry.name):
            outcome.skipped += 1
            self._emit_skip(scan_id, path, "suffix")
            return None

        try:
            fmt = self._classify(entry.name, path)
        except Exception as e:
            logger.error(f"Classifier error for {path}: {e}")
            outcome.skipped += 1
            outcome.errors += 1
            self._emit_skip(scan_id, path, "unreadable")
            return None

        if fmt is None:
            outcome.skipped += 1
            self._emit_skip(scan_id, path, "unclassified")
            return None

        try:
            stat = entry.stat()
            is_dir = entry.is_dir()
            size = measure_size(path, is_dir, self._measure_bundle_size)
        except OSError as e:
            logger.debug(f"Cannot stat {path}: {e}")
            outcome.skipped += 1
            self._emit_skip(scan_id, path, "unreadable")
            return None

        try:
            metadata = self._extract(path, fmt, root.family)
        except Exception as e:
            logger.error(f"Extractor error for {path}: {e}")
            outcome.errors += 1
            metadata = Metadata()

        return PluginRecord(
            name=clean_name(entry.name),
            format=fmt,
            path=path,
            version=metadata.version,
            manufacturer=metadata.manufacturer,
            size_bytes=size,
            modified_at=datetime.fromtimestamp(stat.st_mtime),
        )

    def _emit_skip(self, scan_id: str, path: str, reason: str) -> None:
        if self._hub.enabled:
            from soundkeeper.observability.records import EntrySkipRecord
            self._hub.emit(EntrySkipRecord(scan_id=scan_id, path=path, reason=reason))

    def _emit_end(self, scan_id: str, result: ScanResult) -> None:
        from soundkeeper.observability.records import ScanEndRecord
        self._hub.emit(ScanEndRecord(
            scan_id=scan_id,
            duration_sec=result.duration_sec,
            total_records=len(result.records),
            roots_scanned=result.roots_scanned,
            roots_missing=result.roots_missing,
            entries_skipped=result.entries_skipped,
            errors=result.errors,
            cancelled=result.cancelled,
        ))
        self._hub.flush()
