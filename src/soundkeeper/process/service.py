"""ScanService - serialises scan requests.

Scans never overlap. A request made while another scan is in flight is
either rejected or queued behind it, depending on the ``on_busy`` policy.
Results are handed back through a Future and an optional callback; the
service keeps no result state of its own.

Example:
    >>> service = ScanService(catalog=default_catalog())
    >>> future = service.request_scan(callback=lambda r: print(len(r)))
    >>> result = future.result()
    >>> service.shutdown()
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional

from soundkeeper.core.catalog import PathCatalog, default_catalog
from soundkeeper.core.record import ScanResult
from soundkeeper.exceptions import ScanInProgressError
from soundkeeper.process.cancellation import CancellationToken
from soundkeeper.process.scanner import Scanner

logger = logging.getLogger(__name__)

ON_BUSY_REJECT = "reject"
ON_BUSY_QUEUE = "queue"
ON_BUSY_POLICIES = (ON_BUSY_REJECT, ON_BUSY_QUEUE)

ResultCallback = Callable[[ScanResult], None]


class ScanService:
    """Runs scans one at a time on a dedicated thread.

    Args:
        catalog: Catalog scanned by every request (default: built-in).
        scanner: Scanner to use (default: a new Scanner).
        on_busy: ``"reject"`` raises ScanInProgressError while a scan is
            pending or running; ``"queue"`` runs requests in order.
    """

    def __init__(
        self,
        catalog: Optional[PathCatalog] = None,
        scanner: Optional[Scanner] = None,
        on_busy: str = ON_BUSY_REJECT,
    ):
        if on_busy not in ON_BUSY_POLICIES:
            raise ValueError(
                f"Unknown on_busy policy: {on_busy}. Use one of {list(ON_BUSY_POLICIES)}"
            )

        self._catalog = catalog if catalog is not None else default_catalog()
        self._scanner = scanner or Scanner()
        self._on_busy = on_busy

        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="scan_service_",
        )
        self._lock = threading.Lock()
        self._pending = 0
        self._closed = False

        # Stats
        self._requests = 0
        self._rejected = 0

    @property
    def catalog(self) -> PathCatalog:
        return self._catalog

    @property
    def on_busy(self) -> str:
        return self._on_busy

    @property
    def busy(self) -> bool:
        """True while a scan is queued or running."""
        with self._lock:
            return self._pending > 0

    def request_scan(
        self,
        callback: Optional[ResultCallback] = None,
        token: Optional[CancellationToken] = None,
    ) -> "Future[ScanResult]":
        """Schedule a scan of the service's catalog.

        Args:
            callback: Called with the ScanResult once
                the scan succeeds. Errors it raises are logged.
            token: Optional cancellation token for this scan.

        Returns:
            Future resolving to the ScanResult.

        Raises:
            ScanInProgressError: Policy is ``"reject"`` and a scan is in flight.
            RuntimeError: The service has been shut down.
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("ScanService has been shut down")
            if self._on_busy == ON_BUSY_REJECT and self._pending > 0:
                self._rejected += 1
                raise ScanInProgressError()
            self._pending += 1
            self._requests += 1
            future = self._executor.submit(self._run, token)

        future.add_done_callback(self._on_done)
        if callback is not None:
            future.add_done_callback(_deliver(callback))
        return future

    def scan(self, token: Optional[CancellationToken] = None) -> ScanResult:
        """Request a scan and wait for its result."""
        return self.request_scan(token=token).result()

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            stats = {
                "requests": self._requests,
                "rejected": self._rejected,
                "pending": self._pending,
                "on_busy": self._on_busy,
            }
        stats["scanner"] = self._scanner.get_stats()
        return stats

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting requests and release the service thread."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ScanService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    def _run(self, token: Optional[CancellationToken]) -> ScanResult:
        # Pending drops before the future resolves
        try:
            return self._scanner.scan(self._catalog, token)
        except Exception as e:
            logger.error(f"Scan failed: {e}")
            raise
        finally:
            with self._lock:
                self._pending -= 1

    def _on_done(self, future: Future) -> None:
        # A request cancelled before it started never reaches _run
        if future.cancelled():
            with self._lock:
                self._pending -= 1


def _deliver(callback: ResultCallback) -> Callable[[Future], None]:
    def _done(future: Future) -> None:
        if future.cancelled() or future.exception() is not None:
            return
        try:
            callback(future.result())
        except Exception as e:
            logger.error(f"Scan callback error: {e}")
    return _done
