"""Scan execution for soundkeeper.

- Scanner: walks catalog roots on a thread pool and merges partials
- ScanService: serialises scan requests, returns Futures
- CancellationToken: stops a scan between entries
"""

from soundkeeper.process.cancellation import CancellationToken
from soundkeeper.process.scanner import Scanner, RootOutcome, measure_size
from soundkeeper.process.service import (
    ScanService,
    ON_BUSY_REJECT,
    ON_BUSY_QUEUE,
    ON_BUSY_POLICIES,
)

__all__ = [
    "CancellationToken",
    "Scanner",
    "RootOutcome",
    "measure_size",
    "ScanService",
    "ON_BUSY_REJECT",
    "ON_BUSY_QUEUE",
    "ON_BUSY_POLICIES",
]
