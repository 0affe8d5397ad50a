"""Cooperative cancellation for scans."""

import threading


class CancellationToken:
    """Thread-safe flag checked by scan workers between entries.

    A scan that sees the flag stops listing and returns the records built
    so far with ``cancelled=True``.

    Example:
        >>> token = CancellationToken()
        >>> future = service.request_scan(token=token)
        >>> token.cancel()
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"
