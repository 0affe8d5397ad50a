"""Custom exceptions for soundkeeper.

Scanning itself never raises these for filesystem problems; missing
roots, unreadable entries and broken manifests degrade silently. These
cover misuse of the surfaces around the scan.
"""


class SoundkeeperError(Exception):
    """Base class for soundkeeper errors."""


class ConfigLoadError(SoundkeeperError):
    """Error loading or validating configuration."""


class ScanInProgressError(SoundkeeperError):
    """Raised when a scan is requested while another one is running."""

    def __init__(self, message: str = "A scan is already in progress"):
        super().__init__(message)


class ReportError(SoundkeeperError):
    """Raised when a report cannot be written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write report to {path}: {reason}")
