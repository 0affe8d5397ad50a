"""soundkeeper - Audio plugin discovery engine.

soundkeeper walks the known plugin installation directories, classifies
each entry as Audio Unit, VST or AAX, recovers version and manufacturer
from manifests and naming conventions, and exports the result as CSV.
It only reads the filesystem; plugins are never loaded.

Quick Start:
    >>> import soundkeeper as sk
    >>>
    >>> result = sk.scan()
    >>> print(f"{len(result)} plugins, {result.roots_missing} roots missing")
    >>>
    >>> sk.export_csv(result.filter(format=sk.PluginFormat.AU), "au.csv")

For advanced usage, see:
- soundkeeper.core: PluginRecord, ScanResult, PathCatalog
- soundkeeper.discovery: classifier and metadata cascades
- soundkeeper.process: Scanner, ScanService, CancellationToken
- soundkeeper.report: delimited-text export
"""

from importlib.metadata import PackageNotFoundError, version as _package_version

try:
    __version__ = _package_version("soundkeeper")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"

# =============================================================================
# High-level API (recommended)
# =============================================================================
from soundkeeper.api import (
    load_config,
    build_catalog,
    build_scanner,
    build_service,
    build_sinks,
    configure_observability,
    scan,
    export_csv,
)

# =============================================================================
# Core types
# =============================================================================
from soundkeeper.core import (
    UNKNOWN,
    PluginFormat,
    PluginFamily,
    PluginRecord,
    ScanResult,
    CatalogRoot,
    PathCatalog,
    default_catalog,
)
from soundkeeper.discovery import classify, extract_metadata, clean_name
from soundkeeper.process import Scanner, ScanService, CancellationToken
from soundkeeper.report import to_delimited_text, write_report, default_report_name
from soundkeeper.exceptions import (
    SoundkeeperError,
    ConfigLoadError,
    ScanInProgressError,
    ReportError,
)

__all__ = [
    "__version__",
    # High-level API
    "load_config",
    "build_catalog",
    "build_scanner",
    "build_service",
    "build_sinks",
    "configure_observability",
    "scan",
    "export_csv",
    # Core types
    "UNKNOWN",
    "PluginFormat",
    "PluginFamily",
    "PluginRecord",
    "ScanResult",
    "CatalogRoot",
    "PathCatalog",
    "default_catalog",
    # Discovery
    "classify",
    "extract_metadata",
    "clean_name",
    # Processing
    "Scanner",
    "ScanService",
    "CancellationToken",
    # Report
    "to_delimited_text",
    "write_report",
    "default_report_name",
    # Errors
    "SoundkeeperError",
    "ConfigLoadError",
    "ScanInProgressError",
    "ReportError",
]
