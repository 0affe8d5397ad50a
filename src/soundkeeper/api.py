"""High-level API for soundkeeper.

Turns a configuration into runtime objects and runs scans and exports
with a single call each. Everything here is a thin layer over
``soundkeeper.core``, ``soundkeeper.process`` and ``soundkeeper.report``.

Quick Start:
    >>> import soundkeeper as sk
    >>>
    >>> result = sk.scan()
    >>> for record in result.filter(text="reverb"):
    ...     print(record.name, record.manufacturer, record.version)
    >>>
    >>> sk.export_csv(result.records, "plugins.csv")
"""

import logging
import os
from typing import Iterable, List, Optional, Union
from pathlib import Path

from soundkeeper.config.loader import load_yaml_config
from soundkeeper.config.schema import ConfigSchema, ObservabilitySchema
from soundkeeper.core.catalog import (
    CatalogRoot,
    PathCatalog,
    SCOPE_CUSTOM,
    SCOPE_SYSTEM,
    SCOPE_USER,
    default_catalog,
)
from soundkeeper.core.formats import PluginFamily
from soundkeeper.core.record import PluginRecord, ScanResult
from soundkeeper.observability import ObservabilityHub, Sink
from soundkeeper.process.cancellation import CancellationToken
from soundkeeper.process.scanner import Scanner
from soundkeeper.process.service import ScanService
from soundkeeper.report.delimited import default_report_name, write_report

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


def load_config(path: Optional[Union[str, Path]] = None) -> ConfigSchema:
    """Load a configuration file, or the built-in defaults if no path is given."""
    if path is None:
        return ConfigSchema()
    return load_yaml_config(path)


def build_catalog(
    config: Optional[ConfigSchema] = None,
    system_root: str = "/",
) -> PathCatalog:
    """Build the catalog described by a configuration.

    Built-in roots are narrowed to the configured families and scopes.
    Custom roots are always kept and placed after the built-in roots of
    their family.

    Args:
        config: Configuration (default: built-in defaults).
        system_root: Prefix for system-scope roots.
    """
    config = config or ConfigSchema()
    scan_cfg = config.scan

    home = os.path.expanduser(scan_cfg.home) if scan_cfg.home else None
    catalog = default_catalog(home=home, system_root=system_root)

    scopes = []
    if scan_cfg.include_system:
        scopes.append(SCOPE_SYSTEM)
    if scan_cfg.include_user:
        scopes.append(SCOPE_USER)
    families = [PluginFamily(name) for name in scan_cfg.families]
    catalog = catalog.select(families=families, scopes=scopes)

    custom = [
        CatalogRoot(
            PluginFamily(root.family),
            os.path.expanduser(root.path),
            SCOPE_CUSTOM,
        )
        for root in scan_cfg.custom_roots
    ]
    return catalog.extend(custom)


def build_scanner(config: Optional[ConfigSchema] = None) -> Scanner:
    """Create a Scanner from the ``scan`` section of a configuration."""
    config = config or ConfigSchema()
    return Scanner(
        max_workers=config.scan.max_workers,
        measure_bundle_size=config.scan.measure_bundle_size,
    )


def build_service(
    config: Optional[ConfigSchema] = None,
    catalog: Optional[PathCatalog] = None,
) -> ScanService:
    """Create a ScanService honouring the configured ``on_busy`` policy."""
    config = config or ConfigSchema()
    return ScanService(
        catalog=catalog if catalog is not None else build_catalog(config),
        scanner=build_scanner(config),
        on_busy=config.scan.on_busy,
    )


# =============================================================================
# Observability
# =============================================================================


def build_sinks(schema: ObservabilitySchema) -> List[Sink]:
    """Instantiate the sinks listed in an observability section."""
    from soundkeeper.observability.sinks import (
        ConsoleSink,
        FileSink,
        MemorySink,
        NullSink,
    )

    sinks: List[Sink] = []
    for sink_cfg in schema.sinks:
        options = dict(sink_cfg.options)
        if sink_cfg.type == "file":
            sinks.append(FileSink(sink_cfg.path, **options))
        elif sink_cfg.type == "console":
            sinks.append(ConsoleSink(**options))
        elif sink_cfg.type == "memory":
            sinks.append(MemorySink(**options))
        else:
            sinks.append(NullSink())
    return sinks


def configure_observability(
    config: Optional[ConfigSchema] = None,
    hub: Optional[ObservabilityHub] = None,
) -> ObservabilityHub:
    """Apply the ``observability`` section to a hub (default: the global hub)."""
    config = config or ConfigSchema()
    hub = hub or ObservabilityHub.get_instance()
    hub.configure(
        level=config.observability.level,
        sinks=build_sinks(config.observability),
    )
    return hub


# =============================================================================
# Scan and export
# =============================================================================


def scan(
    config: Optional[ConfigSchema] = None,
    catalog: Optional[PathCatalog] = None,
    token: Optional[CancellationToken] = None,
) -> ScanResult:
    """Run one scan and return its result.

    Args:
        config: Configuration (default: built-in defaults).
        catalog: Catalog to scan instead of the configured one.
        token: Optional cancellation token.

    Returns:
        A new ScanResult. Filesystem problems never raise.
    """
    config = config or ConfigSchema()
    if catalog is None:
        catalog = build_catalog(config)
    return build_scanner(config).scan(catalog, token=token)


def export_csv(
    records: Iterable[PluginRecord],
    path: Optional[Union[str, Path]] = None,
    config: Optional[ConfigSchema] = None,
) -> str:
    """Write records as a delimited report.

    Args:
        records: Records to write, in order.
        path: Destination (default: ``Audio_Plugins_<date>.csv`` in the
            configured report directory or the current directory).
        config: Configuration supplying delimiter and header settings.

    Returns:
        The path written.

    Raises:
        ReportError: If the file cannot be written.
    """
    config = config or ConfigSchema()
    if path is None:
        directory = config.report.directory or os.getcwd()
        path = os.path.join(os.path.expanduser(directory), default_report_name())
    return write_report(
        records,
        str(path),
        delimiter=config.report.delimiter,
        include_header=config.report.include_header,
    )
