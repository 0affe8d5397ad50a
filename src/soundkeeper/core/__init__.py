"""Core types for soundkeeper.

- PluginFormat / PluginFamily: what a plugin is and where it is looked for
- PluginRecord / ScanResult: scan output values
- PathCatalog / CatalogRoot: installation roots to scan
"""

from soundkeeper.core.formats import (
    PluginFormat,
    PluginFamily,
    VENDOR_BUNDLE_SUFFIX,
    split_suffix,
)
from soundkeeper.core.record import (
    UNKNOWN,
    PluginRecord,
    ScanResult,
    is_known,
    or_unknown,
)
from soundkeeper.core.catalog import (
    CatalogRoot,
    PathCatalog,
    default_catalog,
    SCOPE_SYSTEM,
    SCOPE_USER,
    SCOPE_CUSTOM,
)

__all__ = [
    # Formats
    "PluginFormat",
    "PluginFamily",
    "VENDOR_BUNDLE_SUFFIX",
    "split_suffix",
    # Records
    "UNKNOWN",
    "PluginRecord",
    "ScanResult",
    "is_known",
    "or_unknown",
    # Catalog
    "CatalogRoot",
    "PathCatalog",
    "default_catalog",
    "SCOPE_SYSTEM",
    "SCOPE_USER",
    "SCOPE_CUSTOM",
]
