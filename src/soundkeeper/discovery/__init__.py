"""Classification and metadata extraction for plugin entries.

Example:
    >>> from soundkeeper.discovery import classify, extract_metadata, clean_name
    >>> fmt = classify("Reverb.component", "/Library/Audio/Plug-Ins/Components/Reverb.component")
    >>> meta = extract_metadata("/Library/Audio/Plug-Ins/Components/Reverb.component", fmt)
"""

from soundkeeper.discovery.classifier import classify, classify_bundle
from soundkeeper.discovery.metadata import (
    BundleInfo,
    Metadata,
    MANUFACTURER_STRATEGIES,
    VERSION_STRATEGIES,
    extract_metadata,
    extract_manufacturer,
    extract_version,
    run_cascade,
)
from soundkeeper.discovery.naming import clean_name
from soundkeeper.discovery.patterns import (
    VendorConvention,
    VENDOR_CONVENTIONS,
    WAVES,
    vendor_for_family,
    vendor_for_path,
)

__all__ = [
    # Classification
    "classify",
    "classify_bundle",
    # Extraction
    "BundleInfo",
    "Metadata",
    "MANUFACTURER_STRATEGIES",
    "VERSION_STRATEGIES",
    "extract_metadata",
    "extract_manufacturer",
    "extract_version",
    "run_cascade",
    # Naming
    "clean_name",
    # Vendor conventions
    "VendorConvention",
    "VENDOR_CONVENTIONS",
    "WAVES",
    "vendor_for_family",
    "vendor_for_path",
]
