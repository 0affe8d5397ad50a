"""Metadata extraction: version and manufacturer for a plugin entry.

Each field is resolved by a cascade of strategies, plain functions taking
a :class:`BundleInfo` and returning a string or None. Strategies run in
list order and the first non-empty answer wins; when all of them miss, the
field is the ``UNKNOWN`` sentinel.

Version cascade:
    vendor directory marker -> manifest keys -> resource file -> filename

Manufacturer cascade:
    vendor convention -> manifest vendor fields -> bundle identifier
    -> copyright notice -> "Vendor Product" filename -> parent folder

Example:
    >>> meta = extract_metadata("/Library/Audio/Plug-Ins/VST3/Pro-Q 3.vst3")
    >>> meta.version, meta.manufacturer
    ('Unknown', 'Unknown')
"""

import logging
import os
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Callable, Dict, List, Optional

from soundkeeper.core.formats import PluginFamily, PluginFormat, split_suffix
from soundkeeper.core.record import UNKNOWN, or_unknown
from soundkeeper.discovery import manifest
from soundkeeper.discovery.patterns import (
    VendorConvention,
    decode_component_version,
    is_generic_folder,
    manufacturer_from_identifier,
    match_copyright_holder,
    match_directory_version,
    match_filename_version,
    match_leaf_version,
    match_resource_version,
    vendor_for_family,
    vendor_for_path,
)

logger = logging.getLogger(__name__)


class BundleInfo:
    """Lazily loaded view of one entry, shared by all strategies.

    Manifests are read at most once per extraction. Nothing is cached
    across entries or scans. ``family`` is the catalog family of the root
    the entry was found in, when known; a vendor family applies its
    convention even where the path carries no vendor marker.
    """

    def __init__(
        self,
        path: str,
        format: Optional[PluginFormat] = None,
        family: Optional[PluginFamily] = None,
    ):
        self.path = os.path.normpath(path)
        self.filename = os.path.basename(self.path)
        self.directory = os.path.dirname(self.path)
        self.stem, self.suffix = split_suffix(self.filename)
        self.suffix = self.suffix.lower()
        if format is None:
            from soundkeeper.discovery.classifier import classify
            format = classify(self.filename, self.path)
        self.format = format
        self.family = family

    @cached_property
    def vendor(self) -> Optional[VendorConvention]:
        return vendor_for_path(self.path) or vendor_for_family(self.family)

    @cached_property
    def plist(self) -> Optional[Dict[str, Any]]:
        return manifest.read_info_plist(self.path)

    @cached_property
    def module_info(self) -> Optional[Dict[str, Any]]:
        if self.suffix != ".vst3":
            return None
        return manifest.read_module_info(self.path)

    @cached_property
    def resource_text(self) -> Optional[str]:
        if self.suffix != ".vst":
            return None
        return manifest.read_resource_text(self.path)


Strategy = Callable[[BundleInfo], Optional[str]]


# =============================================================================
# Version strategies
# =============================================================================


def vendor_directory_version(info: BundleInfo) -> Optional[str]:
    """``Plug-Ins V14/Waves/X.bundle`` -> ``14`` for vendor-convention paths."""
    if info.vendor is None:
        return None
    return match_directory_version(info.directory) or match_leaf_version(info.stem)


def _audio_unit_version(plist: Dict[str, Any]) -> Optional[str]:
    raw = plist.get("AudioUnit Version")
    if isinstance(raw, int) and not isinstance(raw, bool):
        return decode_component_version(raw)
    if isinstance(raw, str) and raw.strip():
        text = raw.strip()
        if text.lower().startswith("0x"):
            try:
                return decode_component_version(int(text, 16))
            except ValueError:
                return None
        return text

    component = manifest.first_audio_component(plist)
    if component is not None:
        value = component.get("version")
        if isinstance(value, int) and not isinstance(value, bool):
            return decode_component_version(value)
    return None


def manifest_version(info: BundleInfo) -> Optional[str]:
    """Known version keys, short version string before build number."""
    if info.module_info is not None:
        version = manifest.string_value(info.module_info, "version")
        if version is not None:
            return version

    plist = info.plist
    if plist is None:
        return None

    version = manifest.first_string(plist, "CFBundleShortVersionString", "CFBundleVersion")
    if version is not None:
        return version

    if info.format is PluginFormat.AU:
        return _audio_unit_version(plist)
    return None


def resource_file_version(info: BundleInfo) -> Optional[str]:
    """``Version: <n>`` line in a legacy VST ``plugin.info``."""
    if info.resource_text is None:
        return None
    return match_resource_version(info.resource_text)


def filename_version(info: BundleInfo) -> Optional[str]:
    return match_filename_version(info.stem)


VERSION_STRATEGIES: List[Strategy] = [
    vendor_directory_version,
    manifest_version,
    resource_file_version,
    filename_version,
]


# =============================================================================
# Manufacturer strategies
# =============================================================================


def vendor_convention_manufacturer(info: BundleInfo) -> Optional[str]:
    return info.vendor.name if info.vendor is not None else None


def _module_info_vendor(data: Optional[Dict[str, Any]]) -> Optional[str]:
    if not data:
        return None
    vendor = manifest.first_string(data, "vendor", "Vendor")
    if vendor is not None:
        return vendor
    factory = data.get("Factory Info")
    if isinstance(factory, dict):
        return manifest.first_string(factory, "Vendor", "vendor")
    return None


def manifest_manufacturer(info: BundleInfo) -> Optional[str]:
    """Format-specific vendor fields."""
    if info.format is PluginFormat.AU:
        vendor = manifest.string_value(info.plist, "AudioUnitVendorName")
        if vendor is not None:
            return vendor
        component = manifest.first_audio_component(info.plist)
        name = manifest.string_value(component, "name")
        if name is not None and ":" in name:
            vendor = name.split(":", 1)[0].strip()
            return vendor or None
        return None

    if info.format is PluginFormat.AAX:
        return manifest.string_value(info.plist, "AAXManufacturerName")

    return _module_info_vendor(info.module_info)


def identifier_manufacturer(info: BundleInfo) -> Optional[str]:
    """Second segment of ``CFBundleIdentifier``, title-cased."""
    identifier = manifest.string_value(info.plist, "CFBundleIdentifier")
    if identifier is None:
        return None
    return manufacturer_from_identifier(identifier)


def copyright_manufacturer(info: BundleInfo) -> Optional[str]:
    notice = manifest.string_value(info.plist, "NSHumanReadableCopyright")
    if notice is None:
        return None
    return match_copyright_holder(notice)


def filename_manufacturer(info: BundleInfo) -> Optional[str]:
    """Legacy VST naming convention ``Manufacturer PluginName.vst``."""
    if info.suffix != ".vst":
        return None
    words = info.stem.split()
    if len(words) >= 2:
        return words[0]
    return None


def path_segment_manufacturer(info: BundleInfo) -> Optional[str]:
    """Name of the enclosing folder unless it is a generic category folder."""
    parent = os.path.basename(info.directory)
    if not parent or is_generic_folder(parent):
        return None
    return parent


MANUFACTURER_STRATEGIES: List[Strategy] = [
    vendor_convention_manufacturer,
    manifest_manufacturer,
    identifier_manufacturer,
    copyright_manufacturer,
    filename_manufacturer,
    path_segment_manufacturer,
]


# =============================================================================
# Cascade
# =============================================================================


def run_cascade(strategies: List[Strategy], info: BundleInfo) -> str:
    """Apply strategies in order and return the first non-empty answer.

    A strategy that raises counts as a miss.

    Returns:
        The answer, or ``UNKNOWN`` when every strategy misses.
    """
    for strategy in strategies:
        try:
            value = strategy(info)
        except Exception as e:
            logger.warning(f"{strategy.__name__} failed for {info.path}: {e}")
            continue
        if value is not None and value.strip():
            return value.strip()
    return UNKNOWN


@dataclass(frozen=True)
class Metadata:
    """Extracted fields, never empty."""

    version: str = UNKNOWN
    manufacturer: str = UNKNOWN


def extract_metadata(
    path: str,
    format: Optional[PluginFormat] = None,
    family: Optional[PluginFamily] = None,
) -> Metadata:
    """Extract version and manufacturer in one pass over the entry.

    Args:
        path: Path of the plugin entry.
        format: Classified format. Classified on the fly if omitted.
        family: Family of the catalog root holding the entry.

    Returns:
        Metadata with both fields set, possibly to ``UNKNOWN``.
    """
    info = BundleInfo(path, format, family)
    return Metadata(
        version=or_unknown(run_cascade(VERSION_STRATEGIES, info)),
        manufacturer=or_unknown(run_cascade(MANUFACTURER_STRATEGIES, info)),
    )


def extract_version(path: str, format: Optional[PluginFormat] = None) -> str:
    """Best-effort version string for an entry, or ``UNKNOWN``."""
    return run_cascade(VERSION_STRATEGIES, BundleInfo(path, format))


def extract_manufacturer(path: str, format: Optional[PluginFormat] = None) -> str:
    """Best-effort vendor name for an entry, or ``UNKNOWN``."""
    return run_cascade(MANUFACTURER_STRATEGIES, BundleInfo(path, format))
