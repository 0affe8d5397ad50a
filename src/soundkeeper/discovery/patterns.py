"""Pattern constants and small matchers used by metadata extraction.

All regular expressions live here so they can be tested without touching
the filesystem.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from soundkeeper.core.formats import PluginFamily, PluginFormat

# "Version: 1.2.3" lines in legacy VST resource files
RESOURCE_VERSION_PATTERN = re.compile(r"Version:\s*([0-9][0-9.]*)")

# Dotted version inside a leaf filename: "Comp 2.1.bundle" -> "2.1"
FILENAME_VERSION_PATTERN = re.compile(r"(\d+(?:\.\d+)+)")

# Major version embedded in a directory name: "Plug-Ins V14" -> "14"
DIRECTORY_VERSION_PATTERN = re.compile(r"\bV(\d+)\b")

# Same marker on the leaf, where a minor part is allowed: "API-2500 V12.5"
LEAF_VERSION_PATTERN = re.compile(r"\bV(\d+(?:\.\d+)?)")

# Text after a year in a copyright notice, up to the next punctuation
COPYRIGHT_PATTERN = re.compile(
    r"\b\d{4}\b(?:\s*[-–]\s*\d{4}\b)?\s*,?\s*([^.,;()]+)"
)

# Separators turned into spaces when formatting a bundle-id token
IDENTIFIER_SEPARATORS = re.compile(r"[-_]+")

# Folder names that describe a category, not a vendor
GENERIC_FOLDERS: FrozenSet[str] = frozenset(
    name.lower() for name in (
        "Components",
        "VST",
        "VST2",
        "VST3",
        "Plug-Ins",
        "Plugins",
        "Audio",
        "Library",
        "AAX",
        "Application Support",
    )
)


@dataclass(frozen=True)
class VendorConvention:
    """Packaging rules for a vendor that departs from the standard layout.

    Attributes:
        name: Vendor name reported as manufacturer.
        path_markers: Substrings of a path that identify the vendor.
        name_prefix: Prefix stripped from product names.
        default_format: Format assumed when a bundle cannot be classified.
        family: Catalog family whose roots all follow the convention.
    """

    name: str
    path_markers: Tuple[str, ...]
    name_prefix: str
    default_format: PluginFormat
    family: PluginFamily

    def matches(self, path: str) -> bool:
        return any(marker in path for marker in self.path_markers)


# Default to VST: the most common Waves format, not a correctness rule
WAVES = VendorConvention(
    name="Waves",
    path_markers=("/Waves/", "Waves "),
    name_prefix="Waves ",
    default_format=PluginFormat.VST,
    family=PluginFamily.WAVES,
)

VENDOR_CONVENTIONS: Tuple[VendorConvention, ...] = (WAVES,)


def vendor_for_path(path: str) -> Optional[VendorConvention]:
    """Return the first vendor convention matching a path."""
    for convention in VENDOR_CONVENTIONS:
        if convention.matches(path):
            return convention
    return None


def vendor_for_family(family: Optional[PluginFamily]) -> Optional[VendorConvention]:
    """Return the convention every entry of a family's roots follows, if any."""
    for convention in VENDOR_CONVENTIONS:
        if convention.family is family:
            return convention
    return None


def match_resource_version(text: str) -> Optional[str]:
    match = RESOURCE_VERSION_PATTERN.search(text)
    if match:
        return match.group(1).rstrip(".") or None
    return None


def match_filename_version(filename: str) -> Optional[str]:
    match = FILENAME_VERSION_PATTERN.search(filename)
    return match.group(1) if match else None


def match_directory_version(directory: str) -> Optional[str]:
    """Find a ``V<digits>`` marker in a directory path.

    The marker closest to the leaf wins, so a nested
    ``Plug-Ins V14/Waves`` is preferred over an outer folder.
    """
    matches = DIRECTORY_VERSION_PATTERN.findall(directory)
    return matches[-1] if matches else None


def match_leaf_version(filename: str) -> Optional[str]:
    match = LEAF_VERSION_PATTERN.search(filename)
    return match.group(1) if match else None


def match_copyright_holder(notice: str) -> Optional[str]:
    """Extract the holder from a notice like ``(c) 2022 Native Instruments GmbH``.

    A notice without a year is returned whole: ``(c) Acme Inc.`` names its
    holder even though no part of it can be isolated.
    """
    text = notice.strip()
    match = COPYRIGHT_PATTERN.search(text)
    if match:
        holder = match.group(1).strip()
        if holder:
            return holder
    return text or None


def format_identifier_token(token: str) -> str:
    """Turn a bundle-id segment into a display name.

    Example:
        >>> format_identifier_token("native-instruments")
        'Native Instruments'
    """
    words = IDENTIFIER_SEPARATORS.sub(" ", token).split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def manufacturer_from_identifier(identifier: str) -> Optional[str]:
    """Vendor token of a reverse-DNS identifier (``com.acme.SuperComp`` -> ``Acme``)."""
    parts = [p for p in identifier.strip().split(".")]
    if len(parts) < 2 or not parts[1]:
        return None
    formatted = format_identifier_token(parts[1])
    return formatted or None


def is_generic_folder(name: str) -> bool:
    return name.strip().lower() in GENERIC_FOLDERS


def decode_component_version(value: int) -> Optional[str]:
    """Decode an Audio Unit ``0xMMMMmmbb`` version integer.

    Example:
        >>> decode_component_version(0x00020104)
        '2.1.4'
    """
    if value <= 0:
        return None
    major = (value >> 16) & 0xFFFF
    minor = (value >> 8) & 0xFF
    bugfix = value & 0xFF
    return f"{major}.{minor}.{bugfix}"
