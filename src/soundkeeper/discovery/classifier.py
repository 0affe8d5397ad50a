"""Format classification for directory entries.

Most entries are classified by suffix alone. Vendor bundles (``.bundle``)
use one suffix for every format, so the classifier inspects them:

1. Marker subpaths under ``Contents/MacOS`` (``VST``, ``VST3``, ``AU``, ``AAX``)
2. Tokens in the bundle identifier from ``Contents/Info.plist``
3. Tokens in the path itself
4. The vendor's default format

Step 4 never rejects a vendor bundle. That bias follows what the vendor
ships most, and is kept on purpose.

Classification reads the disk on every call and caches nothing.
"""

import os
import re
from typing import Callable, List, Optional

from soundkeeper.core.formats import PluginFormat, VENDOR_BUNDLE_SUFFIX, split_suffix
from soundkeeper.discovery.manifest import read_info_plist, string_value
from soundkeeper.discovery.patterns import WAVES, vendor_for_path

# Checked in order; the first existing marker wins
BUNDLE_MARKERS = (
    (os.path.join("Contents", "MacOS", "VST"), PluginFormat.VST),
    (os.path.join("Contents", "MacOS", "VST3"), PluginFormat.VST),
    (os.path.join("Contents", "MacOS", "AU"), PluginFormat.AU),
    (os.path.join("Contents", "MacOS", "AAX"), PluginFormat.AAX),
)

_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")

BundleHeuristic = Callable[[str], Optional[PluginFormat]]


def _format_from_text(text: str) -> Optional[PluginFormat]:
    """Guess a format from free text such as an identifier or a path.

    ``vst``, ``audiounit`` and ``aax`` match as substrings. ``au`` is too
    short for that and must be a standalone token.
    """
    lowered = text.lower()
    if "vst" in lowered:
        return PluginFormat.VST
    tokens = set(_TOKEN_SPLIT.split(lowered))
    if "audiounit" in lowered or "au" in tokens or "component" in tokens:
        return PluginFormat.AU
    if "aax" in lowered:
        return PluginFormat.AAX
    return None


def format_from_markers(bundle_path: str) -> Optional[PluginFormat]:
    for marker, fmt in BUNDLE_MARKERS:
        if os.path.exists(os.path.join(bundle_path, marker)):
            return fmt
    return None


def format_from_identifier(bundle_path: str) -> Optional[PluginFormat]:
    identifier = string_value(read_info_plist(bundle_path), "CFBundleIdentifier")
    if identifier is None:
        return None
    return _format_from_text(identifier)


def format_from_path(bundle_path: str) -> Optional[PluginFormat]:
    return _format_from_text(bundle_path)


BUNDLE_HEURISTICS: List[BundleHeuristic] = [
    format_from_markers,
    format_from_identifier,
    format_from_path,
]


def classify_bundle(bundle_path: str) -> PluginFormat:
    """Resolve the format of a vendor ``.bundle``.

    Args:
        bundle_path: Path of the bundle.

    Returns:
        The first format any heuristic yields, else the vendor default.
    """
    for heuristic in BUNDLE_HEURISTICS:
        fmt = heuristic(bundle_path)
        if fmt is not None:
            return fmt
    convention = vendor_for_path(bundle_path) or WAVES
    return convention.default_format


def classify(entry_name: str, entry_path: str) -> Optional[PluginFormat]:
    """Decide which plugin format an entry represents.

    Args:
        entry_name: Name of the directory entry.
        entry_path: Full path of the entry.

    Returns:
        The plugin format, or None if the entry is not a plugin.

    Example:
        >>> classify("Reverb.component", "/x/Reverb.component")
        <PluginFormat.AU: 'au'>
        >>> classify("README.txt", "/x/README.txt") is None
        True
    """
    _, suffix = split_suffix(entry_name)
    if not suffix:
        return None

    fmt = PluginFormat.from_suffix(suffix)
    if fmt is not None:
        return fmt

    if suffix.lower() == VENDOR_BUNDLE_SUFFIX:
        return classify_bundle(entry_path)

    return None
