"""Readers for manifests embedded in plugin bundles.

Three kinds of manifest are understood:
- ``Contents/Info.plist``: property list (XML or binary), via plistlib
- ``Contents/Resources/moduleinfo.json``: VST3 JSON sidecar
- ``Contents/Resources/plugin.info``: free-text resource file (legacy VST)

Every reader returns None instead of raising. A missing file is a plain
miss; an unreadable or malformed file is logged and reported to the
observability hub, then treated as a miss.
"""

import json
import logging
import os
import plistlib
from typing import Any, Dict, Optional

from soundkeeper.observability import ObservabilityHub

logger = logging.getLogger(__name__)

INFO_PLIST = os.path.join("Contents", "Info.plist")
MODULE_INFO = os.path.join("Contents", "Resources", "moduleinfo.json")
RESOURCE_INFO = os.path.join("Contents", "Resources", "plugin.info")

# Resource files are small; refuse to slurp anything unreasonable
MAX_TEXT_BYTES = 1024 * 1024


def _report_error(bundle_path: str, manifest: str, error: Exception) -> None:
    logger.debug(f"Unreadable manifest {manifest} in {bundle_path}: {error}")
    hub = ObservabilityHub.get_instance()
    if hub.enabled:
        from soundkeeper.observability.records import ManifestErrorRecord
        hub.emit(ManifestErrorRecord(
            path=bundle_path,
            manifest=manifest,
            error=str(error),
        ))


def read_info_plist(bundle_path: str) -> Optional[Dict[str, Any]]:
    """Load a bundle's Info.plist.

    Args:
        bundle_path: Path of the bundle directory.

    Returns:
        The top-level dictionary, or None if absent or unparseable.
    """
    path = os.path.join(bundle_path, INFO_PLIST)
    if not os.path.isfile(path):
        return None
    try:
        with open(path, "rb") as f:
            data = plistlib.load(f)
    except Exception as e:
        # Malformed values raise more than ExpatError (e.g. AttributeError for a bad <date>)
        _report_error(bundle_path, INFO_PLIST, e)
        return None
    if not isinstance(data, dict):
        _report_error(
            bundle_path, INFO_PLIST,
            ValueError(f"expected dict, got {type(data).__name__}"),
        )
        return None
    return data


def read_module_info(bundle_path: str) -> Optional[Dict[str, Any]]:
    """Load a VST3 ``moduleinfo.json`` sidecar."""
    path = os.path.join(bundle_path, MODULE_INFO)
    if not os.path.isfile(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except Exception as e:
        _report_error(bundle_path, MODULE_INFO, e)
        return None
    if not isinstance(data, dict):
        _report_error(
            bundle_path, MODULE_INFO,
            ValueError(f"expected object, got {type(data).__name__}"),
        )
        return None
    return data


def read_resource_text(bundle_path: str) -> Optional[str]:
    """Read a legacy ``plugin.info`` resource file as text."""
    path = os.path.join(bundle_path, RESOURCE_INFO)
    if not os.path.isfile(path):
        return None
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read(MAX_TEXT_BYTES)
    except OSError as e:
        _report_error(bundle_path, RESOURCE_INFO, e)
        return None


def string_value(data: Optional[Dict[str, Any]], key: str) -> Optional[str]:
    """Return ``data[key]`` if it is a non-blank string."""
    if not data:
        return None
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def first_string(data: Optional[Dict[str, Any]], *keys: str) -> Optional[str]:
    """Return the first non-blank string among ``keys``, in priority order."""
    for key in keys:
        value = string_value(data, key)
        if value is not None:
            return value
    return None


def first_audio_component(plist: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """First entry of an Audio Unit's ``AudioComponents`` array."""
    if not plist:
        return None
    components = plist.get("AudioComponents")
    if isinstance(components, list) and components and isinstance(components[0], dict):
        return components[0]
    return None
