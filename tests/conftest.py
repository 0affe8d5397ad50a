"""Shared fixtures: fake plugin trees built under tmp_path."""

import json
import plistlib
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import pytest

from soundkeeper.observability import ObservabilityHub


def build_bundle(
    parent: Path,
    name: str,
    plist: Optional[Dict[str, Any]] = None,
    module_info: Optional[Dict[str, Any]] = None,
    resource_text: Optional[str] = None,
    markers: Iterable[str] = (),
    payload_bytes: int = 0,
) -> Path:
    """Create a bundle directory with optional manifests.

    Args:
        parent: Directory to create the bundle in (created if missing).
        name: Entry name including suffix, e.g. ``"Reverb.component"``.
        plist: Written as ``Contents/Info.plist``.
        module_info: Written as ``Contents/Resources/moduleinfo.json``.
        resource_text: Written as ``Contents/Resources/plugin.info``.
        markers: Names created under ``Contents/MacOS``.
        payload_bytes: Size of a binary written under ``Contents/MacOS``.
    """
    bundle = parent / name
    contents = bundle / "Contents"
    contents.mkdir(parents=True, exist_ok=True)

    if plist is not None:
        with open(contents / "Info.plist", "wb") as f:
            plistlib.dump(plist, f)

    if module_info is not None or resource_text is not None:
        resources = contents / "Resources"
        resources.mkdir(exist_ok=True)
        if module_info is not None:
            (resources / "moduleinfo.json").write_text(json.dumps(module_info), encoding="utf-8")
        if resource_text is not None:
            (resources / "plugin.info").write_text(resource_text, encoding="utf-8")

    macos = contents / "MacOS"
    for marker in markers:
        macos.mkdir(exist_ok=True)
        (macos / marker).write_bytes(b"")
    if payload_bytes:
        macos.mkdir(exist_ok=True)
        (macos / "payload").write_bytes(b"\0" * payload_bytes)

    return bundle


@pytest.fixture
def make_bundle():
    """Factory fixture around build_bundle."""
    return build_bundle


# XML that parses but holds a <date> plistlib cannot decode
MALFORMED_DATE_PLIST = (
    b'<?xml version="1.0" encoding="UTF-8"?>\n'
    b'<plist version="1.0"><dict><key>Built</key><date>yesterday</date></dict></plist>\n'
)


@pytest.fixture
def write_malformed_plist():
    """Replace a bundle's Info.plist with one plistlib fails to decode."""
    def write(bundle: Path) -> Path:
        path = bundle / "Contents" / "Info.plist"
        path.write_bytes(MALFORMED_DATE_PLIST)
        return path
    return write


@pytest.fixture
def waves_root(tmp_path):
    """``<tmp>/Applications/Waves/Plug-Ins V14/Waves``, created empty."""
    root = tmp_path / "Applications" / "Waves" / "Plug-Ins V14" / "Waves"
    root.mkdir(parents=True)
    return root


@pytest.fixture(autouse=True)
def reset_observability():
    """Give every test a fresh, disabled observability hub."""
    ObservabilityHub.reset_instance()
    yield
    ObservabilityHub.reset_instance()

