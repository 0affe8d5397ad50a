"""Path catalog: where plugins are installed.

The catalog is pure data, an ordered tuple of :class:`CatalogRoot`.
Order matters because it fixes the order of scan results
(family, then root, then directory listing). Missing or duplicated roots
are legal here and are tolerated by the scanner.

Example:
    >>> catalog = default_catalog(home="/Users/me")
    >>> [r.path for r in catalog.for_family(PluginFamily.AU)]
    ['/Library/Audio/Plug-Ins/Components', '/Users/me/Library/Audio/Plug-Ins/Components']
"""

import os
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from soundkeeper.core.formats import PluginFamily

SCOPE_SYSTEM = "system"
SCOPE_USER = "user"
SCOPE_CUSTOM = "custom"


@dataclass(frozen=True)
class CatalogRoot:
    """One directory scanned for a plugin family."""

    family: PluginFamily
    path: str
    scope: str = SCOPE_SYSTEM


# Paths relative to "/" (system scope) and to the home directory (user scope)
_STANDARD_DIRS = {
    PluginFamily.AU: [
        "Library/Audio/Plug-Ins/Components",
    ],
    PluginFamily.VST: [
        "Library/Audio/Plug-Ins/VST",
        "Library/Audio/Plug-Ins/VST3",
    ],
    PluginFamily.AAX: [
        "Library/Application Support/Avid/Audio/Plug-Ins",
    ],
}

# Waves installs versioned shells under /Applications
WAVES_APPLICATION_DIRS = [
    "/Applications/Waves/Plug-Ins V9/Waves",
    "/Applications/Waves/Plug-Ins V10/Waves",
    "/Applications/Waves/Plug-Ins V11/Waves",
    "/Applications/Waves/Plug-Ins V12/Waves",
    "/Applications/Waves/Plug-Ins V13/Waves",
    "/Applications/Waves/Plug-Ins V14/Waves",
    "/Applications/Waves/Plug-Ins V15/",
    "/Applications/Waves/Plug-Ins/Waves",
]
WAVES_SUPPORT_DIR = "Library/Application Support/Waves/Plug-Ins"

FAMILY_ORDER = (
    PluginFamily.AU,
    PluginFamily.VST,
    PluginFamily.AAX,
    PluginFamily.WAVES,
)


class PathCatalog:
    """Ordered, immutable list of catalog roots."""

    def __init__(self, roots: Iterable[CatalogRoot] = ()):
        self._roots: Tuple[CatalogRoot, ...] = tuple(roots)

    @property
    def roots(self) -> Tuple[CatalogRoot, ...]:
        return self._roots

    def __iter__(self) -> Iterator[CatalogRoot]:
        return iter(self._roots)

    def __len__(self) -> int:
        return len(self._roots)

    def __repr__(self) -> str:
        return f"PathCatalog({len(self._roots)} roots)"

    def for_family(self, family: PluginFamily) -> Tuple[CatalogRoot, ...]:
        return tuple(r for r in self._roots if r.family is family)

    def families(self) -> Tuple[PluginFamily, ...]:
        """Families present in the catalog, in first-seen order."""
        seen = []
        for root in self._roots:
            if root.family not in seen:
                seen.append(root.family)
        return tuple(seen)

    def select(
        self,
        families: Optional[Sequence[PluginFamily]] = None,
        scopes: Optional[Sequence[str]] = None,
    ) -> "PathCatalog":
        """Return a catalog restricted to some families and/or scopes."""
        roots = self._roots
        if families is not None:
            roots = tuple(r for r in roots if r.family in families)
        if scopes is not None:
            roots = tuple(r for r in roots if r.scope in scopes)
        return PathCatalog(roots)

    def extend(self, roots: Iterable[CatalogRoot]) -> "PathCatalog":
        """Return a catalog with extra roots placed after their family's roots.

        Family order is preserved so custom roots do not reorder results.
        """
        extra = list(roots)
        ordered = []
        for family in _merged_family_order(self._roots, extra):
            ordered.extend(r for r in self._roots if r.family is family)
            ordered.extend(r for r in extra if r.family is family)
        return PathCatalog(ordered)


def _merged_family_order(*groups: Sequence[CatalogRoot]) -> Tuple[PluginFamily, ...]:
    order = list(FAMILY_ORDER)
    for group in groups:
        for root in group:
            if root.family not in order:
                order.append(root.family)
    return tuple(order)


def default_catalog(
    home: Optional[str] = None,
    system_root: str = "/",
) -> PathCatalog:
    """Build the built-in catalog.

    Args:
        home: Home directory for user-scope roots (default: ``~``).
        system_root: Prefix for system-scope roots. Tests point this at a
            temporary directory.

    Returns:
        Catalog ordered AU, VST, AAX, Waves; system roots before user roots.
    """
    if home is None:
        home = os.path.expanduser("~")

    roots = []
    for family in (PluginFamily.AU, PluginFamily.VST, PluginFamily.AAX):
        rel_dirs = _STANDARD_DIRS[family]
        for rel in rel_dirs:
            roots.append(CatalogRoot(family, os.path.join(system_root, rel), SCOPE_SYSTEM))
        for rel in rel_dirs:
            roots.append(CatalogRoot(family, os.path.join(home, rel), SCOPE_USER))

    for app_dir in WAVES_APPLICATION_DIRS:
        path = os.path.join(system_root, app_dir.lstrip("/"))
        roots.append(CatalogRoot(PluginFamily.WAVES, path, SCOPE_SYSTEM))
    roots.append(CatalogRoot(
        PluginFamily.WAVES, os.path.join(system_root, WAVES_SUPPORT_DIR), SCOPE_SYSTEM
    ))
    roots.append(CatalogRoot(
        PluginFamily.WAVES, os.path.join(home, WAVES_SUPPORT_DIR), SCOPE_USER
    ))

    return PathCatalog(roots)
