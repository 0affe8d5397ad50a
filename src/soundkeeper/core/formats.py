"""Plugin formats and the families that install them.

A *format* is what a plugin is (Audio Unit, VST/VST3, AAX). A *family*
is how the catalog groups installation roots: one family per format plus
the Waves family, whose ``.bundle`` entries may be any format and are
resolved by the classifier.

Example:
    >>> PluginFormat.from_suffix(".vst3")
    <PluginFormat.VST: 'vst'>
    >>> PluginFamily.WAVES.suffixes
    ('.bundle',)
"""

from enum import Enum
from typing import Optional, Tuple


class PluginFormat(str, Enum):
    """Closed set of plugin formats recognised by the scanner."""

    AU = "au"
    VST = "vst"
    AAX = "aax"

    @property
    def display_name(self) -> str:
        """Human-readable name used in reports."""
        return _DISPLAY_NAMES[self]

    @property
    def suffixes(self) -> Tuple[str, ...]:
        """Filename suffixes that identify this format."""
        return _FORMAT_SUFFIXES[self]

    @classmethod
    def from_suffix(cls, suffix: str) -> Optional["PluginFormat"]:
        """Map a filename suffix to a format.

        Args:
            suffix: Suffix including the leading dot (case-insensitive).

        Returns:
            The matching format, or None for unknown suffixes.
        """
        suffix = suffix.lower()
        for fmt, suffixes in _FORMAT_SUFFIXES.items():
            if suffix in suffixes:
                return fmt
        return None

    @classmethod
    def parse(cls, value: str) -> "PluginFormat":
        """Parse a format from its value or display name.

        Raises:
            ValueError: If the string names no format.
        """
        lowered = value.strip().lower()
        for fmt in cls:
            if lowered in (fmt.value, fmt.display_name.lower()):
                return fmt
        raise ValueError(
            f"Unknown plugin format: {value}. "
            f"Use one of {[f.value for f in cls]}"
        )


_DISPLAY_NAMES = {
    PluginFormat.AU: "Audio Unit",
    PluginFormat.VST: "VST/VST3",
    PluginFormat.AAX: "AAX",
}

_FORMAT_SUFFIXES = {
    PluginFormat.AU: (".component",),
    PluginFormat.VST: (".vst", ".vst3"),
    PluginFormat.AAX: (".aaxplugin",),
}

# Suffix used by vendors that package every format the same way
VENDOR_BUNDLE_SUFFIX = ".bundle"


class PluginFamily(str, Enum):
    """Groups of catalog roots scanned together."""

    AU = "au"
    VST = "vst"
    AAX = "aax"
    WAVES = "waves"

    @property
    def suffixes(self) -> Tuple[str, ...]:
        """Entry suffixes considered inside this family's roots."""
        if self is PluginFamily.WAVES:
            return (VENDOR_BUNDLE_SUFFIX,)
        return PluginFormat(self.value).suffixes

    def matches(self, entry_name: str) -> bool:
        """Check whether an entry name carries one of this family's suffixes."""
        lowered = entry_name.lower()
        return any(lowered.endswith(s) for s in self.suffixes)


def split_suffix(entry_name: str) -> Tuple[str, str]:
    """Split an entry name into (stem, suffix).

    Only the last dot counts, and dotfiles have no suffix.

    Example:
        >>> split_suffix("Pro-Q 3.vst3")
        ('Pro-Q 3', '.vst3')
    """
    dot = entry_name.rfind(".")
    if dot <= 0:
        return entry_name, ""
    return entry_name[:dot], entry_name[dot:]
