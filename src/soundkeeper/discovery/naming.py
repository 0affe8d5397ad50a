"""Display-name cleanup for discovered entries."""

from soundkeeper.core.formats import PluginFormat, VENDOR_BUNDLE_SUFFIX, split_suffix
from soundkeeper.discovery.patterns import VENDOR_CONVENTIONS


def clean_name(entry_name: str) -> str:
    """Strip the packaging suffix and any known vendor prefix.

    Example:
        >>> clean_name("Waves SSLComp.bundle")
        'SSLComp'
        >>> clean_name("Pro-Q 3.vst3")
        'Pro-Q 3'
    """
    stem, suffix = split_suffix(entry_name)
    lowered = suffix.lower()
    if PluginFormat.from_suffix(lowered) is None and lowered != VENDOR_BUNDLE_SUFFIX:
        stem = entry_name

    for convention in VENDOR_CONVENTIONS:
        prefix = convention.name_prefix
        if stem.startswith(prefix) and len(stem) > len(prefix):
            stem = stem[len(prefix):]
            break

    return stem.strip() or entry_name
