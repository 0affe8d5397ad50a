"""Validate command for soundkeeper CLI."""

import sys
from pathlib import Path

from soundkeeper.api import build_catalog
from soundkeeper.config import load_yaml_config, ConfigLoadError


def cmd_validate(config_path: str) -> int:
    """Validate a configuration file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Exit code (0 for success, 1 for validation errors).
    """
    path = Path(config_path)

    if not path.exists():
        print(f"Error: Configuration file not found: {path}", file=sys.stderr)
        return 1

    print(f"Validating: {path}")

    try:
        config = load_yaml_config(path)
    except ConfigLoadError as e:
        print(f"Validation failed: {e}", file=sys.stderr)
        return 1

    scan = config.scan
    print(f"  Version: {config.version}")
    print(f"  Families: {', '.join(scan.families)}")

    scopes = [name for name, on in (("system", scan.include_system), ("user", scan.include_user)) if on]
    print(f"  Scopes: {', '.join(scopes) or 'custom only'}")

    if scan.custom_roots:
        print(f"  Custom roots: {len(scan.custom_roots)}")
        for root in scan.custom_roots:
            print(f"    - {root.family} -> {root.path}")

    print(f"  Workers: {scan.max_workers or 'auto'}")
    print(f"  On busy: {scan.on_busy}")
    print(f"  Report delimiter: {config.report.delimiter!r}")
    print(f"  Observability: {config.observability.level}")

    if config.observability.sinks:
        print(f"  Sinks: {len(config.observability.sinks)}")
        for sink in config.observability.sinks:
            sink_info = sink.type
            if sink.path:
                sink_info += f" -> {sink.path}"
            print(f"    - {sink_info}")

    print(f"  Catalog: {len(build_catalog(config))} roots")
    print("\nConfiguration is valid.")
    return 0
