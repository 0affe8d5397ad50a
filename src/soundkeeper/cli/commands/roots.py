"""Roots command for soundkeeper CLI."""

import os
import sys
from typing import Optional

from soundkeeper.api import build_catalog, load_config
from soundkeeper.cli import setup_logging
from soundkeeper.exceptions import ConfigLoadError


def cmd_roots(config_path: Optional[str] = None, log_level: Optional[str] = None) -> int:
    """List the catalog roots a scan would visit.

    Returns:
        Exit code (0 for success, 1 for configuration errors).
    """
    try:
        config = load_config(config_path)
    except ConfigLoadError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(log_level or config.logging.level)
    catalog = build_catalog(config)

    present = 0
    for family in catalog.families():
        print(f"{family.value}:")
        for root in catalog.for_family(family):
            exists = os.path.isdir(root.path)
            present += exists
            marker = "+" if exists else "-"
            print(f"  {marker} {root.path} [{root.scope}]")

    print(f"\n{present} of {len(catalog)} roots present")
    return 0
