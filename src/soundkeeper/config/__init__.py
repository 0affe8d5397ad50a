"""Configuration system for soundkeeper.

Provides YAML-based scan configuration with:
- Pydantic schema validation
- Environment variable substitution (${VAR} and ${VAR:-default})

Example YAML config:
    version: "1.0"
    scan:
      families: [au, vst, waves]
      include_user: true
      custom_roots:
        - family: vst
          path: "${STUDIO_VST:-/Volumes/Studio/VST3}"
      on_busy: queue
    report:
      delimiter: ","
    observability:
      level: normal
      sinks:
        - type: file
          path: "${LOG_DIR:-./logs}/scan.jsonl"
    logging:
      level: info

Example usage:
    >>> from soundkeeper.config import load_yaml_config
    >>> config = load_yaml_config("soundkeeper.yaml")
    >>> config.scan.on_busy
    'queue'
"""

from soundkeeper.config.schema import (
    ConfigSchema,
    ScanSchema,
    CustomRootSchema,
    ReportSchema,
    ObservabilitySchema,
    SinkSchema,
    LoggingSchema,
)
from soundkeeper.config.loader import (
    load_yaml_config,
    load_yaml_string,
    substitute_env_vars,
)
from soundkeeper.exceptions import ConfigLoadError

__all__ = [
    # Schema models
    "ConfigSchema",
    "ScanSchema",
    "CustomRootSchema",
    "ReportSchema",
    "ObservabilitySchema",
    "SinkSchema",
    "LoggingSchema",
    # Loader
    "load_yaml_config",
    "load_yaml_string",
    "substitute_env_vars",
    "ConfigLoadError",
]
