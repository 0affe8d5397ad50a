"""Pydantic validation models for soundkeeper configuration.

Defines the schema for YAML configuration files with validation
rules and sensible defaults. Every section is optional; an empty
configuration scans the built-in catalog.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

FamilyName = Literal["au", "vst", "aax", "waves"]


class CustomRootSchema(BaseModel):
    """An extra directory to scan.

    Attributes:
        family: Plugin family the directory holds.
        path: Directory path; ``~`` is expanded.
    """

    family: FamilyName
    path: str

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Custom root path must not be empty")
        return v


class ScanSchema(BaseModel):
    """Configuration for scanning.

    Attributes:
        include_system: Scan system-wide roots.
        include_user: Scan roots under the home directory.
        families: Families to scan (default: all).
        custom_roots: Extra roots, scanned after the built-in roots of
            their family.
        max_workers: Worker threads (default: one per root, capped at 8).
        measure_bundle_size: Sum file sizes inside bundle directories.
        on_busy: What a scan request does while another scan runs.
        home: Home directory for user roots (default: ``~``).
    """

    include_system: bool = True
    include_user: bool = True
    families: List[FamilyName] = Field(
        default_factory=lambda: ["au", "vst", "aax", "waves"]
    )
    custom_roots: List[CustomRootSchema] = Field(default_factory=list)
    max_workers: Optional[int] = Field(default=None, ge=1)
    measure_bundle_size: bool = True
    on_busy: Literal["reject", "queue"] = "reject"
    home: Optional[str] = None

    @field_validator("families")
    @classmethod
    def validate_families(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one family must be scanned")
        # Preserve first occurrence order
        return list(dict.fromkeys(v))


class ReportSchema(BaseModel):
    """Configuration for report export.

    Attributes:
        delimiter: Single-character field separator.
        include_header: Emit the column header line.
        directory: Default directory for reports (default: cwd).
    """

    delimiter: str = ","
    include_header: bool = True
    directory: Optional[str] = None

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        if len(v) != 1 or v in ('"', "\n", "\r"):
            raise ValueError(f"Delimiter must be one character other than a quote: {v!r}")
        return v


class SinkSchema(BaseModel):
    """Configuration for an observability sink.

    Attributes:
        type: Sink type (file, console, memory, null).
        path: File path for file sinks.
        options: Additional sink-specific options.
    """

    type: Literal["file", "console", "memory", "null"] = "file"
    path: Optional[str] = None
    options: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_file_sink_has_path(self) -> "SinkSchema":
        """Validate that file sinks have a path."""
        if self.type == "file" and not self.path:
            raise ValueError("File sink requires 'path' to be set")
        return self


class ObservabilitySchema(BaseModel):
    """Configuration for observability/tracing.

    Attributes:
        level: Trace level (off, minimal, normal, verbose).
        sinks: List of sink configurations.
    """

    level: Literal["off", "minimal", "normal", "verbose"] = "off"
    sinks: List[SinkSchema] = Field(default_factory=list)


class LoggingSchema(BaseModel):
    """Configuration for the standard logging module."""

    level: Literal["debug", "info", "warning", "error"] = "warning"


class ConfigSchema(BaseModel):
    """Root configuration schema.

    Attributes:
        version: Configuration file version (currently "1.0").
        scan: Scan settings.
        report: Report settings.
        observability: Tracing settings.
        logging: Log level.
    """

    version: str = "1.0"
    scan: ScanSchema = Field(default_factory=ScanSchema)
    report: ReportSchema = Field(default_factory=ReportSchema)
    observability: ObservabilitySchema = Field(default_factory=ObservabilitySchema)
    logging: LoggingSchema = Field(default_factory=LoggingSchema)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate configuration version."""
        supported = {"1.0"}
        if v not in supported:
            raise ValueError(
                f"Unsupported config version: {v}. Supported: {supported}"
            )
        return v

    @model_validator(mode="after")
    def validate_has_roots(self) -> "ConfigSchema":
        """Reject a configuration that leaves nothing to scan."""
        s = self.scan
        if not s.include_system and not s.include_user and not s.custom_roots:
            raise ValueError(
                "Nothing to scan: enable include_system or include_user, "
                "or add custom_roots"
            )
        return self
