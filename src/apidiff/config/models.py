"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (APIDIFF__SECTION__KEY)
3. Project YAML (.apidiff.yaml)
4. Global YAML (~/.config/apidiff/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    APIDIFF__<SECTION>__<KEY>=<VALUE>

Examples:
    APIDIFF__LOGGING__LEVEL=DEBUG
    APIDIFF__COMPARISON__MAX_WORKERS=4
    APIDIFF__REPORT__DOC_CHANGES=false
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        APIDIFF__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs one event per scope walked.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ComparisonConfig(BaseModel):
    """Comparison engine configuration.

    Env vars:
        APIDIFF__COMPARISON__MAX_WORKERS: Parallel package workers
        APIDIFF__COMPARISON__INCLUDE_INHERITED: Add inherited members before diffing
    """

    max_workers: int = Field(
        default=1,
        description="Packages diffed in parallel. 1 walks sequentially. "
        "Output is identical either way.",
    )
    include_inherited: bool = Field(
        default=False,
        description="List methods and fields inherited from supertypes in each type "
        "before comparing. Changes in inheritance then show up as member changes.",
    )

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v


class ReportConfig(BaseModel):
    """Options handed to the renderer alongside the diff result.

    These gate what the renderer shows; the differ always computes the
    full classification.

    Env vars:
        APIDIFF__REPORT__VERBOSE: Include unchanged declarations
        APIDIFF__REPORT__STATS: Include the statistics summary
        APIDIFF__REPORT__DOC_CHANGES: Include documentation differences
        APIDIFF__REPORT__INCOMPATIBLE_ONLY: Show only incompatible changes
    """

    verbose: bool = Field(default=False, description="Show unchanged declarations too.")
    stats: bool = Field(default=True, description="Show the statistics summary.")
    doc_changes: bool = Field(
        default=True,
        description="Show documentation text differences.",
    )
    incompatible_only: bool = Field(
        default=False,
        description="Hide documentation and deprecation differences and additions.",
    )


class ApiDiffConfig(BaseModel):
    """Root configuration for apidiff.

    All settings can be configured via:
    1. Environment variables: APIDIFF__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    comparison: ComparisonConfig = Field(default_factory=ComparisonConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
