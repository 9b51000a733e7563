"""Config module exports."""

from apidiff.config.loader import load_config
from apidiff.config.models import (
    ApiDiffConfig,
    ComparisonConfig,
    LoggingConfig,
    LogOutputConfig,
    ReportConfig,
)

__all__ = [
    "load_config",
    "ApiDiffConfig",
    "ComparisonConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ReportConfig",
]
