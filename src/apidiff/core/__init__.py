"""Core module exports."""

from apidiff.core.errors import (
    ApiDiffError,
    ConfigError,
    ErrorCode,
    InternalError,
    MalformedModelError,
    UnresolvedReferenceError,
)
from apidiff.core.logging import (
    configure_logging,
    get_run_id,
    run_context,
)

__all__ = [
    # Errors
    "ApiDiffError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "MalformedModelError",
    "UnresolvedReferenceError",
    # Logging
    "configure_logging",
    "get_run_id",
    "run_context",
]
