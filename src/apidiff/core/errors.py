"""apidiff error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Model (snapshot construction and lookup)
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Model (3xxx)
    MODEL_IDENTIFIER_COLLISION = 3001
    MODEL_INVALID_STRUCTURE = 3002
    MODEL_UNRESOLVED_REFERENCE = 3003
    SNAPSHOT_NOT_FOUND = 3004
    SNAPSHOT_PARSE_ERROR = 3005

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class ApiDiffError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ApiDiffError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class MalformedModelError(ApiDiffError):
    """An API snapshot violates the model's structural invariants.

    Raised while a model is being constructed or loaded. The diff engine
    itself never raises it: any model it receives is already valid.
    """

    @classmethod
    def identifier_collision(cls, identifier: str, model: str) -> "MalformedModelError":
        return cls(
            code=ErrorCode.MODEL_IDENTIFIER_COLLISION,
            message=f"Duplicate declaration '{identifier}' in API '{model}'",
            details={"identifier": identifier, "model": model},
        )

    @classmethod
    def invalid_structure(cls, reason: str, **details: Any) -> "MalformedModelError":
        return cls(
            code=ErrorCode.MODEL_INVALID_STRUCTURE,
            message=f"Invalid API model: {reason}",
            details=details,
        )

    @classmethod
    def snapshot_not_found(cls, path: str) -> "MalformedModelError":
        return cls(
            code=ErrorCode.SNAPSHOT_NOT_FOUND,
            message=f"Snapshot file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "MalformedModelError":
        return cls(
            code=ErrorCode.SNAPSHOT_PARSE_ERROR,
            message=f"Failed to parse snapshot at {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class UnresolvedReferenceError(ApiDiffError):
    """A superclass or interface reference names no type in the model."""

    @classmethod
    def dangling(cls, reference: str, model: str) -> "UnresolvedReferenceError":
        return cls(
            code=ErrorCode.MODEL_UNRESOLVED_REFERENCE,
            message=f"Type reference '{reference}' does not resolve in API '{model}'",
            details={"reference": reference, "model": model},
        )


class InternalError(ApiDiffError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
