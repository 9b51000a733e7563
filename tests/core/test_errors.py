"""Tests for error types and codes."""

import pytest

from apidiff.core.errors import (
    ApiDiffError,
    ConfigError,
    ErrorCode,
    InternalError,
    MalformedModelError,
    UnresolvedReferenceError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.MODEL_IDENTIFIER_COLLISION, 3000),
            (ErrorCode.MODEL_UNRESOLVED_REFERENCE, 3000),
            (ErrorCode.SNAPSHOT_PARSE_ERROR, 3000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestApiDiffError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = ApiDiffError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_includes_code_and_message(self) -> None:
        error = ApiDiffError(code=ErrorCode.INTERNAL_ERROR, message="boom")
        assert str(error) == "[9001] INTERNAL_ERROR: boom"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        with pytest.raises(ApiDiffError):
            raise ConfigError.file_not_found("/nope.yaml")


class TestFactories:
    """Classmethod factories set codes and details."""

    def test_config_parse_error(self) -> None:
        error = ConfigError.parse_error("/a.yaml", "bad indent")
        assert error.code is ErrorCode.CONFIG_PARSE_ERROR
        assert error.details == {"path": "/a.yaml", "reason": "bad indent"}

    def test_config_invalid_value(self) -> None:
        error = ConfigError.invalid_value("comparison.max_workers", 0, "too small")
        assert error.code is ErrorCode.CONFIG_INVALID_VALUE
        assert error.details["value"] == "0"

    def test_identifier_collision(self) -> None:
        error = MalformedModelError.identifier_collision("p.T#f", "lib 1.0")
        assert error.code is ErrorCode.MODEL_IDENTIFIER_COLLISION
        assert "p.T#f" in error.message
        assert error.details == {"identifier": "p.T#f", "model": "lib 1.0"}

    def test_invalid_structure_keeps_details(self) -> None:
        error = MalformedModelError.invalid_structure("field with parameters", member="p.T#f")
        assert error.code is ErrorCode.MODEL_INVALID_STRUCTURE
        assert error.details == {"member": "p.T#f"}

    def test_snapshot_errors(self) -> None:
        assert MalformedModelError.snapshot_not_found("/x").code is ErrorCode.SNAPSHOT_NOT_FOUND
        assert MalformedModelError.parse_error("/x", "r").code is ErrorCode.SNAPSHOT_PARSE_ERROR

    def test_unresolved_reference(self) -> None:
        error = UnresolvedReferenceError.dangling("com.x.Base", "lib 2.0")
        assert error.code is ErrorCode.MODEL_UNRESOLVED_REFERENCE
        assert error.error_name == "MODEL_UNRESOLVED_REFERENCE"

    def test_internal_unexpected(self) -> None:
        error = InternalError.unexpected("oops", where="differ")
        assert error.details == {"where": "differ"}
        assert isinstance(error, ApiDiffError)
