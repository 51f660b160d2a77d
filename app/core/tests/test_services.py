"""
Tests for the shared result wrapper and base exceptions.

Tests cover:
- ServiceResult construction and truthiness
- BaseApplicationError formatting
"""

from core.exceptions import BaseApplicationError, ExternalServiceError
from core.services import ServiceResult


class TestServiceResult:
    """Tests for ServiceResult."""

    def test_success_is_truthy(self):
        """A successful result is truthy and carries its data."""
        result = ServiceResult.success("61E67681CH3238416")

        assert result
        assert result.data == "61E67681CH3238416"
        assert result.error is None

    def test_failure_is_falsy(self):
        """A failed result is falsy and carries the error details."""
        result = ServiceResult.failure("Unknown receiver", "RECEIVER_MISMATCH")

        assert not result
        assert result.data is None
        assert result.error == "Unknown receiver"
        assert result.error_code == "RECEIVER_MISMATCH"

    def test_failure_without_code(self):
        """The error code is optional."""
        result = ServiceResult.failure("Payment not completed")

        assert not result
        assert result.error_code is None


class TestBaseApplicationError:
    """Tests for BaseApplicationError."""

    def test_default_error_code(self):
        """Subclasses provide their default error code."""
        error = ExternalServiceError("PayPal unavailable")

        assert error.error_code == "EXTERNAL_SERVICE_ERROR"
        assert str(error) == "[EXTERNAL_SERVICE_ERROR] PayPal unavailable"

    def test_to_dict_includes_details(self):
        """Details are included only when present."""
        error = BaseApplicationError("boom", error_code="X", details={"a": 1})

        assert error.to_dict() == {"error": "boom", "error_code": "X", "details": {"a": 1}}
        assert BaseApplicationError("boom").to_dict() == {
            "error": "boom",
            "error_code": "APPLICATION_ERROR",
        }
