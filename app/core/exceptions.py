"""
Base exception classes for application-wide error handling.

This module provides a small exception hierarchy that enables:
- Machine-readable error codes for logging and client handling
- Detailed error context for debugging

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ConfigurationError - Invalid or missing settings detected at startup
    └── ExternalServiceError - Third-party service failures

Usage:
    from core.exceptions import ExternalServiceError

    # Raise with message only
    raise ExternalServiceError("PayPal did not answer")

    # Raise with error code and details
    raise ExternalServiceError(
        "PayPal answered with HTTP 503",
        error_code="POSTBACK_REJECTED",
        details={"status_code": 503},
    )

    # Convert to dict for logging
    try:
        ...
    except BaseApplicationError as e:
        logger.warning(str(e), extra=e.to_dict())

Note:
    These exceptions describe domain failures. Request-level code is expected
    to translate them into return values instead of letting them escape.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (metadata, upstream errors, etc.)

    Example:
        try:
            verifier.verify(message)
        except BaseApplicationError as e:
            logger.warning(f"Verification failed: {e.error_code}")
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for responses and log records.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "PayPal answered with HTTP 503",
                "error_code": "POSTBACK_REJECTED",
                "details": {"status_code": 503}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ConfigurationError(BaseApplicationError):
    """
    Raised when settings are invalid.

    Use for:
    - Paths in settings that do not exist
    - Values that cannot be interpreted

    Only raise while the application is being wired up, never while a
    request is being served.
    """

    default_error_code: str = "CONFIGURATION_ERROR"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Use for:
    - Third-party API failures
    - Network timeouts
    - External service unavailability
    - Unexpected external service responses

    Note:
        Log the original error for debugging but don't expose
        internal details to clients in production.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
