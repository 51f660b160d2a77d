"""
IPN-specific exceptions.

Exception Hierarchy:
    IPNError (base for the IPN domain)
    ├── IPNConfigurationError - Invalid IPN settings (startup only)
    └── PostbackError - Base for failures of the verification round-trip
        ├── PostbackConnectionError - PayPal could not be reached
        ├── PostbackTimeoutError - PayPal did not answer in time
        └── PostbackRejectedError - PayPal answered with a non-2xx status

Postback errors never leave the verifier: PostbackVerifier.verify() catches
them and reports a negative verdict. They exist so the failure reason is
logged with a stable error code.
"""

from __future__ import annotations

from core.exceptions import BaseApplicationError, ConfigurationError, ExternalServiceError


class IPNError(BaseApplicationError):
    """Base exception for all IPN operations."""

    default_error_code: str = "IPN_ERROR"


class IPNConfigurationError(IPNError, ConfigurationError):
    """
    Raised when the IPN settings cannot be used.

    Example:
        PostbackVerifier(ca_bundle="/missing/cacert.pem")
        # IPNConfigurationError: [IPN_CONFIGURATION_ERROR] CA bundle not found
    """

    default_error_code: str = "IPN_CONFIGURATION_ERROR"


class PostbackError(IPNError, ExternalServiceError):
    """Base exception for the confirmation round-trip with PayPal."""

    default_error_code: str = "POSTBACK_ERROR"


class PostbackConnectionError(PostbackError):
    """Raised on DNS, TCP or TLS failures while posting back."""

    default_error_code: str = "POSTBACK_CONNECTION_ERROR"


class PostbackTimeoutError(PostbackError):
    """Raised when the postback exceeds IPN_TIMEOUT_SECONDS."""

    default_error_code: str = "POSTBACK_TIMEOUT"


class PostbackRejectedError(PostbackError):
    """Raised when PayPal answers the postback with a non-2xx status."""

    default_error_code: str = "POSTBACK_REJECTED"
