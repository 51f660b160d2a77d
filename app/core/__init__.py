"""
Core Application - Shared Base Classes

This app holds the generic pieces the IPN app builds on. Nothing here knows
about PayPal.

Services (import from core.services):
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ConfigurationError: Invalid or missing settings
    - ExternalServiceError: Third-party service failures

Usage:
    from core.services import ServiceResult
    from core.exceptions import ExternalServiceError
"""

from .services import ServiceResult

from .exceptions import (
    BaseApplicationError,
    ConfigurationError,
    ExternalServiceError,
)

__all__ = [
    # Services
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "ConfigurationError",
    "ExternalServiceError",
]
