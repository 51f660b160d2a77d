"""
Result wrapper shared by service code and IPN handlers.

ServiceResult gives handlers a consistent way to report success or failure
without exceptions. It is falsy when the operation failed, which is what the
IPN dispatcher uses to stop a handler chain.

Pattern Comparison:
    - ServiceResult: Use for expected failures (validation, business rules)
    - Exceptions: Use for unexpected failures (network errors, bugs)

Usage:
    from core.services import ServiceResult

    @ipn_handlers.on("web_accept")
    def credit_order(message):
        if message.get("payment_status") != "Completed":
            return ServiceResult.failure(
                "Payment not completed",
                error_code="PAYMENT_NOT_COMPLETED",
            )
        return ServiceResult.success(message["txn_id"])

Related:
    - core.exceptions: For unexpected/exceptional errors
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code, logged when a handler chain stops

    Usage:
        # Success case
        return ServiceResult.success(order_id)

        # Failure case
        return ServiceResult.failure("Unknown receiver", "RECEIVER_MISMATCH")

        # Check result
        result = handler(message)
        if result:
            ...
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code

        Returns:
            ServiceResult with success=False and error details
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
        )

    def __bool__(self) -> bool:
        """
        Allow using result in boolean context.

        A failed result stops an IPN handler chain.
        """
        return self.success
