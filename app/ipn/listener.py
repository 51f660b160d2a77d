"""
Top-level IPN flow: decode, verify, dispatch.

IPNListener ties the decoder, the PostbackVerifier and a HandlerRegistry
together. handle_message() is the only entry point the HTTP layer needs:

    listener = IPNListener.from_settings()
    if listener.handle_message(request.body):
        ...  # verified and dispatched

Failures are reported through the return value only. Malformed fields are
dropped, verification problems give False, unroutable messages are ignored
and handler exceptions end the chain without escaping.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ipn.audit import AuditLog
from ipn.decoder import decode
from ipn.registry import HandlerRegistry, ipn_handlers
from ipn.verifier import PostbackVerifier


logger = logging.getLogger(__name__)


class IPNListener:
    """
    Handles PayPal Instant Payment Notifications.

    Attributes:
        registry: Handlers run for verified messages
        verifier: Performs the confirmation round-trip
        audit: Optional audit trail
    """

    def __init__(
        self,
        registry: HandlerRegistry,
        verifier: PostbackVerifier,
        audit: AuditLog | None = None,
    ):
        self.registry = registry
        self.verifier = verifier
        self.audit = audit or AuditLog(enabled=False)

    @classmethod
    def from_settings(cls, registry: HandlerRegistry | None = None) -> IPNListener:
        """
        Build a listener from Django settings.

        Args:
            registry: Registry to dispatch to (defaults to the process-wide
                ``ipn_handlers``)
        """
        return cls(
            registry=registry if registry is not None else ipn_handlers,
            verifier=PostbackVerifier.from_settings(),
            audit=AuditLog.from_settings(),
        )

    def bind(self, message_types: str | Iterable[str], handler: Any) -> bool:
        """Shortcut for ``self.registry.bind()``."""
        return self.registry.bind(message_types, handler)

    def handle_message(self, raw_body: bytes | str) -> bool:
        """
        Process one notification body.

        Args:
            raw_body: The unparsed request body

        Returns:
            True when PayPal verified the message (handlers have run),
            False otherwise (no handler ran)
        """
        message = decode(raw_body)
        self.audit.received(message)

        verified = self.verifier.verify(message)
        self.audit.verification(message, verified)

        if not verified:
            logger.warning(
                "IPN message failed verification",
                extra={"txn_type": message.txn_type, "txn_id": message.get("txn_id")},
            )
            return False

        logger.info(
            "IPN message verified",
            extra={"txn_type": message.txn_type, "txn_id": message.get("txn_id")},
        )
        self.registry.process(message)
        return True
