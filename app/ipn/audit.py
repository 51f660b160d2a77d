"""
Optional audit trail of received and verified IPN messages.

Lines go to the ``ipn.audit`` logger. Where they end up is decided by the
LOGGING setting: with IPN_AUDIT_LOG_FILE set, config.settings attaches an
append-mode file handler that prefixes each line with a timestamp. Write
failures are handled by the logging machinery and never reach the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings

if TYPE_CHECKING:
    from ipn.decoder import IPNMessage


AUDIT_LOGGER_NAME = "ipn.audit"


class AuditLog:
    """Writes human-readable audit lines when enabled."""

    def __init__(self, enabled: bool = False, logger: logging.Logger | None = None):
        self.enabled = enabled
        self.logger = logger or logging.getLogger(AUDIT_LOGGER_NAME)

    @classmethod
    def from_settings(cls) -> AuditLog:
        return cls(enabled=getattr(settings, "IPN_AUDIT_LOG_ENABLED", False))

    def write(self, line: str) -> None:
        if self.enabled:
            self.logger.info(line)

    def received(self, message: IPNMessage) -> None:
        self.write(f"Received Message: {message.raw_tokens}")

    def verification(self, message: IPNMessage, verified: bool) -> None:
        outcome = "success" if verified else "failed"
        self.write(f"Validating {outcome} for message: {message.raw_tokens}")
