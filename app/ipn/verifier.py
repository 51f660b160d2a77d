"""
PayPal IPN postback verification.

This module provides the PostbackVerifier class which confirms that a
notification really comes from PayPal: the decoded message is posted back,
prefixed with ``cmd=_notify-validate``, and PayPal answers with the literal
body ``VERIFIED`` or ``INVALID``.

Transport defaults follow the legacy PayPal listener and stay configurable:
- HTTP/1.1 (the requests/urllib3 transport never negotiates HTTP/2)
- no connection reuse: every postback runs in its own short-lived session
  and sends ``Connection: Close``
- TLS certificate verification is OFF unless IPN_VERIFY_TLS is set or a CA
  bundle is configured. This is dangerous and logged as a warning.
- a bounded timeout (IPN_TIMEOUT_SECONDS, default 30)

There is no retry. Any transport error, timeout, non-2xx status or body other
than ``VERIFIED`` is a negative verdict.

Configuration (via settings):
- IPN_LIVE: Post back to the live endpoint instead of the sandbox
- IPN_VERIFY_TLS: Verify the server certificate against the system store
- IPN_CA_BUNDLE: Path of a CA bundle to verify against (enables verification)
- IPN_TIMEOUT_SECONDS: Postback timeout

Usage:
    from ipn.verifier import PostbackVerifier

    verifier = PostbackVerifier.from_settings()
    if verifier.verify(message):
        ...
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import quote_plus

import requests
from django.conf import settings

from ipn.decoder import ENCODING_ERRORS
from ipn.exceptions import (
    IPNConfigurationError,
    PostbackConnectionError,
    PostbackError,
    PostbackRejectedError,
    PostbackTimeoutError,
)

if TYPE_CHECKING:
    from ipn.decoder import IPNMessage


LIVE_ENDPOINT = "https://www.paypal.com/cgi-bin/webscr"
SANDBOX_ENDPOINT = "https://www.sandbox.paypal.com/cgi-bin/webscr"

VALIDATE_COMMAND = "cmd=_notify-validate"
VERIFIED = b"VERIFIED"

DEFAULT_TIMEOUT_SECONDS = 30

POSTBACK_HEADERS = {
    "Connection": "Close",
    "Content-Type": "application/x-www-form-urlencoded",
}


def endpoint_for(live: bool) -> str:
    """Return the postback URL for the live or the sandbox environment."""
    return LIVE_ENDPOINT if live else SANDBOX_ENDPOINT


class PostbackVerifier:
    """
    Verifies IPN messages with a postback to PayPal.

    Instances hold configuration only and are safe to share between threads.

    Attributes:
        live: Whether the live endpoint is used
        endpoint: Postback URL
        timeout: Postback timeout in seconds
        verify_tls: Whether the server certificate is verified
        ca_bundle: Optional CA bundle path used for verification
    """

    def __init__(
        self,
        live: bool = False,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        verify_tls: bool = False,
        ca_bundle: str | None = None,
    ):
        if ca_bundle and not Path(ca_bundle).is_file():
            raise IPNConfigurationError(
                "CA bundle not found",
                details={"ca_bundle": ca_bundle},
            )

        self.live = live
        self.endpoint = endpoint_for(live)
        self.timeout = timeout
        self.ca_bundle = ca_bundle or None
        self.verify_tls = verify_tls or self.ca_bundle is not None

        if not self.verify_tls:
            self.get_logger().warning(
                "TLS certificate verification is disabled for IPN postbacks",
                extra={"endpoint": self.endpoint},
            )

    @classmethod
    def from_settings(cls) -> PostbackVerifier:
        """Build a verifier from the IPN_* Django settings."""
        return cls(
            live=getattr(settings, "IPN_LIVE", False),
            timeout=getattr(settings, "IPN_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            verify_tls=getattr(settings, "IPN_VERIFY_TLS", False),
            ca_bundle=getattr(settings, "IPN_CA_BUNDLE", "") or None,
        )

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this verifier."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @property
    def tls_verify(self) -> bool | str:
        """Value for the ``verify`` argument of requests."""
        if self.ca_bundle:
            return self.ca_bundle
        return self.verify_tls

    # =========================================================================
    # Postback
    # =========================================================================

    def build_postback(self, message: IPNMessage) -> str:
        """
        Serialize a message into the postback body.

        Fields keep their stored order. Values are re-encoded with the
        message charset, so a body decoded by ``ipn.decoder.decode`` comes
        back with the same bytes.

        Example:
            verifier.build_postback(decode(b"txn_type=web_accept&item_name=Blue+mug"))
            # "cmd=_notify-validate&txn_type=web_accept&item_name=Blue+mug"
        """
        parts = [VALIDATE_COMMAND]
        for name, value in message.items():
            encoded = quote_plus(
                value,
                safe="",
                encoding=message.encoding,
                errors=ENCODING_ERRORS,
            )
            parts.append(f"{name}={encoded}")
        return "&".join(parts)

    def verify(self, message: IPNMessage) -> bool:
        """
        Confirm a message with PayPal.

        Args:
            message: The decoded notification

        Returns:
            True only when PayPal answered with a 2xx status and the exact
            body ``VERIFIED``. Never raises for transport or encoding problems.
        """
        logger = self.get_logger()
        log_context: dict[str, Any] = {
            "operation": "ipn_postback",
            "endpoint": self.endpoint,
            "txn_type": message.txn_type,
            "txn_id": message.get("txn_id"),
        }

        try:
            postback = self.build_postback(message)
            body = postback.encode(message.encoding, ENCODING_ERRORS)
        except (LookupError, UnicodeError):
            logger.warning(
                "IPN message cannot be encoded for the postback",
                extra={**log_context, "encoding": message.encoding},
            )
            return False

        start_time = time.time()
        try:
            content = self._submit(body, log_context)
        except PostbackError as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(
                "IPN postback failed",
                extra={**log_context, **e.to_dict(), "duration_ms": duration_ms},
            )
            return False

        duration_ms = (time.time() - start_time) * 1000
        verified = content == VERIFIED
        logger.info(
            "IPN postback completed",
            extra={
                **log_context,
                "verified": verified,
                "response": content[:32].decode("ascii", "backslashreplace"),
                "duration_ms": duration_ms,
            },
        )
        return verified

    def _submit(self, body: bytes, log_context: dict[str, Any]) -> bytes:
        """
        Post the body to PayPal and return the raw response body.

        Raises:
            PostbackTimeoutError: The request exceeded the timeout
            PostbackConnectionError: PayPal could not be reached
            PostbackRejectedError: PayPal answered with a non-2xx status
            PostbackError: Any other requests failure
        """
        try:
            # requests.post opens and closes its own session
            response = requests.post(
                self.endpoint,
                data=body,
                headers=POSTBACK_HEADERS,
                timeout=self.timeout,
                verify=self.tls_verify,
            )
        except requests.RequestException as e:
            self._handle_transport_error(e, log_context)
            raise  # Never reached, but satisfies type checker

        if not 200 <= response.status_code < 300:
            raise PostbackRejectedError(
                f"PayPal answered the postback with HTTP {response.status_code}",
                details={"status_code": response.status_code},
            )
        return response.content

    def _handle_transport_error(
        self,
        error: requests.RequestException,
        log_context: dict[str, Any],
    ) -> None:
        """
        Translate requests exceptions to postback exceptions.

        Raises:
            PostbackTimeoutError: Connect or read timeout
            PostbackConnectionError: DNS, TCP or TLS failure
            PostbackError: Anything else raised by requests
        """
        logger = self.get_logger()

        if isinstance(error, requests.Timeout):
            logger.debug("Postback timed out", extra=log_context)
            raise PostbackTimeoutError(
                f"No answer from PayPal within {self.timeout}s",
                details={"timeout": self.timeout},
            ) from error

        if isinstance(error, requests.ConnectionError):
            logger.debug("Postback connection failed", extra=log_context, exc_info=True)
            raise PostbackConnectionError(
                "Could not connect to PayPal",
                details={"error": str(error)},
            ) from error

        logger.debug("Postback request failed", extra=log_context, exc_info=True)
        raise PostbackError(
            f"Unexpected postback error: {type(error).__name__}",
            details={"error": str(error)},
        ) from error
