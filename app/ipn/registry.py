"""
Handler registry and dispatch for verified IPN messages.

Handlers are bound to one or more ``txn_type`` values and run in the order
they were bound. After each call the result is reduced to a HandlerOutcome;
the first STOP ends the chain for that message.

The registry is filled while the application starts (see IpnConfig.ready)
and only read afterwards. Binding while messages are being dispatched is not
supported.

Usage:
    from core.services import ServiceResult
    from ipn.registry import HandlerOutcome, ipn_handlers

    @ipn_handlers.on(["web_accept", "cart"])
    def check_receiver(message):
        if message.get("receiver_email") != "shop@example.com":
            return HandlerOutcome.STOP
        return HandlerOutcome.CONTINUE

    @ipn_handlers.on("web_accept")
    def credit_order(message):
        return ServiceResult.success(message["txn_id"])

    # Plain functions work too
    ipn_handlers.bind("subscr_signup", lambda message: True)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ipn.decoder import IPNMessage


logger = logging.getLogger(__name__)


class HandlerOutcome(Enum):
    """Whether the handler chain goes on after a handler returned."""

    CONTINUE = "continue"
    STOP = "stop"

    @classmethod
    def from_result(cls, result: Any) -> HandlerOutcome:
        """
        Reduce a handler return value to an outcome.

        HandlerOutcome values pass through. Anything else follows Python
        truthiness: None, False, 0, empty strings and containers and failed
        ServiceResults stop the chain.
        """
        if isinstance(result, cls):
            return result
        return cls.CONTINUE if result else cls.STOP

    def __bool__(self) -> bool:
        return self is HandlerOutcome.CONTINUE


@runtime_checkable
class IPNHandler(Protocol):
    """
    Protocol for IPN handlers.

    Any callable taking the message qualifies: functions, lambdas, bound
    methods and objects defining ``__call__``.
    """

    def __call__(self, message: IPNMessage) -> Any:
        ...


class HandlerRegistry:
    """
    Ordered handler lists keyed by message type.

    Binding a handler to several types creates one independent entry per
    type. bind() is the only way to change the registry.
    """

    def __init__(self):
        self._handlers: dict[str, list[IPNHandler]] = {}

    def __contains__(self, message_type: str) -> bool:
        return bool(self._handlers.get(message_type))

    def __repr__(self) -> str:
        counts = {name: len(handlers) for name, handlers in self._handlers.items()}
        return f"HandlerRegistry({counts!r})"

    @staticmethod
    def _types(message_types: str | Iterable[str]) -> list[str]:
        if isinstance(message_types, str):
            return [message_types]
        return list(message_types)

    def bind(self, message_types: str | Iterable[str], handler: Any) -> bool:
        """
        Append a handler for one or more message types.

        Args:
            message_types: A ``txn_type`` value or an iterable of them
            handler: The callable to run for matching messages

        Returns:
            False (and nothing registered) when handler is not callable,
            True otherwise
        """
        if not callable(handler):
            logger.warning(
                "Rejected non-callable IPN handler",
                extra={"handler_type": type(handler).__name__},
            )
            return False

        for message_type in self._types(message_types):
            self._handlers.setdefault(message_type, []).append(handler)
            logger.debug(f"Bound IPN handler for {message_type}")
        return True

    def on(self, message_types: str | Iterable[str]) -> Callable:
        """
        Decorator form of bind().

        Raises:
            TypeError: The decorated object is not callable
        """

        def decorator(handler: IPNHandler) -> IPNHandler:
            if not self.bind(message_types, handler):
                raise TypeError(f"IPN handler must be callable, got {handler!r}")
            return handler

        return decorator

    def handlers_for(self, message_type: str) -> list[IPNHandler]:
        """Return a copy of the handlers bound to message_type, in order."""
        return list(self._handlers.get(message_type, []))

    def process(self, message: IPNMessage) -> None:
        """
        Run the handlers bound to the message's txn_type.

        Messages without a txn_type, or with a type nobody handles, are
        ignored. A handler that raises is logged and ends the chain like a
        STOP result; the exception is not propagated.
        """
        message_type = message.txn_type
        if message_type is None:
            logger.debug("IPN message has no txn_type, nothing to dispatch")
            return

        handlers = self.handlers_for(message_type)
        if not handlers:
            logger.info(
                f"No IPN handler registered for txn_type: {message_type}",
                extra={"txn_id": message.get("txn_id")},
            )
            return

        for position, handler in enumerate(handlers):
            try:
                result = handler(message)
                outcome = HandlerOutcome.from_result(result)
            except Exception:
                logger.error(
                    f"IPN handler failed for txn_type: {message_type}",
                    extra={
                        "txn_id": message.get("txn_id"),
                        "handler": getattr(handler, "__qualname__", repr(handler)),
                    },
                    exc_info=True,
                )
                return

            if outcome is HandlerOutcome.STOP:
                logger.info(
                    f"IPN handler chain stopped for txn_type: {message_type}",
                    extra={
                        "txn_id": message.get("txn_id"),
                        "position": position,
                        "remaining": len(handlers) - position - 1,
                        "error_code": getattr(result, "error_code", None),
                    },
                )
                return


# Process-wide registry used by the HTTP endpoint
ipn_handlers = HandlerRegistry()
