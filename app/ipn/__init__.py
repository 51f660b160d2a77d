"""
PayPal Instant Payment Notification (IPN) listener.

This app handles:
- Decoding of raw IPN bodies, keeping field order and charset
- Verification of each message with a postback to PayPal
- Dispatch of verified messages to handlers bound by txn_type

Usage:
    # myshop/ipn_handlers.py, listed in IPN_HANDLER_MODULES
    from ipn.registry import ipn_handlers

    @ipn_handlers.on("web_accept")
    def credit_order(message):
        ...
        return True  # a falsy result stops the remaining handlers

    # In config/urls.py
    path("ipn/", include("ipn.urls"))
"""
