"""
Webhook endpoint view for PayPal IPN.

The view:
1. Reads the raw request body (request.POST would lose field order and the
   original encoding)
2. Hands it to the listener built at startup by IpnConfig.ready()
3. Answers 200 when the message was verified, 400 otherwise

PayPal redelivers a notification until it receives a 200, so unverified
messages get another chance without any retry logic on our side.

Usage:
    # In urls.py
    from ipn.views import paypal_ipn

    urlpatterns = [
        path("ipn/paypal/", paypal_ipn, name="paypal_ipn"),
    ]
"""

from __future__ import annotations

import logging

from django.apps import apps
from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST


logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def paypal_ipn(request: HttpRequest) -> HttpResponse:
    """
    Receive, verify and dispatch a PayPal IPN message.

    Security:
    - Authenticity comes from the postback, not from the request itself
    - CSRF exemption required for external webhooks
    - Only POST requests accepted

    Returns:
        HttpResponse with status:
        - 200: Message verified and dispatched
        - 400: Message could not be verified
    """
    listener = apps.get_app_config("ipn").listener

    if listener.handle_message(request.body):
        return HttpResponse("OK", status=200)

    logger.warning(
        "Rejected unverified IPN message",
        extra={"remote_addr": request.META.get("REMOTE_ADDR")},
    )
    return HttpResponse("Invalid notification", status=400)
