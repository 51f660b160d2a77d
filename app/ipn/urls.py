"""
URL configuration for the ipn app.

Routes:
    - POST /paypal/ - PayPal IPN endpoint

All routes are prefixed with /ipn/ when included in the main URLconf.
"""

from django.urls import path

from ipn.views import paypal_ipn

app_name = "ipn"

urlpatterns = [
    path("paypal/", paypal_ipn, name="paypal_ipn"),
]
