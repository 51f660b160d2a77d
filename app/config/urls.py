"""
URL configuration for the IPN listener.

URL Structure:
    /ipn/                          - PayPal IPN endpoints
        paypal/                    - IPN endpoint (POST)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.urls import include, path

urlpatterns = [
    path("ipn/", include("ipn.urls")),
]
