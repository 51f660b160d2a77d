"""
Tests for the IPN webhook view.

Tests cover:
- Verified and unverified notifications
- Raw body forwarding
- Use of the listener built at startup
- URL routing
- HTTP method restrictions
"""

from unittest.mock import patch

import pytest
from django.apps import apps
from django.test import RequestFactory, override_settings
from django.urls import reverse

from ipn.listener import IPNListener
from ipn.tests.conftest import make_response
from ipn.views import paypal_ipn


# =============================================================================
# Setup
# =============================================================================


@pytest.fixture
def rf():
    """Request factory for creating test requests."""
    return RequestFactory()


@pytest.fixture
def listener(registry, verifier):
    """Listener installed on the ipn app config in place of the startup one."""
    listener = IPNListener(registry=registry, verifier=verifier)
    with patch.object(apps.get_app_config("ipn"), "listener", listener):
        yield listener


def make_ipn_request(rf, body: bytes):
    """Create a form-encoded POST to the IPN endpoint."""
    return rf.post(
        "/ipn/paypal/",
        data=body,
        content_type="application/x-www-form-urlencoded",
    )


# =============================================================================
# Notification Tests
# =============================================================================


class TestPaypalIpnView:
    """Tests for the paypal_ipn view."""

    def test_verified_returns_200(self, rf, listener, mock_post, web_accept_body):
        """A verified notification is acknowledged with 200."""
        response = paypal_ipn(make_ipn_request(rf, web_accept_body))

        assert response.status_code == 200
        assert response.content == b"OK"

    def test_unverified_returns_400(self, rf, listener, mock_post, web_accept_body):
        """An INVALID answer gives 400 so PayPal redelivers."""
        mock_post.return_value = make_response(b"INVALID")

        response = paypal_ipn(make_ipn_request(rf, web_accept_body))

        assert response.status_code == 400
        assert b"Invalid notification" in response.content

    def test_hostile_charset_returns_response(self, rf, listener, mock_post):
        """A body naming an unusable charset gets an answer, not a 500."""
        response = paypal_ipn(make_ipn_request(rf, b"charset=utf-16&txn_type=a"))

        assert response.status_code == 200

    def test_forwards_raw_body(self, rf, listener, web_accept_body):
        """The listener receives the body bytes untouched."""
        with patch.object(listener, "handle_message", return_value=True) as mock_handle:
            paypal_ipn(make_ipn_request(rf, web_accept_body))

        mock_handle.assert_called_once_with(web_accept_body)

    def test_dispatches_to_listener_registry(self, rf, listener, registry, mock_post):
        """Verified messages reach handlers bound to the listener's registry."""
        calls = []

        def handler(message):
            calls.append(message["txn_id"])
            return True

        registry.bind("web_accept", handler)

        paypal_ipn(make_ipn_request(rf, b"txn_type=web_accept&txn_id=ABC"))

        assert calls == ["ABC"]

    def test_url_resolves(self):
        """The endpoint is mounted at /ipn/paypal/."""
        assert reverse("ipn:paypal_ipn") == "/ipn/paypal/"


# =============================================================================
# Startup Listener Tests
# =============================================================================


class TestStartupListener:
    """Tests for the listener built by IpnConfig.ready()."""

    def test_listener_is_not_rebuilt_per_request(self, rf, mock_post):
        """Requests reuse the startup listener instead of reading settings."""
        startup_listener = apps.get_app_config("ipn").listener

        with patch.object(IPNListener, "from_settings") as mock_from_settings:
            paypal_ipn(make_ipn_request(rf, b"txn_type=web_accept"))
            paypal_ipn(make_ipn_request(rf, b"txn_type=web_accept"))

        mock_from_settings.assert_not_called()
        assert apps.get_app_config("ipn").listener is startup_listener

    def test_bad_ca_bundle_after_startup_is_ignored(self, rf, mock_post, tmp_path):
        """Settings changed after startup cannot turn a request into a 500."""
        missing = str(tmp_path / "missing.pem")

        with override_settings(IPN_CA_BUNDLE=missing):
            response = paypal_ipn(make_ipn_request(rf, b"txn_type=web_accept"))

        assert response.status_code == 200


# =============================================================================
# HTTP Method Tests
# =============================================================================


class TestPaypalIpnHttpMethods:
    """Tests for HTTP method restrictions."""

    def test_get_not_allowed(self, rf):
        """GET requests should be rejected."""
        response = paypal_ipn(rf.get("/ipn/paypal/"))

        # Django's require_POST returns 405
        assert response.status_code == 405

    def test_put_not_allowed(self, rf):
        """PUT requests should be rejected."""
        response = paypal_ipn(
            rf.put(
                "/ipn/paypal/",
                data="txn_type=web_accept",
                content_type="application/x-www-form-urlencoded",
            )
        )

        assert response.status_code == 405
