"""
Pytest fixtures for IPN tests.

Provides raw notification bodies, a verifier with the outbound HTTP call
patched out, and an isolated handler registry.
"""

from unittest.mock import MagicMock, patch

import pytest

from ipn.registry import HandlerRegistry
from ipn.verifier import PostbackVerifier


# =============================================================================
# Raw Body Fixtures
# =============================================================================


@pytest.fixture
def web_accept_body():
    """A typical web_accept notification as PayPal sends it."""
    return (
        b"mc_gross=19.95&protection_eligibility=Eligible&payer_id=LPLWNMTBWMFAY"
        b"&payment_date=20%3A12%3A59+Jan+13%2C+2009+PST&payment_status=Completed"
        b"&charset=windows-1252&first_name=Test&mc_fee=0.88&txn_id=61E67681CH3238416"
        b"&receiver_email=seller%40paypalsandbox.com&item_name=Blue+mug"
        b"&txn_type=web_accept&custom=order-1234"
    )


@pytest.fixture
def untyped_body():
    """A notification without txn_type (e.g. a refund adjustment)."""
    return b"payment_status=Refunded&txn_id=5T1234&mc_gross=-19.95"


# =============================================================================
# Postback Fixtures
# =============================================================================


def make_response(content: bytes = b"VERIFIED", status_code: int = 200) -> MagicMock:
    """Create a stand-in for requests.Response."""
    response = MagicMock()
    response.content = content
    response.status_code = status_code
    return response


@pytest.fixture
def mock_post():
    """Patch the outbound postback; answers VERIFIED unless reconfigured."""
    with patch("ipn.verifier.requests.post") as mock:
        mock.return_value = make_response()
        yield mock


@pytest.fixture
def verifier():
    """Sandbox verifier with certificate verification on."""
    return PostbackVerifier(live=False, timeout=5, verify_tls=True)


# =============================================================================
# Registry Fixtures
# =============================================================================


@pytest.fixture
def registry():
    """Empty registry, independent of the process-wide one."""
    return HandlerRegistry()
