"""
Pytest fixtures shared across all test modules.
"""
import base64

import pytest

from shipmail.config import ExtractorConfig


def b64url(text):
    """Encode *text* the way the mailbox API encodes body data (no padding)."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def make_envelope(subject="", html=None, plain=None, body=None, headers=None, msg_id="msg-001"):
    """Build a raw mailbox envelope; *body* goes in the top-level payload body."""
    header_list = [{"name": "Subject", "value": subject}]
    header_list += headers or []
    payload = {"headers": header_list, "body": {}}
    if body is not None:
        payload["body"] = {"data": b64url(body)}
    parts = []
    if plain is not None:
        parts.append({"mimeType": "text/plain", "body": {"data": b64url(plain)}})
    if html is not None:
        parts.append({"mimeType": "text/html", "body": {"data": b64url(html)}})
    if parts:
        payload["parts"] = parts
    return {"id": msg_id, "threadId": f"thread-{msg_id}", "payload": payload}


# ---------------------------------------------------------------------------
# Sample email bodies
# ---------------------------------------------------------------------------

TRACKING_SUBJECT = "Your Countryside Pet Supply Order Has Been Updated (#12345)"

TRACKING_HTML = """
<html>
  <body>
    <h1>Your Order Has Been Shipped</h1>
    <p>Good news! Your order #12345 has been shipped.</p>
    <p>You can track your package with the following information:</p>
    <p>USPS Tracking Number: 9400123456789012345678</p>
    <p>Thank you for shopping with us!</p>
  </body>
</html>
"""

CONFIRMATION_SUBJECT = "Your Countryside Pet Supply Order Confirmation (#12345)"

CONFIRMATION_HTML = """
<html>
  <body>
    <h1>Order Confirmation</h1>
    <p>Thank you for your order!</p>
    <p>Order #12345</p>
    <div>
      <h2>Billing Address</h2>
      <p>John Smith</p>
      <p>123 Main St</p>
      <p>Anytown, CA 12345</p>
    </div>
    <div>
      <h2>Shipping Address</h2>
      <p>John Smith</p>
      <p>123 Main St</p>
      <p>Anytown, CA 12345</p>
    </div>
  </body>
</html>
"""


@pytest.fixture
def config():
    return ExtractorConfig.default()


@pytest.fixture
def tracking_envelope():
    return make_envelope(
        subject=TRACKING_SUBJECT,
        html=TRACKING_HTML,
        headers=[
            {"name": "From", "value": "store@countrysidepet.example"},
            {"name": "Date", "value": "Mon, 3 Mar 2025 10:00:00 -0500"},
        ],
        msg_id="trk-001",
    )


@pytest.fixture
def confirmation_envelope():
    return make_envelope(subject=CONFIRMATION_SUBJECT, html=CONFIRMATION_HTML, msg_id="conf-001")


@pytest.fixture
def store_orders():
    """Raw unfulfilled orders as returned by the store's orders endpoint."""
    return [
        {
            "id": 5001,
            "name": "#1001",
            "email": "john@example.com",
            "created_at": "2025-03-01T09:00:00Z",
            "total_price": "42.00",
            "customer": {"first_name": "John", "last_name": "Smith"},
            "shipping_address": {"name": "John Smith"},
            "line_items": [
                {"id": 1, "quantity": 2, "fulfillment_status": None},
                {"id": 2, "quantity": 1, "fulfillment_status": "fulfilled"},
            ],
        },
        {
            "id": 5002,
            "name": "#1002",
            "email": "jane@example.com",
            "customer": {"first_name": "Jane", "last_name": "Doe"},
            "line_items": [{"id": 3, "quantity": 1, "fulfillment_status": None}],
        },
        {
            "id": 5003,
            "name": "#1003",
            "email": None,
            "customer": None,
            "shipping_address": {"name": "Johnny Smithers"},
            "line_items": [{"id": 4, "quantity": 1, "fulfillment_status": None}],
        },
        {
            "id": 5004,
            "name": "#1004",
            "customer": None,
            "shipping_address": None,
            "line_items": [],
        },
    ]


@pytest.fixture
def envelope_factory():
    """The :func:`make_envelope` builder, for tests that need custom envelopes."""
    return make_envelope


@pytest.fixture
def encode_body():
    return b64url


@pytest.fixture
def tracking_html():
    return TRACKING_HTML


@pytest.fixture
def confirmation_html():
    return CONFIRMATION_HTML
