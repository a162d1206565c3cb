"""
Unit tests for fulfillment request construction.
"""
import pytest

from shipmail.config import ExtractorConfig
from shipmail.fulfillment.request_builder import (
    FulfillmentRequestError,
    build_fulfillment_request,
    pending_line_items,
)
from shipmail.models.tracking import Carrier, TrackingInfo


@pytest.fixture
def usps_tracking():
    return TrackingInfo("12345", "9400123456789012345678", Carrier.USPS)


class TestBuildFulfillmentRequest:

    def test_fulfilled_items_skipped(self, store_orders, usps_tracking):
        request = build_fulfillment_request(store_orders[0], usps_tracking)
        assert request.order_id == "5001"
        assert request.line_items == [{"id": 1, "quantity": 2}]
        assert request.tracking_company == "USPS"
        assert request.notify_customer is False

    def test_payload_shape(self, store_orders, usps_tracking):
        payload = build_fulfillment_request(store_orders[0], usps_tracking).to_payload()
        assert payload == {
            "fulfillment": {
                "line_items": [{"id": 1, "quantity": 2}],
                "tracking_number": "9400123456789012345678",
                "tracking_company": "USPS",
                "notify_customer": False,
            }
        }

    def test_missing_carrier_uses_default(self, store_orders):
        tracking = TrackingInfo("12345", "1234567890")
        request = build_fulfillment_request(store_orders[1], tracking)
        assert request.tracking_company == "Other"

    def test_default_carrier_configurable(self, store_orders):
        cfg = ExtractorConfig(default_carrier="FedEx")
        request = build_fulfillment_request(store_orders[1], TrackingInfo(None, "1234567890"), config=cfg)
        assert request.tracking_company == "FedEx"

    def test_notify_customer_argument_overrides_config(self, store_orders, usps_tracking):
        cfg = ExtractorConfig(notify_customer=True)
        assert build_fulfillment_request(store_orders[1], usps_tracking, config=cfg).notify_customer is True
        request = build_fulfillment_request(store_orders[1], usps_tracking, notify_customer=False, config=cfg)
        assert request.notify_customer is False

    def test_all_items_fulfilled_returns_none(self, usps_tracking):
        order = {"id": 1, "line_items": [{"id": 2, "quantity": 1, "fulfillment_status": "fulfilled"}]}
        assert build_fulfillment_request(order, usps_tracking) is None

    def test_no_line_items_returns_none(self, store_orders, usps_tracking):
        assert build_fulfillment_request(store_orders[3], usps_tracking) is None

    @pytest.mark.parametrize("order", [None, {}, {"id": ""}, {"id": None}])
    def test_missing_order_id_raises(self, order, usps_tracking):
        with pytest.raises(FulfillmentRequestError):
            build_fulfillment_request(order, usps_tracking)

    @pytest.mark.parametrize("tracking", [None, TrackingInfo("12345")])
    def test_missing_tracking_number_raises(self, tracking, store_orders):
        with pytest.raises(FulfillmentRequestError):
            build_fulfillment_request(store_orders[0], tracking)


class TestPendingLineItems:

    def test_partial_status_kept(self):
        order = {"line_items": [{"id": 1, "quantity": 3, "fulfillment_status": "partial"}]}
        assert pending_line_items(order) == [{"id": 1, "quantity": 3}]

    def test_missing_line_items(self):
        assert pending_line_items({"id": 1}) == []
