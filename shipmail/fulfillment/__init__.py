"""Order matching and fulfillment request construction."""
from shipmail.fulfillment.order_matcher import match_orders_by_customer_name
from shipmail.fulfillment.request_builder import (
    FulfillmentRequest,
    FulfillmentRequestError,
    build_fulfillment_request,
)

__all__ = [
    "match_orders_by_customer_name",
    "build_fulfillment_request",
    "FulfillmentRequest",
    "FulfillmentRequestError",
]
