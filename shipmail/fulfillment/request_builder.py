"""
Fulfillment request construction.

Builds the body of the store's "create fulfillment" call from a store order
and the extracted :class:`TrackingInfo`. Sending it is the caller's job.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from shipmail.config import ExtractorConfig
from shipmail.models.tracking import TrackingInfo

logger = logging.getLogger(__name__)

FULFILLED = "fulfilled"


class FulfillmentRequestError(ValueError):
    """Raised when the order or tracking data cannot produce a request."""


@dataclass(frozen=True)
class FulfillmentRequest:
    order_id: str
    tracking_number: str
    tracking_company: str
    notify_customer: bool = False
    line_items: List[Dict[str, Any]] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Serialise to the store's fulfillment wire shape."""
        return {
            "fulfillment": {
                "line_items": [dict(item) for item in self.line_items],
                "tracking_number": self.tracking_number,
                "tracking_company": self.tracking_company,
                "notify_customer": self.notify_customer,
            }
        }


def pending_line_items(order: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Return ``{id, quantity}`` for every line item not yet fulfilled."""
    return [
        {"id": item.get("id"), "quantity": item.get("quantity")}
        for item in order.get("line_items") or []
        if item.get("fulfillment_status") != FULFILLED
    ]


def build_fulfillment_request(
    order: Mapping[str, Any],
    tracking_info: Optional[TrackingInfo],
    notify_customer: Optional[bool] = None,
    config: Optional[ExtractorConfig] = None,
) -> Optional[FulfillmentRequest]:
    """
    Build the fulfillment request for *order*.

    Returns:
        The request, or ``None`` when every line item is already fulfilled.

    Raises:
        :class:`FulfillmentRequestError` if the order has no id or the
        tracking info carries no tracking number.
    """
    if config is None:
        config = ExtractorConfig.default()

    order_id = order.get("id") if order else None
    if order_id in (None, ""):
        logger.error("No order ID provided for fulfillment")
        raise FulfillmentRequestError("No order ID provided for fulfillment")

    if tracking_info is None or not tracking_info.tracking_number:
        logger.error("No tracking information provided for fulfillment of order %s", order_id)
        raise FulfillmentRequestError("No tracking information provided for fulfillment")

    line_items = pending_line_items(order)
    if not line_items:
        logger.warning("No unfulfilled line items found for order: %s", order_id)
        return None

    carrier = tracking_info.carrier.value if tracking_info.carrier else config.default_carrier
    return FulfillmentRequest(
        order_id=str(order_id),
        tracking_number=tracking_info.tracking_number,
        tracking_company=carrier,
        notify_customer=config.notify_customer if notify_customer is None else notify_customer,
        line_items=line_items,
    )
