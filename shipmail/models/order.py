"""
OrderSummary: projection of a store order used for customer matching.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class OrderSummary:
    """The fields of an unfulfilled store order the workflow needs."""

    id: str
    name: str = ""
    customer_name: str = ""
    """Customer first + last name, else the shipping-address name."""

    email: Optional[str] = None
    created_at: Optional[str] = None
    total_price: Optional[str] = None
    line_items: List[Dict[str, Any]] = field(default_factory=list)
    shipping_address: Optional[Dict[str, Any]] = None

    @classmethod
    def from_store_payload(cls, order: Mapping[str, Any]) -> "OrderSummary":
        """Project a raw store order (as returned by the orders API)."""
        customer_name = ""
        customer = order.get("customer") or {}
        if customer:
            first = customer.get("first_name") or ""
            last = customer.get("last_name") or ""
            customer_name = f"{first} {last}".strip()

        shipping_address = order.get("shipping_address")
        if not customer_name and shipping_address:
            customer_name = (shipping_address.get("name") or "").strip()

        return cls(
            id=str(order["id"]),
            name=order.get("name") or "",
            customer_name=customer_name,
            email=order.get("email"),
            created_at=order.get("created_at"),
            total_price=order.get("total_price"),
            line_items=list(order.get("line_items") or []),
            shipping_address=shipping_address,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "customer_name": self.customer_name,
            "email": self.email,
            "created_at": self.created_at,
            "total_price": self.total_price,
            "line_items": self.line_items,
            "shipping_address": self.shipping_address,
        }
