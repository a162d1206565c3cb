"""
Tracking extraction result.

Invariant: ``carrier`` is only ever set together with ``tracking_number``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Carrier(str, Enum):
    USPS = "USPS"
    UPS = "UPS"
    OTHER = "Other"


@dataclass(frozen=True)
class TrackingInfo:
    """Order number, tracking number and carrier found in a shipping email."""

    order_number: Optional[str] = None
    """Taken from the subject line only."""

    tracking_number: Optional[str] = None

    carrier: Optional[Carrier] = None

    def __post_init__(self) -> None:
        if self.carrier is not None and not self.tracking_number:
            raise ValueError("carrier requires a tracking_number")
        if self.carrier is not None and not isinstance(self.carrier, Carrier):
            object.__setattr__(self, "carrier", Carrier(self.carrier))

    @property
    def found(self) -> bool:
        """Return True if a tracking number was extracted."""
        return bool(self.tracking_number)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_number": self.order_number,
            "tracking_number": self.tracking_number,
            "carrier": self.carrier.value if self.carrier else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackingInfo":
        carrier = data.get("carrier")
        return cls(
            order_number=data.get("order_number"),
            tracking_number=data.get("tracking_number"),
            carrier=Carrier(carrier) if carrier else None,
        )
