"""Domain models: public API."""
from shipmail.models.document import EmailDocument
from shipmail.models.envelope import RawEnvelope
from shipmail.models.order import OrderSummary
from shipmail.models.tracking import Carrier, TrackingInfo

__all__ = ["EmailDocument", "RawEnvelope", "OrderSummary", "Carrier", "TrackingInfo"]
