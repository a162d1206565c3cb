"""Email content extraction: public API."""
from shipmail.extraction.customer_name import extract_customer_name
from shipmail.extraction.normalizer import normalize_envelope
from shipmail.extraction.order_number import extract_order_number, order_number_from_subject
from shipmail.extraction.tracking import extract_tracking_info

__all__ = [
    "normalize_envelope",
    "extract_order_number",
    "order_number_from_subject",
    "extract_tracking_info",
    "extract_customer_name",
]
