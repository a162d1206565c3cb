"""
Tracking Extractor.

Finds the carrier tracking number of a shipping-notification email and
infers the carrier. The order number is re-derived from the subject line on
its own, so this extractor never depends on the order-number extractor.

Carrier matchers, in order (first match wins), all scanning the body text
unless noted:

  1. ``usps_text``       ``USPS Tracking …<digits>``, ``Tracking Number …<digits>``,
                         ``tracking number: <digits>``                  → USPS
  2. ``ups_text``        ``UPS Tracking …<digits>``, then a UPS-shaped code
                         (``1Z1234567890``) after a ``UPS`` mention      → UPS
  3. ``tracking_link``   digits from the href of the first link whose
                         target contains ``tracking`` (case-sensitive); carrier
                         guessed from ``usps`` / ``ups`` in the href, else Other

The gap between a label and its number is bounded by
``ExtractorConfig.label_gap_max_chars`` non-digit characters.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from shipmail.config import ExtractorConfig
from shipmail.extraction.chain import (
    Matcher,
    ParsedEmail,
    coerce_document,
    compile_pattern,
    run_chain,
    search_group,
)
from shipmail.extraction.html_query import find_links_with_href_containing
from shipmail.extraction.order_number import order_number_from_subject
from shipmail.models.tracking import Carrier, TrackingInfo
from shipmail.observability.metrics import record_extraction, timer

logger = logging.getLogger(__name__)

EXTRACTOR_NAME = "tracking"

# A number is never the head of an alphanumeric code (``1Z…``, ``12Z…``):
# the run must not be followed by a letter or another digit.
_NUMBER = r"(\d+)(?![A-Za-z\d])"

# Pattern templates; ``{gap}`` is the bounded label-to-number distance.
TRACKING_PATTERNS: Dict[Carrier, List[str]] = {
    Carrier.USPS: [
        r"USPS\s+Tracking\D{{0,{gap}}}" + _NUMBER,
        r"Tracking\s+Number\D{{0,{gap}}}" + _NUMBER,
        r"tracking\s+number\s*:\s*" + _NUMBER,
    ],
    Carrier.UPS: [
        r"UPS\s+Tracking\D{{0,{gap}}}" + _NUMBER,
        # 1-2 alphanumerics, a letter, 10 digits
        r"UPS\D{{0,{gap}}}?\b([A-Z0-9]{{1,2}}[A-Z]\d{{10}})",
    ],
}

TrackingHit = Tuple[str, Carrier]


# ---------------------------------------------------------------------------
# Matchers
# ---------------------------------------------------------------------------


def _match_carrier_text(parsed: ParsedEmail, carrier: Carrier) -> Optional[TrackingHit]:
    gap = parsed.config.label_gap_max_chars
    for template in TRACKING_PATTERNS[carrier]:
        number = search_group(compile_pattern(template.format(gap=gap)), parsed.plain_text)
        if number:
            return number, carrier
    return None


def _match_usps(parsed: ParsedEmail) -> Optional[TrackingHit]:
    return _match_carrier_text(parsed, Carrier.USPS)


def _match_ups(parsed: ParsedEmail) -> Optional[TrackingHit]:
    return _match_carrier_text(parsed, Carrier.UPS)


def carrier_from_link(href: str) -> Carrier:
    """
    Guess the carrier from a link target by case-sensitive substring.

    Coarse: any ``ups`` substring (``groups``, ``pickups``…) reads as UPS,
    and an upper-case host such as ``USPS.COM`` reads as Other.
    """
    if "usps" in href:
        return Carrier.USPS
    if "ups" in href:
        return Carrier.UPS
    return Carrier.OTHER


def _match_tracking_link(parsed: ParsedEmail) -> Optional[TrackingHit]:
    links = find_links_with_href_containing(parsed.soup, "tracking")
    if not links:
        return None
    # Only the first tracking link is considered.
    href = str(links[0]["href"])
    digits_re = compile_pattern(rf"(\d{{{parsed.config.tracking_link_min_digits},}})", 0)
    number = search_group(digits_re, href)
    if number:
        return number, carrier_from_link(href)
    return None


TRACKING_MATCHERS: List[Matcher[TrackingHit]] = [
    Matcher("usps_text", _match_usps),
    Matcher("ups_text", _match_ups),
    Matcher("tracking_link", _match_tracking_link),
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_tracking_info(
    document: Any,
    config: Optional[ExtractorConfig] = None,
) -> Optional[TrackingInfo]:
    """
    Extract tracking number, carrier and subject order number.

    Args:
        document: An :class:`~shipmail.models.document.EmailDocument` (or a
                  loose mapping with ``subject`` / ``body``).
        config:   Optional :class:`~shipmail.config.ExtractorConfig`.

    Returns:
        ``None`` when the document is unusable (missing, or no body at all).
        Otherwise a :class:`~shipmail.models.tracking.TrackingInfo`, whose
        number fields are ``None`` when nothing matched.
    """
    if config is None:
        config = ExtractorConfig.default()

    doc = coerce_document(document, EXTRACTOR_NAME, config)
    if doc is None:
        return None

    if not doc.has_body:
        logger.warning("Email %s has no body; tracking extraction skipped", doc.message_id)
        record_extraction(EXTRACTOR_NAME, "unusable")
        return None

    order_number = order_number_from_subject(doc.subject)

    with timer(EXTRACTOR_NAME):
        result = run_chain(TRACKING_MATCHERS, ParsedEmail(doc, config))

    if result is None:
        logger.warning("Could not extract tracking number from email %s", doc.message_id)
        record_extraction(EXTRACTOR_NAME, "miss")
        return TrackingInfo(order_number=order_number)

    tracking_number, carrier = result.value
    logger.info(
        "Extracted tracking number %s (%s) for order %s via %s",
        tracking_number, carrier.value, order_number, result.matcher,
    )
    record_extraction(EXTRACTOR_NAME, "found", result.matcher)
    return TrackingInfo(
        order_number=order_number,
        tracking_number=tracking_number,
        carrier=carrier,
    )
