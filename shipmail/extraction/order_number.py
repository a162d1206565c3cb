"""
Order Number Extractor.

Finds the order identifier of a shipping-notification email. Matchers, in
order (first match wins):

  1. ``subject_parenthesized``   ``(#12345)`` in the subject line. The
     subject format is fixed by the storefront template, so this is the
     authoritative source.
  2. ``body_order_label``        ``Order #12345`` in the body text.
  3. ``order_class_element``     a run of N+ digits inside the first element
     whose class attribute contains ``order``.

A miss is an expected outcome: ``None`` is returned and a warning logged.
"""
from __future__ import annotations

import logging
import re
from typing import Any, List, Optional

from shipmail.config import ExtractorConfig
from shipmail.extraction.chain import (
    Matcher,
    ParsedEmail,
    coerce_document,
    compile_pattern,
    run_chain,
    search_group,
)
from shipmail.extraction.html_query import iter_elements_with_class_containing
from shipmail.extraction.text_render import element_text
from shipmail.observability.metrics import record_extraction, timer

logger = logging.getLogger(__name__)

EXTRACTOR_NAME = "order_number"

SUBJECT_ORDER_RE = re.compile(r"\(#(\d+)\)")
BODY_ORDER_RE = re.compile(r"Order\s+#\s*(\d+)", re.IGNORECASE)


def order_number_from_subject(subject: Optional[str]) -> Optional[str]:
    """Return the digits of the first ``(#<digits>)`` group in *subject*."""
    return search_group(SUBJECT_ORDER_RE, subject or "")


# ---------------------------------------------------------------------------
# Matchers
# ---------------------------------------------------------------------------


def _match_subject(parsed: ParsedEmail) -> Optional[str]:
    return order_number_from_subject(parsed.subject)


def _match_body_label(parsed: ParsedEmail) -> Optional[str]:
    return search_group(BODY_ORDER_RE, parsed.plain_text)


def _match_order_class(parsed: ParsedEmail) -> Optional[str]:
    digits_re = compile_pattern(rf"(\d{{{parsed.config.order_number_min_digits},}})", 0)
    for element in iter_elements_with_class_containing(parsed.soup, "order"):
        found = search_group(digits_re, element_text(element))
        if found:
            return found
    return None


ORDER_NUMBER_MATCHERS: List[Matcher[str]] = [
    Matcher("subject_parenthesized", _match_subject, needs_body=False),
    Matcher("body_order_label", _match_body_label),
    Matcher("order_class_element", _match_order_class),
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_order_number(
    document: Any,
    config: Optional[ExtractorConfig] = None,
) -> Optional[str]:
    """
    Extract the order number from a shipping-notification email.

    Args:
        document: An :class:`~shipmail.models.document.EmailDocument` (or a
                  loose mapping with ``subject`` / ``body``).
        config:   Optional :class:`~shipmail.config.ExtractorConfig`.

    Returns:
        The order number as a digit string, or ``None`` when not found.
    """
    if config is None:
        config = ExtractorConfig.default()

    doc = coerce_document(document, EXTRACTOR_NAME, config)
    if doc is None:
        return None

    with timer(EXTRACTOR_NAME):
        result = run_chain(ORDER_NUMBER_MATCHERS, ParsedEmail(doc, config))

    if result is None:
        logger.warning("Could not extract order number from email %s", doc.message_id)
        record_extraction(EXTRACTOR_NAME, "miss")
        return None

    logger.info("Extracted order number %s via %s", result.value, result.matcher)
    record_extraction(EXTRACTOR_NAME, "found", result.matcher)
    return result.value
