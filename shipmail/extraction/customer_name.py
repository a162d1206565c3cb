"""
Customer Name Extractor.

Finds the purchaser's name in an order-confirmation email. Matchers, in
order (first non-empty result wins):

  1. ``billing_address``      the name right after the ``Billing Address``
                              label, inside the nearest table/div/section
                              enclosing the first mention of that label
  2. ``dear_greeting``        ``Dear <Name>,``
  3. ``thank_you_greeting``   ``Thank you, <Name>``

Names are runs of letters and spaces on a single line, trimmed.
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
    run_chain,
    search_group,
)
from shipmail.extraction.html_query import find_text_container
from shipmail.extraction.text_render import element_text
from shipmail.observability.metrics import record_extraction, timer

logger = logging.getLogger(__name__)

EXTRACTOR_NAME = "customer_name"

BILLING_LABEL = "Billing Address"

# A name is one line of letters and spaces, at most NAME_MAX_CHARS long.
NAME_MAX_CHARS = 80
_NAME = r"([A-Za-z][A-Za-z ]{0,%d})" % (NAME_MAX_CHARS - 1)

# The label may have been split across elements, leaving a line break inside it.
BILLING_NAME_RE = re.compile(r"Billing\s+Address[ \t]*:?\s*" + _NAME)
DEAR_RE = re.compile(r"Dear\s+" + _NAME + r",")
THANK_YOU_RE = re.compile(r"Thank you,\s+" + _NAME)


def _clean(name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    return name.strip() or None


# ---------------------------------------------------------------------------
# Matchers
# ---------------------------------------------------------------------------


def _match_billing_address(parsed: ParsedEmail) -> Optional[str]:
    container = find_text_container(parsed.soup, BILLING_LABEL)
    if container is None:
        return None
    return _clean(search_group(BILLING_NAME_RE, element_text(container)))


def _match_dear(parsed: ParsedEmail) -> Optional[str]:
    return _clean(search_group(DEAR_RE, parsed.plain_text))


def _match_thank_you(parsed: ParsedEmail) -> Optional[str]:
    return _clean(search_group(THANK_YOU_RE, parsed.plain_text))


CUSTOMER_NAME_MATCHERS: List[Matcher[str]] = [
    Matcher("billing_address", _match_billing_address),
    Matcher("dear_greeting", _match_dear),
    Matcher("thank_you_greeting", _match_thank_you),
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_customer_name(
    document: Any,
    config: Optional[ExtractorConfig] = None,
) -> Optional[str]:
    """
    Extract the customer's name from an order-confirmation email.

    Returns:
        The trimmed name, or ``None`` when no matcher succeeds or the
        document has no body.
    """
    if config is None:
        config = ExtractorConfig.default()

    doc = coerce_document(document, EXTRACTOR_NAME, config)
    if doc is None:
        return None

    with timer(EXTRACTOR_NAME):
        result = run_chain(CUSTOMER_NAME_MATCHERS, ParsedEmail(doc, config))

    if result is None:
        logger.warning("Could not extract customer name from email %s", doc.message_id)
        record_extraction(EXTRACTOR_NAME, "miss")
        return None

    logger.info("Extracted customer name %s via %s", result.value, result.matcher)
    record_extraction(EXTRACTOR_NAME, "found", result.matcher)
    return result.value
