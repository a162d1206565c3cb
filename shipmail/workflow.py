"""
Tracking-email workflow: from a shipping notification to candidate orders.

Steps:

  Step 1. Normalise the tracking envelope
  Step 2. Order number (full fallback chain)
  Step 3. Tracking number + carrier
  Step 4. Customer name from the first confirmation email of that order
  Step 5. Unfulfilled orders matching the customer name

Every miss stops the run with ``status="incomplete"`` and a machine-readable
``reason`` so the caller can show a "not found" state. Nothing is fetched
here: confirmation envelopes and unfulfilled orders are supplied by the
mailbox and store collaborators. A top-level guard makes sure the function
always returns a serialisable :class:`WorkflowOutput`.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from shipmail.config import EXTRACTOR_VERSION, ExtractorConfig
from shipmail.extraction.customer_name import extract_customer_name
from shipmail.extraction.normalizer import normalize_envelope
from shipmail.extraction.order_number import extract_order_number
from shipmail.extraction.tracking import extract_tracking_info
from shipmail.fulfillment.order_matcher import OrderLike, match_orders_by_customer_name
from shipmail.models.output_schema import WorkflowOutput
from shipmail.observability.logging import ExtractionLogger
from shipmail.observability.metrics import WORKFLOW_RUNS, timer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Listing summaries
# ---------------------------------------------------------------------------


def summarize_tracking_email(
    raw: Any,
    config: Optional[ExtractorConfig] = None,
) -> Optional[Dict[str, Any]]:
    """Return the listing row for one tracking email, or ``None`` if malformed."""
    document = normalize_envelope(raw, config)
    if document is None:
        return None
    tracking = extract_tracking_info(document, config)
    return {
        "id": document.message_id,
        "thread_id": document.thread_id,
        "subject": document.subject,
        "date": document.date,
        "from": document.sender,
        "order_number": extract_order_number(document, config),
        "tracking": tracking.to_dict() if tracking else None,
    }


def summarize_confirmation_email(
    raw: Any,
    order_number: str,
    config: Optional[ExtractorConfig] = None,
) -> Optional[Dict[str, Any]]:
    """Return the listing row for one confirmation email, or ``None`` if malformed."""
    document = normalize_envelope(raw, config)
    if document is None:
        return None
    return {
        "id": document.message_id,
        "thread_id": document.thread_id,
        "subject": document.subject,
        "date": document.date,
        "from": document.sender,
        "order_number": order_number,
        "customer_name": extract_customer_name(document, config),
    }


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------


def process_tracking_email(
    tracking_envelope: Any,
    confirmation_envelopes: Sequence[Any],
    unfulfilled_orders: Iterable[OrderLike],
    config: Optional[ExtractorConfig] = None,
) -> WorkflowOutput:
    """
    Run the tracking-email workflow.

    Args:
        tracking_envelope:      Raw mailbox message of the shipping notification.
        confirmation_envelopes: Raw confirmation messages found for the order
                                number (only the first one is used).
        unfulfilled_orders:     Store orders still awaiting fulfillment.
        config:                 Runtime configuration.

    Returns:
        A :class:`~shipmail.models.output_schema.WorkflowOutput`; see its
        ``meta.status`` / ``meta.reason``.
    """
    if config is None:
        config = ExtractorConfig.default()

    message_id = tracking_envelope.get("id") if isinstance(tracking_envelope, dict) else None
    output = WorkflowOutput(message_id=message_id, version=EXTRACTOR_VERSION)

    try:
        _run_steps(output, tracking_envelope, confirmation_envelopes, unfulfilled_orders, config)
    except Exception as exc:  # noqa: BLE001
        output.set_failed(f"Unexpected error: {exc}")
        logger.exception("Workflow unexpected hard failure: %s", exc)

    WORKFLOW_RUNS.labels(outcome=output.status).inc()
    return output


def _run_steps(
    output: WorkflowOutput,
    tracking_envelope: Any,
    confirmation_envelopes: Sequence[Any],
    unfulfilled_orders: Iterable[OrderLike],
    config: ExtractorConfig,
) -> None:
    # ------------------------------------------------------------------
    # Step 1: Normalise the tracking email
    # ------------------------------------------------------------------
    with timer("step1_normalise") as t1:
        document = normalize_envelope(tracking_envelope, config)
    output.record_timing("step1_normalise", t1.elapsed_ms)

    if document is None:
        output.set_incomplete("document_unusable", "Tracking email could not be read")
        logger.warning("Tracking envelope unusable")
        return

    log = ExtractionLogger(document.message_id, document.thread_id)

    # ------------------------------------------------------------------
    # Step 2: Order number
    # ------------------------------------------------------------------
    with timer("step2_order_number") as t2:
        output.order_number = extract_order_number(document, config)
    output.record_timing("step2_order_number", t2.elapsed_ms)

    if not output.order_number:
        output.set_incomplete(
            "order_number_not_found", "Could not extract order number from email"
        )
        log.log_miss("order_number", "order_number_not_found")
        return

    # ------------------------------------------------------------------
    # Step 3: Tracking number
    # ------------------------------------------------------------------
    with timer("step3_tracking") as t3:
        tracking = extract_tracking_info(document, config)
    output.record_timing("step3_tracking", t3.elapsed_ms)
    output.tracking = tracking.to_dict() if tracking else None

    if tracking is None or not tracking.found:
        output.set_incomplete(
            "tracking_number_not_found", "Could not extract tracking number from email"
        )
        log.log_miss("tracking", "tracking_number_not_found")
        return

    # ------------------------------------------------------------------
    # Step 4: Customer name from the confirmation email
    # ------------------------------------------------------------------
    confirmations: List[Any] = list(confirmation_envelopes or [])
    if not confirmations:
        output.set_incomplete(
            "confirmation_not_found", "No confirmation email found for this order number"
        )
        log.log_miss("confirmation", "confirmation_not_found")
        return

    with timer("step4_customer_name") as t4:
        confirmation = normalize_envelope(confirmations[0], config)
        output.customer_name = (
            extract_customer_name(confirmation, config) if confirmation else None
        )
    output.record_timing("step4_customer_name", t4.elapsed_ms)

    if not output.customer_name:
        output.set_incomplete(
            "customer_name_not_found",
            "Could not extract customer name from confirmation email",
        )
        log.log_miss("customer_name", "customer_name_not_found")
        return

    # ------------------------------------------------------------------
    # Step 5: Matching unfulfilled orders
    # ------------------------------------------------------------------
    with timer("step5_match_orders") as t5:
        matches = match_orders_by_customer_name(
            output.customer_name, unfulfilled_orders, config
        )
    output.record_timing("step5_match_orders", t5.elapsed_ms)
    output.matching_orders = [m.to_dict() for m in matches]

    log.log_processed(output.order_number, output.customer_name, len(matches))
