"""
Workflow event log.

Workflow outcomes are written one JSON object per line on the
``shipmail.events`` logger. Each record carries the email's message and
thread ids, plus any ``ctx_*`` fields the call site adds.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Optional, Tuple

EVENTS_LOGGER = "shipmail.events"

_RECORD_FIELDS = ("message_id", "thread_id", "order_number")


class EventFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        event: Dict[str, Any] = {
            "ts": stamp.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "event": record.getMessage(),
        }
        event.update(
            (key, value)
            for key, value in vars(record).items()
            if key in _RECORD_FIELDS or key.startswith("ctx_")
        )
        if record.exc_info:
            event["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(event, ensure_ascii=False, default=str)


def get_logger(name: str = EVENTS_LOGGER) -> logging.Logger:
    """Return *name* with a stdout JSON handler attached once."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(EventFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    return logger


class ExtractionLogger(logging.LoggerAdapter):
    """
    Adapter binding one email's ids to every workflow event.

    ::

        log = ExtractionLogger("18c2f0a", "18c2f0a")
        log.log_miss("tracking", "tracking_number_not_found")
    """

    def __init__(
        self,
        message_id: Optional[str],
        thread_id: Optional[str],
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(
            logger or get_logger(),
            {"message_id": message_id, "thread_id": thread_id},
        )

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**kwargs.get("extra", {}), **self.extra}
        return msg, kwargs

    def log_miss(self, step: str, reason: str) -> None:
        """A step found nothing and the workflow stopped there."""
        self.warning("extraction_miss", extra={"ctx_step": step, "ctx_reason": reason})

    def log_processed(self, order_number: str, customer_name: str, matching_orders: int) -> None:
        """Every step succeeded."""
        self.info(
            "tracking_email_processed",
            extra={
                "order_number": order_number,
                "ctx_customer_name": customer_name,
                "ctx_matching_orders": matching_orders,
            },
        )
