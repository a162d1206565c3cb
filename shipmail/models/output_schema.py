"""
Output envelope of the tracking-email workflow.

Produces ``result``, ``meta`` and ``errors`` sections. The envelope is always
serialisable, including after a hard failure (``meta.status == "failed"``).
"""
from __future__ import annotations

import json
import time
from typing import Any, Dict, List, Optional

STATUS_OK = "ok"
STATUS_INCOMPLETE = "incomplete"
STATUS_FAILED = "failed"


class WorkflowOutput:
    """
    Mutable output object built step by step by the workflow.

    Serialised via :meth:`to_dict` / :meth:`to_json` once processing is complete.
    """

    def __init__(self, message_id: Optional[str], version: str) -> None:
        self.message_id = message_id
        self._version = version

        self.order_number: Optional[str] = None
        self.tracking: Optional[Dict[str, Any]] = None
        self.customer_name: Optional[str] = None
        self.matching_orders: List[Dict[str, Any]] = []

        self._errors: List[Dict[str, str]] = []
        self._status: str = STATUS_OK
        self._reason: Optional[str] = None

        self._timings: Dict[str, float] = {}
        self._start_ts: float = time.perf_counter()

    # ------------------------------------------------------------------
    # Builder methods
    # ------------------------------------------------------------------

    @property
    def status(self) -> str:
        return self._status

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def set_incomplete(self, reason: str, message: str) -> None:
        """Mark the run as stopped by an extraction miss (not an error)."""
        self._status = STATUS_INCOMPLETE
        self._reason = reason
        self._errors.append({"component": reason, "message": message})

    def set_failed(self, reason: str) -> None:
        """Mark the run as hard-failed; partial results are dropped."""
        self._status = STATUS_FAILED
        self._reason = "unexpected_error"
        self.matching_orders = []
        self._errors.append({"component": "workflow", "message": reason})

    def record_timing(self, component: str, elapsed_ms: float) -> None:
        self._timings[component] = round(elapsed_ms, 3)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        total_ms = round((time.perf_counter() - self._start_ts) * 1000, 3)
        return {
            "result": {
                "order_number": self.order_number,
                "tracking": self.tracking,
                "customer_name": self.customer_name,
                "matching_orders": self.matching_orders,
            },
            "meta": {
                "message_id": self.message_id,
                "status": self._status,
                "reason": self._reason,
                "version": self._version,
                "processing_time_ms": total_ms,
                "component_timings_ms": self._timings,
                "matching_order_count": len(self.matching_orders),
            },
            "errors": self._errors,
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialise to a JSON string. Always succeeds (safe fallback on error)."""
        try:
            return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)
        except (TypeError, ValueError) as exc:
            return json.dumps({
                "result": {
                    "order_number": None,
                    "tracking": None,
                    "customer_name": None,
                    "matching_orders": [],
                },
                "meta": {
                    "message_id": str(self.message_id),
                    "status": STATUS_FAILED,
                    "reason": "serialisation_error",
                    "version": self._version,
                    "processing_time_ms": 0.0,
                    "component_timings_ms": {},
                    "matching_order_count": 0,
                },
                "errors": [{"component": "serialiser", "message": str(exc)}],
            }, ensure_ascii=False)

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"WorkflowOutput(status={self._status!r},"
            f" reason={self._reason!r},"
            f" matches={len(self.matching_orders)})"
        )
