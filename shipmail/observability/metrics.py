"""
Prometheus metrics for the extraction engine.

Exported metrics
----------------
``shipmail_extractions_total``            counter     extractor calls by outcome (found/miss/invalid)
``shipmail_matcher_hits_total``           counter     which matcher of a fallback chain produced the value
``shipmail_normalizer_results_total``     counter     envelope normalisation outcomes
``shipmail_workflow_runs_total``          counter     workflow runs by outcome (ok/incomplete/failed)
``shipmail_extraction_latency_seconds``   histogram   latency per named component
"""
from __future__ import annotations

import time
from typing import Any

from prometheus_client import Counter, Histogram

# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

#: Extractor calls, labelled by extractor and outcome.
EXTRACTIONS_TOTAL: Any = Counter(
    "shipmail_extractions_total",
    "Extractor calls by extractor and outcome (found/miss/invalid)",
    labelnames=["extractor", "outcome"],
)

#: Matcher that produced the extracted value.
MATCHER_HITS_TOTAL: Any = Counter(
    "shipmail_matcher_hits_total",
    "Successful matcher per extractor fallback chain",
    labelnames=["extractor", "matcher"],
)

#: Envelope normalisation outcomes.
NORMALIZER_RESULTS_TOTAL: Any = Counter(
    "shipmail_normalizer_results_total",
    "Envelope normalisation outcomes (ok/malformed/decode_error)",
    labelnames=["outcome"],
)

#: Workflow runs, labelled by outcome.
WORKFLOW_RUNS: Any = Counter(
    "shipmail_workflow_runs_total",
    "Tracking-email workflow runs by outcome (ok/incomplete/failed)",
    labelnames=["outcome"],
)

#: Latency (seconds) per named component.
EXTRACTION_LATENCY: Any = Histogram(
    "shipmail_extraction_latency_seconds",
    "Per-component extraction latency in seconds",
    labelnames=["component"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _Timer:
    """Context manager that records elapsed time and emits the latency metric."""

    def __init__(self, component: str) -> None:
        self._component = component
        self._start: float = 0.0
        self.elapsed_ms: float = 0.0

    def __enter__(self) -> "_Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: Any) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
        EXTRACTION_LATENCY.labels(component=self._component).observe(
            self.elapsed_ms / 1000
        )


def timer(component: str) -> _Timer:
    """Return a context manager that times a component and records latency."""
    return _Timer(component)


def record_extraction(extractor: str, outcome: str, matcher: str = "") -> None:
    """Count one extractor call and, when a matcher hit, which one."""
    EXTRACTIONS_TOTAL.labels(extractor=extractor, outcome=outcome).inc()
    if matcher:
        MATCHER_HITS_TOTAL.labels(extractor=extractor, matcher=matcher).inc()
