"""Prometheus metrics for instrument detection.

Metrics:
    instrument_analyses_total              Counter by variant and outcome
                                           (detected/silent/low_confidence/...)
    instrument_analysis_latency_seconds    Histogram of end-to-end analysis time
    instrument_model_load_failures_total   Counter of failed model loads by variant

Usage::

    from infrastructure.metrics import LatencyTimer, record_analysis

    with LatencyTimer() as t:
        result = run_pipeline(...)
    record_analysis(variant="yamnet", outcome=result.outcome.value, latency_seconds=t.elapsed)
"""

from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)

# prometheus_client is optional. If not installed, all calls
# are no-ops and /metrics returns an empty body.
_registry_available = False
try:
    from prometheus_client import (
        CONTENT_TYPE_LATEST,
        CollectorRegistry,
        Counter,
        Histogram,
        generate_latest,
    )

    _REGISTRY = CollectorRegistry()

    analyses_total = Counter(
        "instrument_analyses_total",
        "Instrument analyses by variant and outcome",
        ["variant", "outcome"],
        registry=_REGISTRY,
    )

    analysis_latency_seconds = Histogram(
        "instrument_analysis_latency_seconds",
        "End-to-end analysis latency in seconds",
        ["variant"],
        buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
        registry=_REGISTRY,
    )

    model_load_failures_total = Counter(
        "instrument_model_load_failures_total",
        "Failed model/label loads by variant",
        ["variant"],
        registry=_REGISTRY,
    )

    _registry_available = True
    logger.info("Prometheus metrics registry initialized")

except ImportError:
    logger.info("prometheus_client not installed — metrics disabled")
    _REGISTRY = None  # type: ignore[assignment]


# ---------------------------------------------------------------------------
# Public helpers: all are no-ops when prometheus_client is not installed
# ---------------------------------------------------------------------------


def record_analysis(
    *,
    variant: str,
    outcome: str,
    latency_seconds: float,
) -> None:
    """Record a completed analysis.

    Args:
        variant: Pipeline variant name, e.g. "yamnet".
        outcome: DetectionOutcome value, e.g. "detected", "silent".
        latency_seconds: Wall-clock analysis time in seconds.
    """
    if not _registry_available:
        return
    analyses_total.labels(variant=variant, outcome=outcome).inc()
    analysis_latency_seconds.labels(variant=variant).observe(latency_seconds)


def record_model_load_failure(variant: str) -> None:
    """Increment the failed model load counter for a variant."""
    if _registry_available:
        model_load_failures_total.labels(variant=variant).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
        Returns empty bytes if prometheus_client is not available.
    """
    if not _registry_available:
        return b"", "text/plain"
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            result = detector.analyze_bytes(data)
        print(t.elapsed)
    """

    def __init__(self) -> None:
        """Initialize timer."""
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        self.elapsed = time.perf_counter() - self._start
