# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Acquisition metrics for image intake.

This module provides:
1. IntakeMetrics - Dataclass counters for source dispatch and failures
2. PrometheusIntakeMetrics - Optional Prometheus metrics for observability

Usage:
    metrics = IntakeMetrics()

    async with acquire_image(image, registry, metrics=metrics) as image:
        ...

    stats = metrics.get_stats()

Source names and error kinds are used as labels. Both are categorical
(bounded by the registry and the exception hierarchy); never label with
request paths.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from prometheus_client import Counter as CounterType, Histogram as HistogramType

    from ..request import ImageRequest
else:
    CounterType = object
    HistogramType = object

logger = logging.getLogger(__name__)

# Try to import prometheus_client for optional Prometheus metrics
try:
    from prometheus_client import Counter as _Counter, Histogram as _Histogram

    Counter: type[CounterType] | None = _Counter
    Histogram: type[HistogramType] | None = _Histogram
    PROMETHEUS_AVAILABLE = True
except ImportError:
    Counter = None
    Histogram = None
    PROMETHEUS_AVAILABLE = False


@dataclass
class IntakeMetrics:
    """
    Counters for image acquisition.

    Thread Safety:
        Dictionary updates use a threading.Lock so the get + increment + set
        pattern stays atomic when one instance is shared between threads.

    Example:
        >>> metrics = IntakeMetrics()
        >>> metrics.record_acquisition(image, "s3", duration_seconds=0.12)
        >>> metrics.get_stats()["acquisitions"]
        1
    """

    acquisitions: int = 0
    failures: int = 0
    bytes_acquired: int = 0

    per_source: dict[str, int] = field(default_factory=dict)
    per_error: dict[str, int] = field(default_factory=dict)

    prometheus: PrometheusIntakeMetrics | None = field(default=None, repr=False)

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record_acquisition(
        self,
        request: ImageRequest,
        source_type: str,
        duration_seconds: float | None = None,
    ) -> None:
        """
        Record the outcome of one acquisition.

        Args:
            request: The request after its source was driven
            source_type: Name of the source that served it
            duration_seconds: Time spent reading from the source
        """
        error_kind = type(request.error).__name__ if request.is_error() else None
        size = request.original_content_length

        with self._lock:
            self.acquisitions += 1
            self.bytes_acquired += size
            self.per_source[source_type] = self.per_source.get(source_type, 0) + 1
            if error_kind is not None:
                self.failures += 1
                self.per_error[error_kind] = self.per_error.get(error_kind, 0) + 1

        if self.prometheus is not None:
            try:
                self.prometheus.observe_acquisition(
                    source_type, error_kind, size, duration_seconds
                )
            except Exception as e:
                logger.debug(f"Prometheus intake metrics failed: {e}")

    def get_failure_rate(self) -> float:
        """Share of acquisitions that ended with an error."""
        if self.acquisitions == 0:
            return 0.0
        return self.failures / self.acquisitions

    def get_stats(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot."""
        with self._lock:
            return {
                "acquisitions": self.acquisitions,
                "failures": self.failures,
                "failure_rate": self.get_failure_rate(),
                "bytes_acquired": self.bytes_acquired,
                "per_source": dict(self.per_source),
                "per_error": dict(self.per_error),
            }

    def reset(self) -> None:
        with self._lock:
            self.acquisitions = 0
            self.failures = 0
            self.bytes_acquired = 0
            self.per_source.clear()
            self.per_error.clear()


class PrometheusIntakeMetrics:
    """
    Optional Prometheus metrics for image acquisition.

    Only instantiated if prometheus_client is available.

    Metrics:
        - image_intake_acquisitions_total: Counter by source and outcome
        - image_intake_failures_total: Counter by error kind
        - image_intake_acquired_bytes_total: Counter of buffered bytes
        - image_intake_acquisition_seconds: Histogram of source read time
    """

    def __init__(self, registry: Any | None = None) -> None:
        """
        Initialize Prometheus intake metrics.

        Args:
            registry: Optional CollectorRegistry. If None, uses the default registry.

        Raises:
            ImportError: If prometheus_client is not available.
        """
        if not PROMETHEUS_AVAILABLE or Counter is None or Histogram is None:
            raise ImportError(
                "prometheus_client is not available. "
                "Install with: pip install image-intake[prometheus]"
            )

        self.acquisitions = Counter(
            "image_intake_acquisitions_total",
            "Image acquisitions by source",
            ["source", "outcome"],  # outcome: ok, error
            registry=registry,
        )

        self.failures = Counter(
            "image_intake_failures_total",
            "Failed image requests by error kind",
            ["error"],
            registry=registry,
        )

        self.acquired_bytes = Counter(
            "image_intake_acquired_bytes_total",
            "Bytes of buffered image content acquired",
            ["source"],
            registry=registry,
        )

        self.acquisition_seconds = Histogram(
            "image_intake_acquisition_seconds",
            "Time spent reading from a source",
            ["source"],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10],
            registry=registry,
        )

        logger.info("Prometheus intake metrics initialized")

    def observe_acquisition(
        self,
        source_type: str,
        error_kind: str | None,
        size: int,
        duration_seconds: float | None = None,
    ) -> None:
        outcome = "ok" if error_kind is None else "error"
        self.acquisitions.labels(source=source_type, outcome=outcome).inc()
        if error_kind is not None:
            self.failures.labels(error=error_kind).inc()
        if size:
            self.acquired_bytes.labels(source=source_type).inc(size)
        if duration_seconds is not None:
            self.acquisition_seconds.labels(source=source_type).observe(
                duration_seconds
            )


# Module-level singleton for Prometheus metrics (optional)
_prometheus_intake_metrics: PrometheusIntakeMetrics | None = None
_prometheus_lock = threading.Lock()


def get_prometheus_intake_metrics() -> PrometheusIntakeMetrics | None:
    """
    Get or create the Prometheus intake metrics singleton.

    Double-checked locking keeps prometheus_client from seeing duplicate
    registrations when several threads initialize at once.

    Returns:
        PrometheusIntakeMetrics instance if prometheus_client is available,
        None otherwise.
    """
    global _prometheus_intake_metrics

    if not PROMETHEUS_AVAILABLE:
        return None

    if _prometheus_intake_metrics is None:
        with _prometheus_lock:
            if _prometheus_intake_metrics is None:
                try:
                    _prometheus_intake_metrics = PrometheusIntakeMetrics()
                except Exception as e:
                    logger.warning(
                        f"Failed to initialize Prometheus intake metrics: {e}"
                    )
                    return None

    return _prometheus_intake_metrics


def reset_prometheus_intake_metrics() -> None:
    """Reset the Prometheus intake metrics singleton (mainly for testing)."""
    global _prometheus_intake_metrics
    _prometheus_intake_metrics = None


__all__ = [
    "PROMETHEUS_AVAILABLE",
    "IntakeMetrics",
    "PrometheusIntakeMetrics",
    "get_prometheus_intake_metrics",
    "reset_prometheus_intake_metrics",
]
