# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability for image intake.

Classes:
    IntakeMetrics: Dataclass counters for acquisitions and failures.
    PrometheusIntakeMetrics: Optional Prometheus metrics.

Functions:
    get_prometheus_intake_metrics: Get or create the Prometheus metrics singleton.
    reset_prometheus_intake_metrics: Reset the Prometheus metrics singleton.

Constants:
    PROMETHEUS_AVAILABLE: Whether prometheus_client is available.
"""

from .metrics import (
    PROMETHEUS_AVAILABLE,
    IntakeMetrics,
    PrometheusIntakeMetrics,
    get_prometheus_intake_metrics,
    reset_prometheus_intake_metrics,
)

__all__ = [
    "PROMETHEUS_AVAILABLE",
    "IntakeMetrics",
    "PrometheusIntakeMetrics",
    "get_prometheus_intake_metrics",
    "reset_prometheus_intake_metrics",
]
