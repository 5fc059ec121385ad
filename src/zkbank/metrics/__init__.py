"""Metrics: Prometheus metrics collection and exposure."""

from __future__ import annotations

from zkbank.metrics.collector import LedgerMetrics, MetricsCollector

__all__ = ["LedgerMetrics", "MetricsCollector"]
