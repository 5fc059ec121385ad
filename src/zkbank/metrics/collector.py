"""Metrics collector: Prometheus counters, gauges, histograms.

Exposes:
- ``zkbank_transactions_by_status`` gauge-vec (pending, ready_for_notary, ...)
- ``zkbank_ledger_operations_total`` counter-vec by operation and outcome
- ``zkbank_ledger_operation_seconds`` histogram-vec by operation
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

from zkbank.errors.zk_errors import ZkBankError
from zkbank.ledger.models import TransactionStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from zkbank.ledger.models import TransactionRecord

_PREFIX = "zkbank"

OUTCOME_OK = "ok"


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`LedgerMetrics` for the high-level tracking interface.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._registry

    def gauge(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Gauge:
        """Register and return a Gauge."""
        return Gauge(name, doc, labels, registry=self._registry)

    def histogram(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Histogram:
        """Register and return a Histogram."""
        return Histogram(name, doc, labels, registry=self._registry)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        """Register and return a Counter."""
        return Counter(name, doc, labels, registry=self._registry)


class LedgerMetrics:
    """High-level ledger metrics."""

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._by_status = self._collector.gauge(
            f"{_PREFIX}_transactions_by_status",
            "Number of transaction records per lifecycle status",
            ("status",),
        )
        self._operations = self._collector.counter(
            f"{_PREFIX}_ledger_operations_total",
            "Ledger operations by outcome (ok or error code)",
            ("operation", "outcome"),
        )
        self._duration = self._collector.histogram(
            f"{_PREFIX}_ledger_operation_seconds",
            "Duration of ledger operations",
            ("operation",),
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._collector.registry

    def set_status_counts(self, records: Iterable[TransactionRecord]) -> None:
        """Recount records per status and publish the gauge."""
        counts = dict.fromkeys(TransactionStatus, 0)
        for record in records:
            counts[record.status] += 1
        for status, count in counts.items():
            self._by_status.labels(status=status.value).set(count)

    def operation_count(self, operation: str, outcome: str = OUTCOME_OK) -> float:
        """Current counter value (mainly for tests and diagnostics)."""
        value = self.registry.get_sample_value(
            f"{_PREFIX}_ledger_operations_total",
            {"operation": operation, "outcome": outcome},
        )
        return value or 0.0

    @contextmanager
    def track(self, operation: str) -> Iterator[None]:
        """Track duration and outcome of a ledger operation.

        Domain errors are counted under their error code and re-raised.
        """
        start = time.monotonic()
        outcome = OUTCOME_OK
        try:
            yield
        except ZkBankError as exc:
            outcome = exc.code
            raise
        except Exception:
            outcome = "internal-error"
            raise
        finally:
            self._duration.labels(operation=operation).observe(time.monotonic() - start)
            self._operations.labels(operation=operation, outcome=outcome).inc()
