"""Tests for the ledger metrics collector."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from prometheus_client import CollectorRegistry

from zkbank.errors.definitions import MissingNotaryError
from zkbank.ledger.models import TransactionRecord, TransactionStatus
from zkbank.metrics.collector import LedgerMetrics, MetricsCollector


def _record(tx_id: str, status: TransactionStatus) -> TransactionRecord:
    return TransactionRecord(
        id=tx_id,
        initiator="0xa",
        counterparty="0xb",
        amount=1,
        required_signatures=1,
        notary_required=False,
        zkp_proof="0x",
        tx_data="0x",
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
        status=status,
    )


class TestMetricsCollector:
    def test_uses_given_registry(self) -> None:
        registry = CollectorRegistry()
        assert MetricsCollector(registry).registry is registry

    def test_separate_registries(self) -> None:
        # Two LedgerMetrics must not clash on metric names.
        LedgerMetrics()
        LedgerMetrics()


class TestLedgerMetrics:
    def test_track_success(self) -> None:
        m = LedgerMetrics()
        with m.track("create"):
            pass
        assert m.operation_count("create") == 1
        assert m.registry.get_sample_value(
            "zkbank_ledger_operation_seconds_count", {"operation": "create"}
        ) == 1

    def test_track_domain_error(self) -> None:
        m = LedgerMetrics()
        with pytest.raises(MissingNotaryError), m.track("complete"):
            raise MissingNotaryError
        assert m.operation_count("complete", "missing-notary") == 1
        assert m.operation_count("complete") == 0

    def test_track_unexpected_error(self) -> None:
        m = LedgerMetrics()
        with pytest.raises(RuntimeError), m.track("sign"):
            raise RuntimeError("boom")
        assert m.operation_count("sign", "internal-error") == 1

    def test_status_counts(self) -> None:
        m = LedgerMetrics()
        m.set_status_counts(
            [
                _record("0x1", TransactionStatus.PENDING),
                _record("0x2", TransactionStatus.PENDING),
                _record("0x3", TransactionStatus.COMPLETED),
            ]
        )
        sample = m.registry.get_sample_value
        assert sample("zkbank_transactions_by_status", {"status": "pending"}) == 2
        assert sample("zkbank_transactions_by_status", {"status": "completed"}) == 1
        assert sample("zkbank_transactions_by_status", {"status": "ready_for_notary"}) == 0
