"""Shared test fixtures for py-zkbank test suite."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from zkbank.config.settings import AppConfig, LedgerConfig
from zkbank.ledger.generators import SequentialPlaceholderGenerator
from zkbank.ledger.service import TransactionLedger
from zkbank.ledger.store import MemoryTransactionStore
from zkbank.metrics.collector import LedgerMetrics

if TYPE_CHECKING:
    from collections.abc import Iterator

T0 = datetime(2024, 1, 1, tzinfo=UTC)


class StepClock:
    """Clock that advances one second per call."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def store() -> MemoryTransactionStore:
    return MemoryTransactionStore()


@pytest.fixture
def metrics() -> LedgerMetrics:
    return LedgerMetrics()


@pytest.fixture
def ledger(store, clock, metrics) -> TransactionLedger:
    """Ledger with deterministic ids (``0xtx0001``, ...) and a stepping clock."""
    return TransactionLedger(
        store,
        generator=SequentialPlaceholderGenerator(),
        clock=clock,
        config=LedgerConfig(),
        metrics=metrics,
    )


@pytest.fixture
def app_config() -> AppConfig:
    """Provide a test AppConfig with safe defaults."""
    return AppConfig(debug=True)


@pytest.fixture
def test_client(app_config) -> Iterator:
    """Provide a FastAPI TestClient with the lifespan running."""
    from fastapi.testclient import TestClient

    from zkbank.api.app import create_app

    app = create_app(config=app_config, generator=SequentialPlaceholderGenerator())
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
