"""ZkBankEngine: central engine client owning the ledger and its infrastructure."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from zkbank.ledger.generators import RandomPlaceholderGenerator, utc_now
from zkbank.ledger.service import TransactionLedger
from zkbank.ledger.store import MemoryTransactionStore
from zkbank.metrics.collector import LedgerMetrics

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from zkbank.config.settings import AppConfig
    from zkbank.ledger.generators import PlaceholderGenerator
    from zkbank.ledger.store import TransactionStore

logger = logging.getLogger(__name__)

# Error messages
_ERR_NOT_INITIALIZED = "Engine not initialized. Call initialize() first."


class ZkBankEngine:
    """Central engine that owns the store, ledger and metrics.

    The store, generator and clock can be injected; anything omitted is
    built from the configuration on :meth:`initialize`.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        store: TransactionStore | None = None,
        generator: PlaceholderGenerator | None = None,
        clock: Callable[[], datetime] | None = None,
        metrics: LedgerMetrics | None = None,
    ) -> None:
        """Initialize engine with configuration.

        Args:
            config: Application configuration.
            store: Record store; an in-memory store if omitted.
            generator: Identifier generator; a random one if omitted.
            clock: Time source; UTC now if omitted.
            metrics: Metrics sink shared with the HTTP layer; built from the
                config if omitted.
        """
        self._config = config
        self._initialized = False

        self._store_override = store
        self._generator_override = generator
        self._clock = clock or utc_now
        self._metrics_override = metrics

        self._store: TransactionStore | None = None
        self._ledger: TransactionLedger | None = None
        self._metrics: LedgerMetrics | None = None

    async def initialize(self) -> None:
        """Build the store, metrics and ledger.

        Raises:
            RuntimeError: If already initialized.
        """
        if self._initialized:
            msg = "Engine already initialized"
            raise RuntimeError(msg)

        ledger_config = self._config.ledger
        self._store = (
            self._store_override
            if self._store_override is not None
            else MemoryTransactionStore()
        )
        generator = self._generator_override or RandomPlaceholderGenerator(
            ledger_config.id_hex_length
        )

        if self._metrics_override is not None:
            self._metrics = self._metrics_override
        elif self._config.metrics.enabled:
            self._metrics = LedgerMetrics()

        self._ledger = TransactionLedger(
            self._store,
            generator=generator,
            clock=self._clock,
            config=ledger_config,
            metrics=self._metrics,
        )
        self._initialized = True
        logger.info("Ledger ready on %s network", ledger_config.network)

    async def close(self) -> None:
        """Release the ledger and store.

        Can be called multiple times (idempotent). Records held in an
        in-memory store are lost.
        """
        if not self._initialized:
            return

        self._ledger = None
        self._metrics = None
        self._store = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Check if the engine is initialized."""
        return self._initialized

    @property
    def config(self) -> AppConfig:
        """Get the application configuration."""
        return self._config

    @property
    def store(self) -> TransactionStore:
        """Get the record store.

        Raises:
            RuntimeError: If engine not initialized.
        """
        if self._store is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._store

    @property
    def ledger(self) -> TransactionLedger:
        """Get the transaction ledger.

        Raises:
            RuntimeError: If engine not initialized.
        """
        if self._ledger is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._ledger

    @property
    def metrics(self) -> LedgerMetrics | None:
        """Get the ledger metrics (None if disabled or not initialized)."""
        return self._metrics

    async def health_check(self) -> dict[str, str]:
        """Report component health ('ok' or 'not_initialized')."""
        state = "ok" if self._initialized else "not_initialized"
        return {"engine": state, "ledger": state}
