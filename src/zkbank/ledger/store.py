"""Transaction store abstraction and in-memory backend."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator
    from contextlib import AbstractContextManager

    from zkbank.ledger.models import TransactionRecord


class TransactionStore(Protocol):
    """Protocol that store backends must implement."""

    def get(self, tx_id: str) -> TransactionRecord | None: ...
    def contains(self, tx_id: str) -> bool: ...
    def insert(self, record: TransactionRecord) -> None: ...
    def values(self) -> list[TransactionRecord]: ...
    def __len__(self) -> int: ...
    def lock(self, tx_id: str) -> AbstractContextManager[None]: ...


class MemoryTransactionStore:
    """Process-local store keeping records in insertion order.

    Each identifier gets its own lock so read-modify-write sequences on one
    record are serialised without blocking other records.
    """

    def __init__(self) -> None:
        self._records: dict[str, TransactionRecord] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def get(self, tx_id: str) -> TransactionRecord | None:
        """Return the record for *tx_id*, or None if unknown."""
        return self._records.get(tx_id)

    def contains(self, tx_id: str) -> bool:
        return tx_id in self._records

    def insert(self, record: TransactionRecord) -> None:
        """Add a new record.

        Raises:
            KeyError: If a record with the same id already exists.
        """
        with self._registry_lock:
            if record.id in self._records:
                raise KeyError(record.id)
            self._records[record.id] = record
            self._locks.setdefault(record.id, threading.Lock())

    def values(self) -> list[TransactionRecord]:
        """Snapshot of all records in insertion order."""
        with self._registry_lock:
            return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    @contextmanager
    def lock(self, tx_id: str) -> Iterator[None]:
        """Hold the per-identifier lock for the duration of the block."""
        with self._registry_lock:
            # Unknown ids get a throwaway lock; the caller will fail the lookup.
            lock = self._locks.get(tx_id) or threading.Lock()
        with lock:
            yield
