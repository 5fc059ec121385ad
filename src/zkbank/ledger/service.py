"""Transaction ledger: the multi-party signing state machine.

Lifecycle of a record:
1. Create: ``pending`` with no signatures
2. Sign: distinct signers append approvals; ``ready_for_notary`` once the
   threshold is met
3. Notarize: the notary signs (only when required); ``ready_for_completion``
4. Complete: terminal ``completed`` state, the record is frozen

Every mutation runs under the store's per-identifier lock.
"""

from __future__ import annotations

import dataclasses
import logging
from contextlib import nullcontext
from typing import TYPE_CHECKING, Any

from zkbank.config.settings import LedgerConfig
from zkbank.errors.definitions import (
    AlreadyCompletedError,
    DuplicateSignerError,
    InsufficientSignaturesError,
    InternalError,
    MissingNotaryError,
    NotaryNotRequiredError,
    NotFoundError,
    ValidationError,
)
from zkbank.ledger.generators import RandomPlaceholderGenerator, utc_now
from zkbank.ledger.models import (
    LedgerStats,
    NotarySignature,
    SignatureEntry,
    StatusView,
    TransactionRecord,
    TransactionStatus,
)
from zkbank.ledger.store import MemoryTransactionStore

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractContextManager
    from datetime import datetime

    from zkbank.ledger.generators import PlaceholderGenerator
    from zkbank.ledger.store import TransactionStore
    from zkbank.metrics.collector import LedgerMetrics

logger = logging.getLogger(__name__)

# Demo parties for the sample transaction
SAMPLE_INITIATOR = "0x3f350562c0151db2394cb9813e987415bca1ef3826287502ce58382f6129f953"
SAMPLE_COUNTERPARTY = "0xf4304fc20db1db265d80c07c06ca955c9b22ec9dc305f34a65666d870cd1e615"
SAMPLE_AMOUNT = 1_000_000_000


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require(**fields: Any) -> None:
    missing = [name for name, value in fields.items() if _is_absent(value)]
    if missing:
        msg = f"missing required fields: {', '.join(missing)}"
        raise ValidationError(msg)


def _to_int(name: str, value: Any) -> int:
    """Coerce ints, integral floats and numeric strings; anything else is invalid."""
    if isinstance(value, bool):
        msg = f"{name} must be an integer"
        raise ValidationError(msg)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    msg = f"{name} must be an integer"
    raise ValidationError(msg)


class TransactionLedger:
    """Business logic for the transaction lifecycle.

    Args:
        store: Record storage; defaults to a fresh in-memory store.
        generator: Identifier source; defaults to a random generator.
        clock: Returns the current time; defaults to UTC now.
        config: Creation defaults and identifier settings.
        metrics: Optional Prometheus metrics sink.
    """

    def __init__(
        self,
        store: TransactionStore | None = None,
        *,
        generator: PlaceholderGenerator | None = None,
        clock: Callable[[], datetime] = utc_now,
        config: LedgerConfig | None = None,
        metrics: LedgerMetrics | None = None,
    ) -> None:
        self._config = config or LedgerConfig()
        self._store = store if store is not None else MemoryTransactionStore()
        self._generator = generator or RandomPlaceholderGenerator(self._config.id_hex_length)
        self._clock = clock
        self._metrics = metrics

    @property
    def store(self) -> TransactionStore:
        return self._store

    def _track(self, operation: str) -> AbstractContextManager[None]:
        if self._metrics is None:
            return nullcontext()
        return self._metrics.track(operation)

    def _publish_counts(self) -> None:
        if self._metrics is not None:
            self._metrics.set_status_counts(self._store.values())

    def _load(self, tx_id: str) -> TransactionRecord:
        record = self._store.get(tx_id)
        if record is None:
            raise NotFoundError(tx_id)
        return record

    def _load_mutable(self, tx_id: str) -> TransactionRecord:
        record = self._load(tx_id)
        if record.completed:
            raise AlreadyCompletedError(tx_id)
        return record

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(
        self,
        initiator: str | None,
        counterparty: str | None,
        amount: int | str | None,
        *,
        required_signatures: int | str | None = None,
        notary_required: bool | None = None,
        zkp_proof: str | None = None,
        tx_data: str | None = None,
    ) -> TransactionRecord:
        """Create a new ``pending`` transaction.

        Omitted optional terms fall back to the :class:`LedgerConfig`
        defaults (two signatures, notary required, fixed placeholders).

        Raises:
            ValidationError: On a missing initiator, counterparty or amount,
                a negative or non-integer amount, or a threshold below one.
            InternalError: If no free identifier could be generated.
        """
        with self._track("create"):
            _require(initiator=initiator, counterparty=counterparty, amount=amount)
            amount_value = _to_int("amount", amount)
            if amount_value < 0:
                msg = "amount must not be negative"
                raise ValidationError(msg)

            if required_signatures is None:
                threshold = self._config.default_required_signatures
            else:
                threshold = _to_int("requiredSignatures", required_signatures)
            if threshold < 1:
                msg = "requiredSignatures must be at least 1"
                raise ValidationError(msg)

            if notary_required is None:
                notary_required = self._config.default_notary_required

            record = TransactionRecord(
                id="",
                initiator=str(initiator),
                counterparty=str(counterparty),
                amount=amount_value,
                required_signatures=threshold,
                notary_required=bool(notary_required),
                zkp_proof=zkp_proof or self._config.default_zkp_proof,
                tx_data=tx_data or self._config.default_tx_data,
                created_at=self._clock(),
            )
            record = self._insert_with_fresh_id(record)

        logger.info(
            "Created transaction %s (%d signatures required, notary %s)",
            record.id,
            record.required_signatures,
            "required" if record.notary_required else "not required",
        )
        self._publish_counts()
        return record

    def _insert_with_fresh_id(self, record: TransactionRecord) -> TransactionRecord:
        for _ in range(self._config.id_attempts):
            candidate = dataclasses.replace(record, id=self._generator.transaction_id())
            try:
                self._store.insert(candidate)
            except KeyError:
                logger.warning("Transaction id collision on %s, regenerating", candidate.id)
                continue
            return candidate
        msg = f"could not allocate a transaction id after {self._config.id_attempts} attempts"
        raise InternalError(msg)

    def create_sample(self) -> TransactionRecord:
        """Create a demo transaction between two fixed parties."""
        return self.create(
            SAMPLE_INITIATOR,
            SAMPLE_COUNTERPARTY,
            SAMPLE_AMOUNT,
            required_signatures=2,
            notary_required=True,
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def add_signature(
        self,
        tx_id: str,
        signer: str | None,
        signature: str | None,
        public_key: str | None,
    ) -> TransactionRecord:
        """Append a signer approval.

        The status is recomputed from the signature count alone: it becomes
        ``ready_for_notary`` once the threshold is reached.

        Raises:
            ValidationError: On a missing signer, signature or public key.
            NotFoundError: Unknown id.
            AlreadyCompletedError: The record is completed.
            DuplicateSignerError: The signer already signed.
        """
        with self._track("sign"):
            _require(signer=signer, signature=signature, publicKey=public_key)
            with self._store.lock(tx_id):
                record = self._load_mutable(tx_id)
                if record.has_signer(signer):
                    raise DuplicateSignerError(signer)
                record.signatures.append(
                    SignatureEntry(
                        signer=signer,
                        signature=signature,
                        public_key=public_key,
                        timestamp=self._clock(),
                    )
                )
                record.status = (
                    TransactionStatus.READY_FOR_NOTARY
                    if record.has_enough_signatures
                    else TransactionStatus.PENDING
                )

        logger.info(
            "Signer %s signed transaction %s (%d/%d)",
            signer,
            tx_id,
            record.signatures_count,
            record.required_signatures,
        )
        self._publish_counts()
        return record

    def add_notary_signature(
        self,
        tx_id: str,
        notary: str | None,
        signature: str | None,
        public_key: str | None,
    ) -> TransactionRecord:
        """Record the notary's signature and move to ``ready_for_completion``.

        A second notary signature replaces the first.

        Raises:
            ValidationError: On a missing notary, signature or public key.
            NotFoundError: Unknown id.
            AlreadyCompletedError: The record is completed.
            NotaryNotRequiredError: The record has no notary gate.
            InsufficientSignaturesError: The signer threshold is not met yet.
        """
        with self._track("notarize"):
            _require(notary=notary, signature=signature, publicKey=public_key)
            with self._store.lock(tx_id):
                record = self._load_mutable(tx_id)
                if not record.notary_required:
                    raise NotaryNotRequiredError
                if not record.has_enough_signatures:
                    raise InsufficientSignaturesError(
                        record.signatures_count, record.required_signatures
                    )
                if record.notary_signature is not None:
                    logger.warning(
                        "Replacing notary signature on %s (was %s, now %s)",
                        tx_id,
                        record.notary_signature.notary,
                        notary,
                    )
                record.notary_signature = NotarySignature(
                    notary=notary,
                    signature=signature,
                    public_key=public_key,
                    timestamp=self._clock(),
                )
                record.status = TransactionStatus.READY_FOR_COMPLETION

        logger.info("Notary %s signed transaction %s", notary, tx_id)
        self._publish_counts()
        return record

    def complete(self, tx_id: str) -> TransactionRecord:
        """Move a fully approved transaction to its terminal state.

        Raises:
            NotFoundError: Unknown id.
            AlreadyCompletedError: The record is completed.
            InsufficientSignaturesError: The signer threshold is not met.
            MissingNotaryError: A notary is required but has not signed.
        """
        with self._track("complete"), self._store.lock(tx_id):
            record = self._load_mutable(tx_id)
            if not record.has_enough_signatures:
                raise InsufficientSignaturesError(
                    record.signatures_count, record.required_signatures
                )
            if record.notary_required and record.notary_signature is None:
                raise MissingNotaryError
            record.completed = True
            record.status = TransactionStatus.COMPLETED
            record.completed_at = self._clock()

        logger.info("Completed transaction %s", tx_id)
        self._publish_counts()
        return record

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, tx_id: str) -> TransactionRecord:
        """Return the record for *tx_id*.

        Raises:
            NotFoundError: Unknown id.
        """
        return self._load(tx_id)

    def list(self) -> list[TransactionRecord]:
        """All records in insertion order."""
        return self._store.values()

    def status(self, tx_id: str) -> StatusView:
        """Status projection of one record.

        Raises:
            NotFoundError: Unknown id.
        """
        return StatusView.from_record(self._load(tx_id))

    def stats(self) -> LedgerStats:
        """Counts of all, pending, completed and notarized records."""
        records = self._store.values()
        return LedgerStats(
            total=len(records),
            pending=sum(1 for r in records if r.status == TransactionStatus.PENDING),
            completed=sum(1 for r in records if r.completed),
            notarized=sum(1 for r in records if r.notary_signature is not None),
        )

    # ------------------------------------------------------------------
    # Placeholders
    # ------------------------------------------------------------------

    def generate_placeholder_signature(self) -> str:
        """Opaque 32-byte hex string usable as a demo signature."""
        return self._generator.hex_string(32)

    def generate_placeholder_key(self) -> str:
        """Opaque 32-byte hex string usable as a demo public key."""
        return self._generator.hex_string(32)
