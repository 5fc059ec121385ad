"""Ledger record models.

Plain data classes for transaction records and their signatures. The API
layer maps these onto camelCase Pydantic schemas.
"""

from __future__ import annotations

import dataclasses
import enum
from datetime import datetime  # noqa: TC003


class TransactionStatus(enum.StrEnum):
    """Lifecycle states of a transaction record."""

    PENDING = "pending"
    READY_FOR_NOTARY = "ready_for_notary"
    READY_FOR_COMPLETION = "ready_for_completion"
    COMPLETED = "completed"


@dataclasses.dataclass(frozen=True)
class SignatureEntry:
    """One signer approval."""

    signer: str
    signature: str
    public_key: str
    timestamp: datetime


@dataclasses.dataclass(frozen=True)
class NotarySignature:
    """The notary's approval."""

    notary: str
    signature: str
    public_key: str
    timestamp: datetime


@dataclasses.dataclass
class TransactionRecord:
    """A transaction tracked by the ledger.

    Identity and terms (``id`` through ``tx_data``) never change after
    creation. ``signatures`` is append-only and unique by signer; the
    record is frozen once ``completed`` is set.
    """

    id: str
    initiator: str
    counterparty: str
    amount: int
    required_signatures: int
    notary_required: bool
    zkp_proof: str
    tx_data: str
    created_at: datetime
    signatures: list[SignatureEntry] = dataclasses.field(default_factory=list)
    notary_signature: NotarySignature | None = None
    completed: bool = False
    status: TransactionStatus = TransactionStatus.PENDING
    completed_at: datetime | None = None

    @property
    def timestamp(self) -> int:
        """Creation time in epoch milliseconds."""
        return int(self.created_at.timestamp() * 1000)

    @property
    def signatures_count(self) -> int:
        return len(self.signatures)

    @property
    def has_enough_signatures(self) -> bool:
        return len(self.signatures) >= self.required_signatures

    @property
    def notary_satisfied(self) -> bool:
        """True when the notary gate is passed or absent."""
        return not self.notary_required or self.notary_signature is not None

    @property
    def can_complete(self) -> bool:
        return not self.completed and self.has_enough_signatures and self.notary_satisfied

    @property
    def progress(self) -> int:
        """Workflow progress in percent.

        Signatures account for half, the notary gate and completion for a
        quarter each.
        """
        value = len(self.signatures) / self.required_signatures * 50
        if self.notary_satisfied:
            value += 25
        if self.completed:
            value += 25
        return min(int(value), 100)

    def has_signer(self, signer: str) -> bool:
        return any(s.signer == signer for s in self.signatures)


@dataclasses.dataclass(frozen=True)
class StatusView:
    """Read-only status projection of a record."""

    status: TransactionStatus
    completed: bool
    signatures_count: int
    required_signatures: int
    has_notary_signature: bool

    @classmethod
    def from_record(cls, record: TransactionRecord) -> StatusView:
        return cls(
            status=record.status,
            completed=record.completed,
            signatures_count=len(record.signatures),
            required_signatures=record.required_signatures,
            has_notary_signature=record.notary_signature is not None,
        )


@dataclasses.dataclass(frozen=True)
class LedgerStats:
    """Aggregate counts over all records."""

    total: int = 0
    pending: int = 0
    completed: int = 0
    notarized: int = 0
