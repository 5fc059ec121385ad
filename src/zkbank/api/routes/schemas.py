"""API request/response Pydantic schemas.

These are the *API-layer* schemas: thin wrappers that define the HTTP
contract. Field names are camelCase on the wire; requests also accept
snake_case. The route code maps ledger dataclasses onto these schemas.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - Pydantic needs this at runtime

from pydantic import BaseModel, ConfigDict, StrictInt
from pydantic.alias_generators import to_camel

from zkbank.ledger.models import TransactionStatus  # noqa: TC001


class CamelModel(BaseModel):
    """Base model serialising to camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateTransactionRequest(CamelModel):
    """POST /api/transactions/create.

    Required fields are optional here so the ledger reports every missing
    field with its own validation error.
    """

    initiator: str | None = None
    counterparty: str | None = None
    amount: StrictInt | str | None = None
    required_signatures: StrictInt | str | None = None
    notary_required: bool | None = None
    zkp_proof: str | None = None
    tx_data: str | None = None


class SignRequest(CamelModel):
    """POST /api/transactions/{id}/sign."""

    signer: str | None = None
    signature: str | None = None
    public_key: str | None = None


class NotarizeRequest(CamelModel):
    """POST /api/transactions/{id}/notarize."""

    notary: str | None = None
    signature: str | None = None
    public_key: str | None = None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class SignatureResponse(CamelModel):
    signer: str
    signature: str
    public_key: str
    timestamp: datetime


class NotarySignatureResponse(CamelModel):
    notary: str
    signature: str
    public_key: str
    timestamp: datetime


class TransactionResponse(CamelModel):
    """Serialised transaction record."""

    id: str
    initiator: str
    counterparty: str
    amount: int
    timestamp: int
    required_signatures: int
    notary_required: bool
    zkp_proof: str
    tx_data: str
    signatures: list[SignatureResponse]
    notary_signature: NotarySignatureResponse | None = None
    completed: bool
    status: TransactionStatus
    created_at: datetime
    completed_at: datetime | None = None
    progress: int
    can_complete: bool


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class TransactionEnvelope(CamelModel):
    """Single record plus a human-readable message."""

    success: bool = True
    transaction: TransactionResponse
    message: str | None = None


class CreatedTransactionEnvelope(TransactionEnvelope):
    transaction_id: str


class TransactionListResponse(CamelModel):
    success: bool = True
    transactions: list[TransactionResponse]
    count: int


class StatusResponse(CamelModel):
    success: bool = True
    status: TransactionStatus
    completed: bool
    signatures_count: int
    required_signatures: int
    has_notary_signature: bool


class StatsResponse(CamelModel):
    success: bool = True
    total: int
    pending: int
    completed: int
    notarized: int


class PlaceholderResponse(CamelModel):
    """Fresh demo signature and public key."""

    signature: str
    public_key: str


class HealthResponse(CamelModel):
    status: str
    components: dict[str, str]
    timestamp: datetime
    network: str
    version: str
