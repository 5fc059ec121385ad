"""Transaction endpoints.

Create, sign, notarize, complete, get, list and status.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from zkbank.api.dependencies import get_ledger
from zkbank.api.routes.schemas import (
    CreatedTransactionEnvelope,
    CreateTransactionRequest,
    NotarizeRequest,
    NotarySignatureResponse,
    SignatureResponse,
    SignRequest,
    StatusResponse,
    TransactionEnvelope,
    TransactionListResponse,
    TransactionResponse,
)
from zkbank.ledger.models import TransactionRecord  # noqa: TC001
from zkbank.ledger.service import TransactionLedger  # noqa: TC001

router = APIRouter(tags=["transaction"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def tx_resp(t: TransactionRecord) -> TransactionResponse:
    notary = t.notary_signature
    return TransactionResponse(
        id=t.id,
        initiator=t.initiator,
        counterparty=t.counterparty,
        amount=t.amount,
        timestamp=t.timestamp,
        required_signatures=t.required_signatures,
        notary_required=t.notary_required,
        zkp_proof=t.zkp_proof,
        tx_data=t.tx_data,
        signatures=[
            SignatureResponse(
                signer=s.signer,
                signature=s.signature,
                public_key=s.public_key,
                timestamp=s.timestamp,
            )
            for s in t.signatures
        ],
        notary_signature=(
            NotarySignatureResponse(
                notary=notary.notary,
                signature=notary.signature,
                public_key=notary.public_key,
                timestamp=notary.timestamp,
            )
            if notary is not None
            else None
        ),
        completed=t.completed,
        status=t.status,
        created_at=t.created_at,
        completed_at=t.completed_at,
        progress=t.progress,
        can_complete=t.can_complete,
    )


def _envelope(t: TransactionRecord, message: str) -> dict:
    return TransactionEnvelope(transaction=tx_resp(t), message=message).model_dump(
        mode="json", by_alias=True
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/transactions/create", status_code=201)
async def create_transaction(
    ledger: Annotated[TransactionLedger, Depends(get_ledger)],
    body: CreateTransactionRequest,
) -> dict:
    """Create a new pending transaction."""
    record = ledger.create(
        body.initiator,
        body.counterparty,
        body.amount,
        required_signatures=body.required_signatures,
        notary_required=body.notary_required,
        zkp_proof=body.zkp_proof,
        tx_data=body.tx_data,
    )
    return CreatedTransactionEnvelope(
        transaction_id=record.id,
        transaction=tx_resp(record),
        message="Transaction created successfully",
    ).model_dump(mode="json", by_alias=True)


@router.post("/transactions/{tx_id}/sign")
async def sign_transaction(
    tx_id: str,
    ledger: Annotated[TransactionLedger, Depends(get_ledger)],
    body: SignRequest,
) -> dict:
    """Add a signer's signature."""
    record = ledger.add_signature(tx_id, body.signer, body.signature, body.public_key)
    return _envelope(record, "Signature added successfully")


@router.post("/transactions/{tx_id}/notarize")
async def notarize_transaction(
    tx_id: str,
    ledger: Annotated[TransactionLedger, Depends(get_ledger)],
    body: NotarizeRequest,
) -> dict:
    """Add the notary's signature."""
    record = ledger.add_notary_signature(tx_id, body.notary, body.signature, body.public_key)
    return _envelope(record, "Notary signature added successfully")


@router.post("/transactions/{tx_id}/complete")
async def complete_transaction(
    tx_id: str,
    ledger: Annotated[TransactionLedger, Depends(get_ledger)],
) -> dict:
    """Complete a fully signed (and notarized, if required) transaction."""
    record = ledger.complete(tx_id)
    return _envelope(record, "Transaction completed successfully")


@router.get("/transactions")
async def list_transactions(
    ledger: Annotated[TransactionLedger, Depends(get_ledger)],
) -> dict:
    """List all transactions."""
    records = ledger.list()
    return TransactionListResponse(
        transactions=[tx_resp(r) for r in records],
        count=len(records),
    ).model_dump(mode="json", by_alias=True)


@router.get("/transactions/{tx_id}")
async def get_transaction(
    tx_id: str,
    ledger: Annotated[TransactionLedger, Depends(get_ledger)],
) -> dict:
    """Get a transaction by ID."""
    record = ledger.get(tx_id)
    return TransactionEnvelope(transaction=tx_resp(record)).model_dump(
        mode="json", by_alias=True, exclude={"message"}
    )


@router.get("/transactions/{tx_id}/status")
async def get_transaction_status(
    tx_id: str,
    ledger: Annotated[TransactionLedger, Depends(get_ledger)],
) -> dict:
    """Get the status projection of a transaction."""
    view = ledger.status(tx_id)
    return StatusResponse(
        status=view.status,
        completed=view.completed,
        signatures_count=view.signatures_count,
        required_signatures=view.required_signatures,
        has_notary_signature=view.has_notary_signature,
    ).model_dump(mode="json", by_alias=True)
