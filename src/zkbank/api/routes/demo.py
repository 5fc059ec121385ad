"""Demo helpers: sample transaction, placeholder values and dashboard stats."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from zkbank.api.dependencies import get_ledger
from zkbank.api.routes.schemas import (
    CreatedTransactionEnvelope,
    PlaceholderResponse,
    StatsResponse,
)
from zkbank.api.routes.transactions import tx_resp
from zkbank.ledger.service import TransactionLedger  # noqa: TC001

router = APIRouter(tags=["demo"])


@router.post("/demo/create-sample")
async def create_sample_transaction(
    ledger: Annotated[TransactionLedger, Depends(get_ledger)],
) -> dict:
    """Create a sample transaction between two fixed demo parties."""
    record = ledger.create_sample()
    return CreatedTransactionEnvelope(
        transaction_id=record.id,
        transaction=tx_resp(record),
        message="Sample transaction created for demo",
    ).model_dump(mode="json", by_alias=True)


@router.get("/demo/placeholders")
async def placeholders(
    ledger: Annotated[TransactionLedger, Depends(get_ledger)],
) -> dict:
    """Fresh placeholder signature and public key for the signing forms."""
    return PlaceholderResponse(
        signature=ledger.generate_placeholder_signature(),
        public_key=ledger.generate_placeholder_key(),
    ).model_dump(mode="json", by_alias=True)


@router.get("/stats")
async def stats(
    ledger: Annotated[TransactionLedger, Depends(get_ledger)],
) -> dict:
    """Dashboard counters."""
    s = ledger.stats()
    return StatsResponse(
        total=s.total,
        pending=s.pending,
        completed=s.completed,
        notarized=s.notarized,
    ).model_dump(mode="json", by_alias=True)
