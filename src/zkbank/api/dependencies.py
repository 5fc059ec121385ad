"""FastAPI dependency injection helpers.

Provides ``Depends()``-compatible callables for engine and ledger access
in route handlers.

Usage in a route::

    @router.get("/transactions")
    async def list_transactions(
        ledger: Annotated[TransactionLedger, Depends(get_ledger)],
    ) -> ...:
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from zkbank.engine.client import ZkBankEngine  # noqa: TC001
from zkbank.errors.definitions import InternalError
from zkbank.ledger.service import TransactionLedger  # noqa: TC001


def get_engine(request: Request) -> ZkBankEngine:
    """Retrieve the engine from ``app.state``.

    The engine is stored on ``app.state.engine`` during lifespan startup.

    Raises:
        InternalError: If the engine is not initialized (should never happen
        after startup).
    """
    engine: ZkBankEngine | None = getattr(request.app.state, "engine", None)
    if engine is None or not engine.is_initialized:
        msg = "engine not initialized"
        raise InternalError(msg)
    return engine


def get_ledger(engine: Annotated[ZkBankEngine, Depends(get_engine)]) -> TransactionLedger:
    """Dependency returning the engine's transaction ledger."""
    return engine.ledger
