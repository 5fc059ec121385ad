"""REST API routes.

Combines all sub-routers under the ``/api`` prefix.
"""

from fastapi import APIRouter

from zkbank.api.routes.demo import router as demo_router
from zkbank.api.routes.transactions import router as transactions_router

api_router = APIRouter(prefix="/api")

api_router.include_router(transactions_router)
api_router.include_router(demo_router)

__all__ = ["api_router"]
