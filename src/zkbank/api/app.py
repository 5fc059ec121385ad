"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from zkbank import __version__
from zkbank.api.middleware.cors import setup_cors
from zkbank.api.routes import api_router
from zkbank.api.routes.schemas import HealthResponse
from zkbank.config.settings import AppConfig
from zkbank.engine.client import ZkBankEngine
from zkbank.errors.definitions import InternalError, ValidationError
from zkbank.errors.zk_errors import ZkBankError
from zkbank.metrics.collector import LedgerMetrics
from zkbank.metrics.middleware import PrometheusMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from zkbank.ledger.generators import PlaceholderGenerator
    from zkbank.ledger.store import TransactionStore

logger = logging.getLogger(__name__)


def _error_response(err: ZkBankError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle hooks.

    Builds the engine (store, ledger) on startup and releases it on exit.
    """
    engine = ZkBankEngine(
        app.state.config,
        store=app.state.store,
        generator=app.state.generator,
        metrics=app.state.metrics,
    )
    try:
        await engine.initialize()
        app.state.engine = engine
        logger.info("zkBank engine initialized")
        yield
    finally:
        await engine.close()
        app.state.engine = None
        logger.info("zkBank engine shut down")


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ZkBankError)
    async def _zkbank_error_handler(request: Request, exc: ZkBankError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
            return _error_response(InternalError())
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        if errors:
            first = errors[0]
            where = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{where}: {first.get('msg', 'invalid value')}" if where else first["msg"]
        else:
            message = "invalid request"
        return _error_response(ValidationError(message))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == 404:
            return _error_response(
                ZkBankError("endpoint not found", status_code=404, code="not-found")
            )
        return _error_response(
            ZkBankError(str(exc.detail), status_code=exc.status_code, code="http-error")
        )

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(InternalError())


def create_app(
    *,
    config: AppConfig | None = None,
    store: TransactionStore | None = None,
    generator: PlaceholderGenerator | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config: Optional AppConfig. If *None*, a default config is created
            from environment variables.
        store: Optional record store handed to the engine (tests inject one).
        generator: Optional identifier generator handed to the engine.
    """
    if config is None:
        config = AppConfig()

    app = FastAPI(
        title="py-zkbank",
        version=__version__,
        description="Multi-party transaction workflow with notary gate",
        lifespan=_lifespan,
    )

    # Store config and injected collaborators on app.state for lifespan access
    app.state.config = config
    app.state.store = store
    app.state.generator = generator
    app.state.metrics = LedgerMetrics() if config.metrics.enabled else None
    app.state.engine = None

    # -- Middleware --
    setup_cors(app)
    if app.state.metrics is not None:
        app.add_middleware(PrometheusMiddleware, registry=app.state.metrics.registry)

    # -- Error handlers --
    _register_error_handlers(app)

    # -- Base routes --
    @app.get("/api/health", tags=["base"])
    async def health() -> dict:
        engine = app.state.engine
        components = (
            await engine.health_check() if engine is not None else {"engine": "not_initialized"}
        )
        return HealthResponse(
            status="OK",
            components=components,
            timestamp=datetime.now(tz=UTC),
            network=config.ledger.network,
            version=__version__,
        ).model_dump(mode="json", by_alias=True)

    @app.get("/metrics", tags=["base"], include_in_schema=False)
    async def metrics_endpoint() -> Response:
        """Prometheus metrics endpoint."""
        registry = app.state.metrics.registry if app.state.metrics is not None else None
        body = generate_latest(registry) if registry else generate_latest()
        return Response(
            content=body,
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    # -- Mount API --
    app.include_router(api_router)

    return app
