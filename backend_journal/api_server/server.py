"""
FastAPI server — trade journal API.

create_app() wires the routers, the error-to-status mapping and the lifespan
that builds Settings, Database and TokenService once per process. Tests pass
their own Settings and Database instead.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from backend_journal.api_server.trades import router as trades_router
from backend_journal.api_server.users import router as users_router
from backend_journal.auth import TokenService
from backend_journal.config import Settings, get_settings
from backend_journal.core.exceptions import JournalError, StorageFault
from backend_journal.database import Database, get_database
from backend_journal.journal_logging import get_logger

logger = get_logger(__name__)


def _install_state(app: FastAPI, settings: Settings, database: Database | None) -> None:
    app.state.settings = settings
    app.state.db = database if database is not None else get_database(settings.database_url)
    app.state.tokens = TokenService(settings.jwt_secret, ttl_hours=settings.jwt_ttl_hours)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build settings, storage and token service unless already injected; dispose storage on shutdown."""
    if getattr(app.state, "db", None) is None:
        _install_state(app, get_settings(), None)
        logger.info("api_state_initialized")
    yield
    app.state.db.dispose()
    logger.info("api_storage_disposed")


def journal_error_handler(request: Request, exc: JournalError) -> JSONResponse:
    """Map domain errors to status codes; storage faults get a generic message."""
    if isinstance(exc, StorageFault):
        logger.error("api_storage_fault", path=request.url.path, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": "internal storage error"})
    logger.info(
        "api_request_rejected",
        path=request.url.path,
        code=exc.code,
        status_code=exc.status_code,
        detail=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    app = FastAPI(
        title="Backend Trade Journal API",
        description="Trade ledger with profit/loss, cumulative fee and slippage analytics.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.db = None
    if settings is not None:
        _install_state(app, settings, database)

    app.include_router(users_router)
    app.include_router(trades_router)
    app.add_exception_handler(JournalError, journal_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness probe: API is up."""
        return {"status": "ok"}

    return app


app = create_app()
