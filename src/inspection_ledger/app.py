"""FastAPI application factory and process entry point."""

from __future__ import annotations

import logging
import secrets
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from inspection_ledger.config import Settings, load_settings
from inspection_ledger.database.client import CosmosClient
from inspection_ledger.database.cosmos import CosmosDocumentStore
from inspection_ledger.errors import (
    InvalidArgumentError,
    LedgerError,
    MalformedDocumentError,
    NotFoundError,
    PermissionDeniedError,
    UnavailableError,
)
from inspection_ledger.logging import configure_logging
from inspection_ledger.routes import releases, versions
from inspection_ledger.routes import status as status_routes

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from inspection_ledger.database.store import DocumentStore

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[LedgerError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    UnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    InvalidArgumentError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    MalformedDocumentError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def init_database(settings: Settings) -> CosmosClient:
    """Connect to Cosmos DB, provisioning the container in development."""
    cosmos = CosmosClient(settings.cosmos)
    await cosmos.initialize(create_if_missing=settings.app.is_development)
    return cosmos


async def _ledger_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    code = _ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.warning("Request failed: %s", exc)
    return JSONResponse({"detail": str(exc)}, status_code=code)


def create_app(settings: Settings | None = None, *, store: DocumentStore | None = None) -> FastAPI:
    """Build the API. Passing ``store`` skips Cosmos DB entirely."""
    settings = settings or load_settings()
    configure_logging(settings.app.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.settings = settings
        app.state.cosmos = None
        if store is not None:
            app.state.store = store
        else:
            cosmos = await init_database(settings)
            app.state.cosmos = cosmos
            app.state.store = CosmosDocumentStore(
                cosmos.container, poll_seconds=settings.app.poll_seconds
            )
        logger.info("Inspection ledger API started (env=%s)", settings.app.env)
        try:
            yield
        finally:
            if app.state.cosmos is not None:
                await app.state.cosmos.close()
            logger.info("Inspection ledger API stopped")

    app = FastAPI(title="Inspection Ledger", lifespan=lifespan)

    secret_key = settings.app.secret_key
    if not secret_key:
        if not settings.app.is_development:
            raise RuntimeError("APP_SECRET_KEY must be set outside development")
        secret_key = secrets.token_urlsafe(32)
    app.add_middleware(SessionMiddleware, secret_key=secret_key)
    app.add_exception_handler(LedgerError, _ledger_error_handler)

    app.include_router(versions.router)
    app.include_router(releases.router)
    app.include_router(status_routes.router)
    return app


def main() -> None:
    """Run the API with uvicorn."""
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)  # noqa: S104


if __name__ == "__main__":
    main()
