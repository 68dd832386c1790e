"""Health route — reports whether the document store is reachable."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["status"])


@router.get("/health")
async def health(request: Request) -> JSONResponse:
    """Probe Cosmos DB when configured; the in-memory store is always healthy."""
    cosmos = getattr(request.app.state, "cosmos", None)
    checks = {"store": "healthy"}
    if cosmos is not None:
        try:
            await cosmos.container.read()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Cosmos health probe failed: %s", exc)
            checks["store"] = "unhealthy"

    healthy = all(value == "healthy" for value in checks.values())
    return JSONResponse(
        {"status": "ok" if healthy else "degraded", "checks": checks},
        status_code=200 if healthy else 503,
    )
