"""Tests for the health route and app error mapping."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

from inspection_ledger.app import create_app


def test_health_with_in_memory_store(client) -> None:
    """The in-memory store is always healthy."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_lifespan_connects_and_closes_cosmos(settings) -> None:
    """Without an injected store the app connects to Cosmos DB and closes it on shutdown."""
    container = MagicMock()
    container.read = AsyncMock(side_effect=RuntimeError("unreachable"))
    cosmos = SimpleNamespace(container=container, close=AsyncMock())

    with patch("inspection_ledger.app.init_database", new=AsyncMock(return_value=cosmos)):
        app = create_app(settings)
        with TestClient(app) as test_client:
            assert app.state.cosmos is cosmos
            response = test_client.get("/health")

    assert response.status_code == 503
    assert response.json()["checks"]["store"] == "unhealthy"
    cosmos.close.assert_awaited_once()
