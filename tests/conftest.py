"""Shared fixtures: an in-memory store seeded with one inspection, and API clients."""

from __future__ import annotations

import asyncio

import pytest
from factories import make_inspection, seed
from fastapi.testclient import TestClient

from inspection_ledger.app import create_app
from inspection_ledger.auth.middleware import current_user_id
from inspection_ledger.config import AppConfig, CosmosConfig, Settings
from inspection_ledger.database.memory import InMemoryDocumentStore
from inspection_ledger.models.inspection import Inspection


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
async def inspection(store: InMemoryDocumentStore) -> Inspection:
    return await seed(store, make_inspection())


@pytest.fixture
def api_store() -> InMemoryDocumentStore:
    store = InMemoryDocumentStore()
    asyncio.run(seed(store, make_inspection()))
    return store


@pytest.fixture
def settings() -> Settings:
    return Settings(
        cosmos=CosmosConfig(endpoint="", key=""),
        app=AppConfig(env="test", secret_key="test-secret", log_level="WARNING"),
    )


@pytest.fixture
def client(api_store, settings):
    app = create_app(settings, store=api_store)
    app.dependency_overrides[current_user_id] = lambda: "manager-1"
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def anonymous_client(api_store, settings):
    app = create_app(settings, store=api_store)
    with TestClient(app) as test_client:
        yield test_client
