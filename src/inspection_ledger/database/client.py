"""Async Cosmos DB client initialization."""

from __future__ import annotations

import logging

from azure.cosmos import PartitionKey
from azure.cosmos.aio import ContainerProxy, DatabaseProxy
from azure.cosmos.aio import CosmosClient as AzureCosmosClient

from inspection_ledger.config import CosmosConfig

logger = logging.getLogger(__name__)

PARTITION_KEY_PATH = "/_pk"


class CosmosClient:
    """Manages the async Cosmos DB client, database and ledger container."""

    def __init__(self, config: CosmosConfig) -> None:
        self._config = config
        self._client: AzureCosmosClient | None = None
        self._database: DatabaseProxy | None = None
        self._container: ContainerProxy | None = None

    async def initialize(self, *, create_if_missing: bool = False) -> None:
        """Create the client and obtain database and container references.

        With ``create_if_missing`` the database and container are provisioned,
        which is what local emulator setups need on first run.
        """
        self._client = AzureCosmosClient(self._config.endpoint, credential=self._config.key)
        if create_if_missing:
            self._database = await self._client.create_database_if_not_exists(
                self._config.database
            )
            self._container = await self._database.create_container_if_not_exists(
                id=self._config.container,
                partition_key=PartitionKey(path=PARTITION_KEY_PATH),
            )
            logger.info(
                "Provisioned Cosmos container %s/%s", self._config.database, self._config.container
            )
        else:
            self._database = self._client.get_database_client(self._config.database)
            self._container = self._database.get_container_client(self._config.container)

    async def close(self) -> None:
        """Close the underlying client."""
        if self._client:
            await self._client.close()
            self._client = None
            self._database = None
            self._container = None

    @property
    def database(self) -> DatabaseProxy:
        if self._database is None:
            raise RuntimeError("CosmosClient not initialized — call initialize() first")
        return self._database

    @property
    def container(self) -> ContainerProxy:
        if self._container is None:
            raise RuntimeError("CosmosClient not initialized — call initialize() first")
        return self._container
