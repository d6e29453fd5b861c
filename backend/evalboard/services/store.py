"""Shared plumbing for the Cosmos DB container services."""

from __future__ import annotations

import logging
from typing import Any

from azure.cosmos.aio import CosmosClient

from evalboard.core.config import Settings

logger = logging.getLogger(__name__)


class StoreNotConfiguredError(Exception):
    pass


class CosmosContainerService:
    """Lazily connected client for a single container.

    Until ``initialize`` succeeds, reads come back empty and writes raise
    ``StoreNotConfiguredError``.
    """

    container_setting: str = ""

    def __init__(self) -> None:
        self.client: CosmosClient | None = None
        self.container: Any = None
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        endpoint = settings.COSMOS_DB_ENDPOINT
        key = settings.COSMOS_DB_KEY
        container_name = getattr(settings, self.container_setting)

        if not endpoint or not key:
            logger.warning("Cosmos DB credentials missing, %s not initialized", type(self).__name__)
            return

        self.client = CosmosClient(endpoint, key)
        db = self.client.get_database_client(settings.COSMOS_DB_DATABASE)
        self.container = db.get_container_client(container_name)
        self.initialized = True
        logger.info("%s initialized (container=%s)", type(self).__name__, container_name)

    async def close(self) -> None:
        if self.client:
            await self.client.close()
            self.client = None
            self.container = None
            self.initialized = False

    def _require_container(self) -> Any:
        if not self.container:
            raise StoreNotConfiguredError(f"{type(self).__name__} not initialized")
        return self.container

    async def _query(self, query: str, parameters: list[dict[str, Any]] | None = None) -> list[dict[str, Any]]:
        if not self.container:
            return []

        items: list[dict[str, Any]] = []
        async for item in self.container.query_items(
            query=query,
            parameters=parameters or [],
            enable_cross_partition_query=True,
        ):
            items.append(item)
        return items

    async def _read_raw(self, item_id: str) -> dict[str, Any] | None:
        items = await self._query(
            "SELECT * FROM c WHERE c.id = @id",
            [{"name": "@id", "value": item_id}],
        )
        return items[0] if items else None

    async def check_connection(self) -> bool:
        if not self.container:
            return False
        try:
            async for _ in self.container.query_items(
                query="SELECT VALUE COUNT(1) FROM c",
                enable_cross_partition_query=True,
            ):
                return True
            return True
        except Exception:
            logger.exception("Cosmos DB connection check failed")
            return False
