"""
CosmosDocumentStore — Cosmos DB NoSQL implementation of DocumentStore.

Wraps the Cosmos SDK's synchronous client with asyncio.to_thread() for
non-blocking access. Cancelling an awaiting task does not stop a call that
is already running in its worker thread; the write may still commit.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator

from azure.cosmos import ContainerProxy, CosmosClient
from azure.cosmos.exceptions import CosmosResourceNotFoundError
from azure.cosmos.partition_key import NonePartitionKeyValue

from cosmos_linq.config import RepositoryOptions
from cosmos_linq.cosmos_helpers import (
    account_identity,
    close_cosmos_client,
    create_container_status,
    create_cosmos_client,
    create_database_status,
)
from cosmos_linq.models import NO_PARTITION_KEY

logger = logging.getLogger("cosmos_linq.cosmos")


def _next_page(pages) -> list[dict[str, Any]] | None:
    """Fetch the next result page (blocking), or None when exhausted."""
    try:
        return list(next(pages))
    except StopIteration:
        return None


class CosmosContainerHandle:
    """ContainerHandle over a ContainerProxy."""

    def __init__(self, container: ContainerProxy):
        self._container = container

    async def create_item(self, item: dict[str, Any]) -> dict[str, Any]:
        return await asyncio.to_thread(self._container.create_item, body=item)

    async def replace_item(self, item_id: str, item: dict[str, Any]) -> dict[str, Any]:
        return await asyncio.to_thread(self._container.replace_item, item=item_id, body=item)

    async def delete_item(self, item_id: str, partition_key: Any) -> None:
        if partition_key is NO_PARTITION_KEY:
            partition_key = NonePartitionKeyValue
        await asyncio.to_thread(
            self._container.delete_item, item=item_id, partition_key=partition_key
        )

    async def query_items(
        self,
        query: str | None = None,
        parameters: list[dict[str, Any]] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        q = query or "SELECT * FROM c"
        kwargs: dict = {"query": q, "enable_cross_partition_query": True}
        if parameters:
            kwargs["parameters"] = parameters
        paged = await asyncio.to_thread(lambda: self._container.query_items(**kwargs))
        pages = paged.by_page()
        while True:
            page = await asyncio.to_thread(_next_page, pages)
            if page is None:
                return
            for item in page:
                yield item


class CosmosDocumentStore:
    """Cosmos NoSQL implementation of DocumentStore."""

    def __init__(self, client: CosmosClient, identity: str):
        self._client = client
        self._identity = identity

    @classmethod
    def from_options(cls, options: RepositoryOptions) -> "CosmosDocumentStore":
        return cls(create_cosmos_client(options), account_identity(options))

    @property
    def identity(self) -> str:
        return self._identity

    async def ensure_database(self, database_id: str) -> int:
        return await asyncio.to_thread(create_database_status, self._client, database_id)

    async def ensure_container(
        self,
        database_id: str,
        container_id: str,
        partition_key_path: str,
        indexing_policy: dict[str, Any],
    ) -> int:
        database = self._client.get_database_client(database_id)
        return await asyncio.to_thread(
            create_container_status, database, container_id, partition_key_path, indexing_policy,
        )

    def get_container(self, database_id: str, container_id: str) -> CosmosContainerHandle:
        container = self._client.get_database_client(database_id).get_container_client(container_id)
        return CosmosContainerHandle(container)

    async def delete_database(self, database_id: str) -> None:
        try:
            await asyncio.to_thread(self._client.delete_database, database_id)
        except CosmosResourceNotFoundError:
            logger.debug("Database %s already absent, nothing to drop", database_id)
            return
        logger.info("Dropped database %s", database_id)

    async def close(self) -> None:
        await asyncio.to_thread(close_cosmos_client, self._client)
        logger.info("Closed Cosmos client for %s", self._identity)
