"""
MockDocumentStore — in-memory document store for testing.

Behaves like a Cosmos account closely enough for repository tests:
create conflicts on an existing id (409), replace/delete on a missing id
fail (404), and delete checks the partition key value against the path
the container was created with. Every call is recorded so tests can
assert on exactly what reached the store.
"""

from __future__ import annotations

import asyncio
import copy
import time
import uuid
from collections import Counter
from typing import Any, AsyncIterator

from cosmos_linq.config import RepositoryOptions
from cosmos_linq.models import partition_key_value


class MockStoreError(Exception):
    """Store-level failure raised by the in-memory store."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(f"({status_code}) {message}")


class MockContainerHandle:
    """ContainerHandle backed by a dict in the owning MockDocumentStore."""

    def __init__(self, store: "MockDocumentStore", database_id: str, container_id: str):
        self._store = store
        self.database_id = database_id
        self.container_id = container_id

    @property
    def _items(self) -> dict[str, dict[str, Any]]:
        return self._store._containers.setdefault((self.database_id, self.container_id), {})

    @property
    def _pk_path(self) -> str:
        return self._store.partition_key_paths.get((self.database_id, self.container_id), "/id")

    async def create_item(self, item: dict[str, Any]) -> dict[str, Any]:
        await self._store._enter("create_item", self.container_id, item.get("id"))
        if item["id"] in self._items:
            raise MockStoreError(409, f"Entity with the specified id already exists: {item['id']}")
        stored = self._stamp(item)
        self._items[item["id"]] = stored
        return copy.deepcopy(stored)

    async def replace_item(self, item_id: str, item: dict[str, Any]) -> dict[str, Any]:
        await self._store._enter("replace_item", self.container_id, item_id)
        if item_id not in self._items:
            raise MockStoreError(404, f"Entity with the specified id does not exist: {item_id}")
        if item.get("id") != item_id:
            raise MockStoreError(400, f"Body id {item.get('id')!r} does not match {item_id!r}")
        stored = self._stamp(item)
        self._items[item_id] = stored
        return copy.deepcopy(stored)

    async def delete_item(self, item_id: str, partition_key: Any) -> None:
        await self._store._enter("delete_item", self.container_id, item_id, partition_key)
        existing = self._items.get(item_id)
        if existing is None or partition_key_value(existing, self._pk_path) != partition_key:
            raise MockStoreError(404, f"Entity with the specified id does not exist: {item_id}")
        del self._items[item_id]

    async def query_items(
        self,
        query: str | None = None,
        parameters: list[dict[str, Any]] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        await self._store._enter("query_items", self.container_id, query)
        self._store.queries.append((query, parameters))
        for item in list(self._items.values()):
            yield copy.deepcopy(item)

    @staticmethod
    def _stamp(item: dict[str, Any]) -> dict[str, Any]:
        stored = copy.deepcopy(item)
        stored["_etag"] = f'"{uuid.uuid4()}"'
        stored["_ts"] = int(time.time())
        return stored


class MockDocumentStore:
    """In-memory DocumentStore for testing."""

    def __init__(
        self,
        identity: str = "mock://local",
        *,
        database_status: int | None = None,
        container_status: int | None = None,
        latency: float = 0.0,
    ):
        self._identity = identity
        self.database_status = database_status
        self.container_status = container_status
        self.latency = latency
        self.databases: set[str] = set()
        self.partition_key_paths: dict[tuple[str, str], str] = {}
        self.indexing_policies: dict[tuple[str, str], dict[str, Any]] = {}
        self._containers: dict[tuple[str, str], dict[str, dict[str, Any]]] = {}
        self._failures: dict[str, list[BaseException]] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.queries: list[tuple[str | None, Any]] = []
        self.close_calls = 0

    @classmethod
    def from_options(cls, options: RepositoryOptions) -> "MockDocumentStore":
        return cls(identity=options.endpoint or "mock://local")

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def call_counts(self) -> Counter:
        return Counter(call[0] for call in self.calls)

    def fail_next(self, operation: str, error: BaseException) -> None:
        """Make the next call to *operation* raise *error*."""
        self._failures.setdefault(operation, []).append(error)

    def items(self, database_id: str, container_id: str) -> dict[str, dict[str, Any]]:
        """Stored documents of a container, by id."""
        return self._containers.get((database_id, container_id), {})

    async def _enter(self, operation: str, *details: Any) -> None:
        self.calls.append((operation, *details))
        if self.latency:
            await asyncio.sleep(self.latency)
        pending = self._failures.get(operation)
        if pending:
            raise pending.pop(0)

    # -- DocumentStore ------------------------------------------------------

    async def ensure_database(self, database_id: str) -> int:
        await self._enter("ensure_database", database_id)
        if self.database_status is not None:
            return self.database_status
        if database_id in self.databases:
            return 200
        self.databases.add(database_id)
        return 201

    async def ensure_container(
        self,
        database_id: str,
        container_id: str,
        partition_key_path: str,
        indexing_policy: dict[str, Any],
    ) -> int:
        await self._enter("ensure_container", database_id, container_id, partition_key_path)
        if self.container_status is not None:
            return self.container_status
        key = (database_id, container_id)
        if key in self.partition_key_paths:
            return 200
        self.partition_key_paths[key] = partition_key_path
        self.indexing_policies[key] = dict(indexing_policy)
        self._containers.setdefault(key, {})
        return 201

    def get_container(self, database_id: str, container_id: str) -> MockContainerHandle:
        return MockContainerHandle(self, database_id, container_id)

    async def delete_database(self, database_id: str) -> None:
        await self._enter("delete_database", database_id)
        self.databases.discard(database_id)
        for key in [k for k in self._containers if k[0] == database_id]:
            self._containers.pop(key, None)
            self.partition_key_paths.pop(key, None)
            self.indexing_policies.pop(key, None)

    async def close(self) -> None:
        self.close_calls += 1
        self.calls.append(("close",))
        pending = self._failures.get("close")
        if pending:
            raise pending.pop(0)
