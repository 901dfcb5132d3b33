"""
DocumentStore — backend-agnostic document store client protocol.

Provides:
  - DocumentStore / ContainerHandle Protocols (abstract interface)
  - Registry + factory function (get_document_store)
  - Auto-registers CosmosDocumentStore and MockDocumentStore on import

Usage:
    from cosmos_linq.stores import get_document_store

    store = get_document_store(options)
    status = await store.ensure_database(options.database_id)
    container = store.get_container(options.database_id, "Orders")
    async for item in container.query_items("SELECT * FROM c"):
        ...
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Protocol, runtime_checkable

from cosmos_linq.config import RepositoryOptions
from cosmos_linq.config_validator import validate_options

# Statuses an "ensure" call may return when the resource is usable
STATUS_OK = 200
STATUS_CREATED = 201
STATUS_ACCEPTED = 202
SUCCESS_STATUSES = frozenset({STATUS_OK, STATUS_CREATED, STATUS_ACCEPTED})


@runtime_checkable
class ContainerHandle(Protocol):
    """Item-level operations on one container."""

    async def create_item(self, item: dict[str, Any]) -> dict[str, Any]:
        """Insert a new document; fails if the id already exists."""
        ...

    async def replace_item(self, item_id: str, item: dict[str, Any]) -> dict[str, Any]:
        """Replace the document addressed by item_id; fails if it does not exist."""
        ...

    async def delete_item(self, item_id: str, partition_key: Any) -> None:
        """Delete a document by ID + partition key value.

        partition_key is NO_PARTITION_KEY when the document has nothing at
        the container's partition key path.
        """
        ...

    def query_items(
        self,
        query: str | None = None,
        parameters: list[dict[str, Any]] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Lazily stream documents. If query is None, stream all.

        Args:
            query: Cosmos SQL query string (e.g. "SELECT * FROM c WHERE c.model.name = @name")
            parameters: Parameterized query values (e.g. [{"name": "@name", "value": "x"}]).
                        Always use parameters instead of f-string interpolation.
        """
        ...


@runtime_checkable
class DocumentStore(Protocol):
    """Account-level client: provisioning, container lookup, shutdown."""

    @property
    def identity(self) -> str:
        """Stable name for the account this client talks to (provisioning cache key)."""
        ...

    async def ensure_database(self, database_id: str) -> int:
        """Create the database if missing; return an HTTP-style status."""
        ...

    async def ensure_container(
        self,
        database_id: str,
        container_id: str,
        partition_key_path: str,
        indexing_policy: dict[str, Any],
    ) -> int:
        """Create the container if missing; return an HTTP-style status."""
        ...

    def get_container(self, database_id: str, container_id: str) -> ContainerHandle:
        """Return a handle for an existing container (no I/O)."""
        ...

    async def delete_database(self, database_id: str) -> None:
        """Drop a database and everything in it; a missing database is not an error."""
        ...

    async def close(self) -> None:
        """Release the underlying client connection."""
        ...


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_document_store_registry: dict[str, type] = {}


def register_document_store(name: str, cls: type) -> None:
    """Register a DocumentStore implementation by name."""
    _document_store_registry[name] = cls


def get_document_store(
    options: RepositoryOptions,
    *,
    backend_type: str | None = None,
) -> DocumentStore:
    """Factory that returns the appropriate DocumentStore implementation.

    Args:
        options: Connection settings.
        backend_type: Override store type. Defaults to 'cosmosdb-nosql'.
                      Must match a registered store name.

    Raises:
        ValueError: If backend_type is not registered.
        ConfigValidationError: If the options are unusable for that backend.
    """
    bt = backend_type or "cosmosdb-nosql"
    if bt not in _document_store_registry:
        raise ValueError(
            f"Unknown document store: {bt}. "
            f"Available: {list(_document_store_registry)}"
        )
    validate_options(options, backend_type=bt)
    return _document_store_registry[bt].from_options(options)


# ---------------------------------------------------------------------------
# Auto-register at module load
# ---------------------------------------------------------------------------

from .cosmos_nosql import CosmosDocumentStore  # noqa: E402
from .mock_store import MockDocumentStore  # noqa: E402

register_document_store("cosmosdb-nosql", CosmosDocumentStore)
register_document_store("mock", MockDocumentStore)
