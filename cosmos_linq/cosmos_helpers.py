"""
Cosmos client helpers — client construction and idempotent resource creation.

Consolidates the SDK boilerplate the Cosmos store needs: picking an auth
mode from RepositoryOptions, turning "create if not exists" calls into
HTTP-style statuses, and closing clients.

All functions here are synchronous; CosmosDocumentStore runs them through
asyncio.to_thread().
"""

from __future__ import annotations

import logging
from typing import Any

from azure.cosmos import CosmosClient, DatabaseProxy, PartitionKey
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceExistsError

from cosmos_linq.config import RepositoryOptions, get_credential

logger = logging.getLogger("cosmos_linq.cosmos")

STATUS_OK = 200
STATUS_CREATED = 201


def _account_from_connection_string(connection_string: str) -> str:
    parts = dict(
        segment.split("=", 1)
        for segment in connection_string.split(";")
        if "=" in segment
    )
    return parts.get("AccountEndpoint", "")


def account_identity(options: RepositoryOptions) -> str:
    """Account endpoint the options point at (used to key provisioning state)."""
    if options.connection_string:
        return _account_from_connection_string(options.connection_string).rstrip("/")
    return options.endpoint.rstrip("/")


def create_cosmos_client(options: RepositoryOptions) -> CosmosClient:
    """Build a data-plane CosmosClient.

    Connection string wins; otherwise endpoint + account key, or endpoint +
    DefaultAzureCredential when no key is configured.
    """
    if options.connection_string:
        logger.info("Creating Cosmos client from connection string (%s)", account_identity(options))
        return CosmosClient.from_connection_string(
            options.connection_string, **options.client_options
        )
    if not options.endpoint:
        raise RuntimeError("Cosmos endpoint or connection string not configured")
    if options.key:
        logger.info("Creating Cosmos client for %s (key auth)", options.endpoint)
        return CosmosClient(url=options.endpoint, credential=options.key, **options.client_options)
    logger.info("Creating Cosmos client for %s (managed identity)", options.endpoint)
    return CosmosClient(url=options.endpoint, credential=get_credential(), **options.client_options)


def close_cosmos_client(client: CosmosClient) -> None:
    """Close a CosmosClient's transport."""
    close = getattr(client, "close", None)
    if callable(close):
        close()
    else:
        client.__exit__(None, None, None)


# ---------------------------------------------------------------------------
# Idempotent creation
# ---------------------------------------------------------------------------


def create_database_status(client: CosmosClient, database_id: str) -> int:
    """Create a database, mapping the outcome to an HTTP-style status.

    201 when created, 200 when it already existed, otherwise the status
    the service answered with.
    """
    try:
        client.create_database(id=database_id)
        logger.info("Created database %s", database_id)
        return STATUS_CREATED
    except CosmosResourceExistsError:
        logger.debug("Database %s already exists", database_id)
        return STATUS_OK
    except CosmosHttpResponseError as e:
        logger.warning("Database %s creation answered %s: %s", database_id, e.status_code, e.message)
        return e.status_code or 500


def create_container_status(
    database: DatabaseProxy,
    container_id: str,
    partition_key_path: str,
    indexing_policy: dict[str, Any],
) -> int:
    """Create a container, mapping the outcome to an HTTP-style status."""
    try:
        database.create_container(
            id=container_id,
            partition_key=PartitionKey(path=partition_key_path),
            indexing_policy=indexing_policy,
        )
        logger.info("Created container %s (pk=%s)", container_id, partition_key_path)
        return STATUS_CREATED
    except CosmosResourceExistsError:
        logger.debug("Container %s already exists", container_id)
        return STATUS_OK
    except CosmosHttpResponseError as e:
        logger.warning("Container %s creation answered %s: %s", container_id, e.status_code, e.message)
        return e.status_code or 500
