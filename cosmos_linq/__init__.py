"""
cosmos_linq — typed CRUD/LINQ-style repositories over Cosmos DB (NoSQL API).

    from cosmos_linq import CosmosCrudRepository, RepositoryOptions, get_document_store

    class Order(BaseModel):
        key: int = 0
        total: float = 0.0

    class OrderRepository(CosmosCrudRepository[Order]):
        pass

    options = RepositoryOptions.from_env()
    async with OrderRepository(options, get_document_store(options)) as repo:
        order = await repo.add_async(Order(total=12.5))
"""

from cosmos_linq.config import RepositoryOptions
from cosmos_linq.config_validator import ConfigValidationError, validate_options
from cosmos_linq.errors import ArgumentError, ProvisioningError, RepositoryError
from cosmos_linq.keys import encode_key, generate_random_key, is_key_missing
from cosmos_linq.models import NO_PARTITION_KEY, DocumentWrapper
from cosmos_linq.naming import derive_container_name
from cosmos_linq.provisioning import ProvisioningCache, default_provisioning_cache
from cosmos_linq.repositories import CosmosCrudRepository, CosmosLinqRepository, ModelQuery
from cosmos_linq.startup import StartupResult, use_cosmos_db
from cosmos_linq.stores import (
    ContainerHandle,
    DocumentStore,
    get_document_store,
    register_document_store,
)

__version__ = "0.1.0"

__all__ = [
    "ArgumentError",
    "ConfigValidationError",
    "ContainerHandle",
    "CosmosCrudRepository",
    "CosmosLinqRepository",
    "DocumentStore",
    "DocumentWrapper",
    "ModelQuery",
    "NO_PARTITION_KEY",
    "ProvisioningCache",
    "ProvisioningError",
    "RepositoryError",
    "RepositoryOptions",
    "StartupResult",
    "default_provisioning_cache",
    "derive_container_name",
    "encode_key",
    "generate_random_key",
    "get_document_store",
    "is_key_missing",
    "register_document_store",
    "use_cosmos_db",
    "validate_options",
]
