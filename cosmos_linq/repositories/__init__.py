"""Repositories over Cosmos containers."""

from cosmos_linq.repositories.crud import CosmosCrudRepository
from cosmos_linq.repositories.linq import CosmosLinqRepository, ModelQuery

__all__ = ["CosmosCrudRepository", "CosmosLinqRepository", "ModelQuery"]
