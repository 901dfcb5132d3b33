"""
CosmosCrudRepository — typed create/update/delete over a Cosmos container.

Works with models keyed by ``key``, ``key1, key2`` or ``key1, key2, key3``.
Each model is stored inside a DocumentWrapper whose ``id`` is the encoded
key (see cosmos_linq.keys), so the same entity always lands on the same id.

Store failures surface as RepositoryError with the original exception
chained; provisioning failures and cancellation pass through untouched.
"""

from __future__ import annotations

import logging
from typing import Any

from cosmos_linq.config import RepositoryOptions
from cosmos_linq.errors import ArgumentError, RepositoryError
from cosmos_linq.keys import (
    document_id,
    generate_random_key,
    is_key_missing,
    key_fields_for,
    key_type_for,
    key_values,
)
from cosmos_linq.models import DocumentWrapper, ModelT, partition_key_value, wrapper_type
from cosmos_linq.provisioning import ProvisioningCache
from cosmos_linq.repositories.linq import CosmosLinqRepository
from cosmos_linq.stores import DocumentStore

logger = logging.getLogger("cosmos_linq.repositories")


class CosmosCrudRepository(CosmosLinqRepository[ModelT]):
    """CRUD repository for 1, 2 or 3-part keyed models."""

    def __init__(
        self,
        options: RepositoryOptions,
        store: DocumentStore,
        *,
        model_type: type[ModelT] | None = None,
        container_name: str | None = None,
        provisioning: ProvisioningCache | None = None,
        owns_store: bool = True,
    ):
        super().__init__(
            options,
            store,
            model_type=model_type,
            container_name=container_name,
            provisioning=provisioning,
            owns_store=owns_store,
        )
        self.key_fields = key_fields_for(self.model_type)
        if not self.key_fields:
            raise ArgumentError(
                "model_type",
                f"{self.model_type.__name__} declares no key fields "
                "(expected 'key', 'key1, key2' or 'key1, key2, key3')",
            )

    # -- public API ---------------------------------------------------------

    async def add_async(self, model: ModelT) -> ModelT:
        """Create a new document for *model* and return the stored model.

        A single-key model with a missing key (None, 0, "", nil UUID) gets a
        random one first. Multi-key models must arrive fully keyed.
        """
        self._check_model(model)
        container = await self._get_container()

        try:
            if len(self.key_fields) == 1 and is_key_missing(model.key):
                model = self._with_key(model, generate_random_key(key_type_for(self.model_type, "key")))

            wrapper = self._wrap(model)
            logger.debug("Add %s id=%s", self.container_name, wrapper.id)
            created = await container.create_item(wrapper.to_document())
            return self._unwrap(created)
        except Exception as e:
            raise self._failure("Add", model, e) from e

    async def update_async(self, model: ModelT) -> ModelT:
        """Replace the stored document for *model* and return the stored model."""
        self._check_model(model)
        self._check_keys(model)
        container = await self._get_container()

        wrapper = self._wrap(model)
        try:
            logger.debug("Update %s id=%s", self.container_name, wrapper.id)
            replaced = await container.replace_item(wrapper.id, wrapper.to_document())
            return self._unwrap(replaced)
        except Exception as e:
            raise self._failure("Update", model, e) from e

    async def delete_async(self, model: ModelT) -> None:
        """Delete the stored document for *model*."""
        self._check_model(model)
        self._check_keys(model)
        container = await self._get_container()

        wrapper = self._wrap(model)
        partition_key = partition_key_value(wrapper.to_document(), self.options.partition_key_path)
        try:
            logger.debug(
                "Delete %s id=%s partition_key=%r", self.container_name, wrapper.id, partition_key,
            )
            await container.delete_item(wrapper.id, partition_key)
        except Exception as e:
            raise self._failure("Delete", model, e) from e

    # -- helpers ------------------------------------------------------------

    def _check_model(self, model: Any) -> None:
        if model is None:
            raise ArgumentError("model")
        if not isinstance(model, self.model_type):
            raise ArgumentError(
                "model",
                f"expected {self.model_type.__name__}, got {type(model).__name__}",
            )

    def _check_keys(self, model: ModelT) -> None:
        missing = [
            name for name, value in zip(self.key_fields, key_values(model, self.key_fields))
            if value is None
        ]
        if missing:
            raise ArgumentError("model", f"key field(s) {', '.join(missing)} must be set")

    def _with_key(self, model: ModelT, key: Any) -> ModelT:
        if model.model_config.get("frozen"):
            return model.model_copy(update={"key": key})
        model.key = key
        return model

    def _wrap(self, model: ModelT) -> DocumentWrapper[ModelT]:
        return wrapper_type(self.model_type).wrap(document_id(model, self.key_fields), model)

    def _unwrap(self, document: dict[str, Any]) -> ModelT:
        return wrapper_type(self.model_type).model_validate(document).model

    def _failure(self, operation: str, model: ModelT, error: Exception) -> RepositoryError:
        logger.error(
            "%s %s failed in %s/%s: %s",
            operation, self.model_type.__name__,
            self.options.database_id, self.container_name, error,
        )
        return RepositoryError(
            operation=operation,
            repository=type(self).__name__,
            model_type=self.model_type.__name__,
            model_json=model.model_dump_json(),
        )
