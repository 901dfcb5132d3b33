"""
CosmosLinqRepository — read-only, queryable view of one container.

Owns the store client it is given (unless told otherwise) and provisions
its database + container lazily: constructing a repository never touches
the store; the first query or write does.

Usage:
    class OrderQueries(CosmosLinqRepository[Order]):
        pass

    async with OrderQueries(options, store) as repo:
        orders = await repo.as_queryable().to_list()
        big = repo.as_queryable(
            "SELECT * FROM c WHERE c.model.total > @min", {"min": 100},
        )
        async for order in big:
            ...
"""

from __future__ import annotations

import logging
import typing
from typing import Any, AsyncIterator, Generic

from pydantic import BaseModel

from cosmos_linq.config import RepositoryOptions
from cosmos_linq.errors import ArgumentError
from cosmos_linq.models import ModelT, wrapper_type
from cosmos_linq.naming import derive_container_name
from cosmos_linq.provisioning import ProvisioningCache, default_provisioning_cache
from cosmos_linq.stores import ContainerHandle, DocumentStore

logger = logging.getLogger("cosmos_linq.repositories")


def _model_type_from_generic(cls: type) -> type | None:
    """Model type bound through subclassing, e.g. class Repo(CosmosLinqRepository[Order])."""
    for klass in cls.__mro__:
        for base in getattr(klass, "__orig_bases__", ()):
            for arg in typing.get_args(base):
                if isinstance(arg, type) and issubclass(arg, BaseModel):
                    return arg
    return None


def _query_parameters(parameters: dict[str, Any] | list[dict[str, Any]] | None):
    if parameters is None or isinstance(parameters, list):
        return parameters
    return [
        {"name": name if name.startswith("@") else f"@{name}", "value": value}
        for name, value in parameters.items()
    ]


class ModelQuery(Generic[ModelT]):
    """Lazy, restartable sequence of models.

    Nothing is sent to the store until iteration starts, and every new
    ``async for`` re-runs the query. Queries address the wrapper documents,
    so model fields live under ``c.model``; select whole documents
    (``SELECT * FROM c ...``).
    """

    def __init__(
        self,
        repository: "CosmosLinqRepository[ModelT]",
        query: str | None = None,
        parameters: list[dict[str, Any]] | None = None,
    ):
        self._repository = repository
        self.query = query
        self.parameters = parameters

    def __aiter__(self) -> AsyncIterator[ModelT]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[ModelT]:
        container = await self._repository._get_container()
        wrapper_cls = wrapper_type(self._repository.model_type)
        async for document in container.query_items(self.query, self.parameters):
            yield wrapper_cls.model_validate(document).model

    async def to_list(self) -> list[ModelT]:
        return [model async for model in self]

    async def first_or_none(self) -> ModelT | None:
        async for model in self:
            return model
        return None


class CosmosLinqRepository(Generic[ModelT]):
    """Queryable repository over the container named after the model type."""

    model_type: type[ModelT] | None = None

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
        if options is None:
            raise ArgumentError("options")
        if store is None:
            raise ArgumentError("store")

        resolved = model_type or type(self).model_type or _model_type_from_generic(type(self))
        if resolved is None:
            raise ArgumentError(
                "model_type",
                f"{type(self).__name__} needs a model type: subclass it as "
                f"{type(self).__name__}[Model] or pass model_type=",
            )

        self.options = options
        self.store = store
        self.model_type = resolved
        # Containers are named after the model, always in English
        self.container_name = container_name or derive_container_name(resolved)
        self._provisioning = provisioning or default_provisioning_cache()
        self._owns_store = owns_store
        self._container: ContainerHandle | None = None
        self._closed = False

    # -- store handle -------------------------------------------------------

    async def _get_container(self) -> ContainerHandle:
        """Ready container handle, provisioning database + container on first use.

        ProvisioningError and store errors raised here reach the caller unwrapped.
        """
        self._ensure_open()
        if self._container is not None:
            return self._container

        options = self.options
        await self._provisioning.ensure_database(
            self.store, options.database_id,
            recheck_on_failure=options.recheck_on_failure,
        )
        await self._provisioning.ensure_container(
            self.store,
            options.database_id,
            self.container_name,
            options.partition_key_path,
            options.indexing_policy,
            recheck_on_failure=options.recheck_on_failure,
        )
        self._container = self.store.get_container(options.database_id, self.container_name)
        return self._container

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"{type(self).__name__} is closed")

    # -- queries ------------------------------------------------------------

    def as_queryable(
        self,
        query: str | None = None,
        parameters: dict[str, Any] | list[dict[str, Any]] | None = None,
    ) -> ModelQuery[ModelT]:
        """Lazy sequence of every model in the container (or those *query* selects).

        Items written moments ago may be missing: containers use lazy indexing.
        """
        self._ensure_open()
        return ModelQuery(self, query, _query_parameters(parameters))

    # -- lifecycle ----------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Release the store client. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        try:
            if self._owns_store:
                await self.store.close()
        finally:
            self._container = None
            logger.debug("%s closed (container %s)", type(self).__name__, self.container_name)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
