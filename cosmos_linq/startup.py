"""
Startup hook — optional drop / create / seed of the database at boot.

Only acts in the Development environment, and only for the flags set on
RepositoryOptions (drop_database, ensure_created, seed_database). Meant to
be awaited from an application's lifespan handler before any repository
is used:

    @asynccontextmanager
    async def lifespan(app):
        await use_cosmos_db(store, options, seed=seed_catalog)
        yield
        await store.close()
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from cosmos_linq.adapters.cosmos_config import APP_ENVIRONMENT, DEVELOPMENT_ENVIRONMENT
from cosmos_linq.config import RepositoryOptions
from cosmos_linq.errors import ArgumentError, ProvisioningError
from cosmos_linq.provisioning import ProvisioningCache, default_provisioning_cache
from cosmos_linq.stores import SUCCESS_STATUSES, DocumentStore

logger = logging.getLogger("cosmos_linq.startup")

# seed(store, was_dropped, was_created); may be sync or async
SeedAction = Callable[[DocumentStore, bool, bool], Union[Awaitable[Any], Any]]


@dataclass
class StartupResult:
    was_dropped: bool = False
    was_created: bool = False
    was_seeded: bool = False


async def use_cosmos_db(
    store: DocumentStore,
    options: RepositoryOptions,
    seed: SeedAction | None = None,
    *,
    environment: str | None = None,
    provisioning: ProvisioningCache | None = None,
) -> StartupResult:
    """Apply the startup flags in *options* to the database.

    Raises:
        ArgumentError: If store or options is None, or seeding is enabled without a seed action.
        ProvisioningError: If ensure_created gets an unexpected status from the store.
    """
    if store is None:
        raise ArgumentError("store")
    if options is None:
        raise ArgumentError("options")

    result = StartupResult()
    if not (options.ensure_created or options.drop_database or options.seed_database):
        return result

    env = environment or APP_ENVIRONMENT
    if env != DEVELOPMENT_ENVIRONMENT:
        logger.info("Skipping database startup actions in %s environment", env)
        return result

    if options.seed_database and seed is None:
        raise ArgumentError("seed", "seed_database is set but no seed action was given")

    cache = provisioning or default_provisioning_cache()

    if options.drop_database:
        await store.delete_database(options.database_id)
        # Anything provisioned before the drop is gone
        cache.reset(store, options.database_id)
        result.was_dropped = True
        logger.warning("Dropped database %s on %s", options.database_id, store.identity)

    if options.ensure_created:
        status = await store.ensure_database(options.database_id)
        if status not in SUCCESS_STATUSES:
            raise ProvisioningError("database", status, options.database_id)
        result.was_created = True
        logger.info("Ensured database %s (status %s)", options.database_id, status)

    if options.seed_database:
        outcome = seed(store, result.was_dropped, result.was_created)
        if inspect.isawaitable(outcome):
            await outcome
        result.was_seeded = True
        logger.info("Seeded database %s", options.database_id)

    return result
