"""
Provisioning cache — ensure each database and container exists once per process.

Repositories call ensure_database() / ensure_container() on first use. The
first caller for a given (store identity, database[, container]) issues the
store's "create if not exists" call; callers that arrive while it is in
flight await the same attempt, even from another thread's event loop;
later callers return immediately.

Failure policy:
  recheck_on_failure=False  a failed attempt still marks the resource as
                            checked, so later accesses skip the check
  recheck_on_failure=True   a failed attempt leaves it unchecked and the
                            next access tries again
Cancellation of the shared attempt never marks anything checked.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Awaitable, Callable, Hashable

from cosmos_linq.errors import ProvisioningError
from cosmos_linq.stores import SUCCESS_STATUSES, DocumentStore

logger = logging.getLogger("cosmos_linq.provisioning")


class ProvisioningCache:
    """Checked-flags for databases and containers, plus in-flight attempts."""

    def __init__(self):
        self._lock = threading.Lock()
        self._checked: set[Hashable] = set()
        self._inflight: dict[Hashable, concurrent.futures.Future] = {}
        self._tasks: set[asyncio.Task] = set()

    # -- public API ---------------------------------------------------------

    async def ensure_database(
        self,
        store: DocumentStore,
        database_id: str,
        *,
        recheck_on_failure: bool = False,
    ) -> None:
        key = ("database", store.identity, database_id)

        async def provision():
            status = await store.ensure_database(database_id)
            if status not in SUCCESS_STATUSES:
                raise ProvisioningError("database", status, database_id)
            logger.info("Database %s ready on %s (status %s)", database_id, store.identity, status)

        await self._single_flight(key, provision, recheck_on_failure)

    async def ensure_container(
        self,
        store: DocumentStore,
        database_id: str,
        container_id: str,
        partition_key_path: str,
        indexing_policy: dict[str, Any],
        *,
        recheck_on_failure: bool = False,
    ) -> None:
        key = ("container", store.identity, database_id, container_id)

        async def provision():
            status = await store.ensure_container(
                database_id, container_id, partition_key_path, indexing_policy,
            )
            if status not in SUCCESS_STATUSES:
                raise ProvisioningError("container", status, database_id, container_id)
            logger.info(
                "Container %s/%s ready on %s (status %s, pk=%s)",
                database_id, container_id, store.identity, status, partition_key_path,
            )

        await self._single_flight(key, provision, recheck_on_failure)

    def is_database_checked(self, store: DocumentStore, database_id: str) -> bool:
        with self._lock:
            return ("database", store.identity, database_id) in self._checked

    def is_container_checked(self, store: DocumentStore, database_id: str, container_id: str) -> bool:
        with self._lock:
            return ("container", store.identity, database_id, container_id) in self._checked

    def reset(self, store: DocumentStore | None = None, database_id: str | None = None) -> None:
        """Forget checked flags (all of them, or those for one store/database).

        Attempts still in flight for a matching key keep resolving their
        waiters but no longer mark anything checked.
        """
        identity = store.identity if store is not None else None

        def matches(key: tuple) -> bool:
            return (
                (identity is None or key[1] == identity)
                and (database_id is None or key[2] == database_id)
            )

        with self._lock:
            self._checked = {key for key in self._checked if not matches(key)}
            for key in [key for key in self._inflight if matches(key)]:
                del self._inflight[key]

    # -- single flight ------------------------------------------------------

    async def _single_flight(
        self,
        key: Hashable,
        provision: Callable[[], Awaitable[None]],
        recheck_on_failure: bool,
    ) -> None:
        with self._lock:
            if key in self._checked:
                return
            shared = self._inflight.get(key)
            owner = shared is None
            if owner:
                shared = concurrent.futures.Future()
                self._inflight[key] = shared
        if owner:
            task = asyncio.ensure_future(self._attempt(key, shared, provision, recheck_on_failure))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        # Waiters may sit on other threads' event loops. Shielded so one
        # impatient caller cannot cancel the attempt the others wait on.
        await asyncio.shield(asyncio.wrap_future(shared))

    async def _attempt(
        self,
        key: Hashable,
        shared: concurrent.futures.Future,
        provision: Callable[[], Awaitable[None]],
        recheck_on_failure: bool,
    ) -> None:
        outcome = "cancelled"
        error: Exception | None = None
        try:
            await provision()
            outcome = "ok"
        except Exception as e:
            outcome = "failed"
            error = e
            logger.error("Provisioning %s %s failed: %s", key[0], "/".join(key[2:]), e)
        finally:
            with self._lock:
                # A reset() while in flight detaches the attempt
                if self._inflight.get(key) is shared:
                    del self._inflight[key]
                    if outcome == "ok" or (outcome == "failed" and not recheck_on_failure):
                        self._checked.add(key)
            if not shared.cancelled():
                if outcome == "ok":
                    shared.set_result(None)
                elif outcome == "failed":
                    shared.set_exception(error)
                else:
                    shared.cancel()


# ---------------------------------------------------------------------------
# Process-wide default
# ---------------------------------------------------------------------------

_default_cache = ProvisioningCache()


def default_provisioning_cache() -> ProvisioningCache:
    """The cache repositories share when none is passed explicitly."""
    return _default_cache
