"""
Shared pytest fixtures.

Every test gets its own in-memory MockDocumentStore and its own
ProvisioningCache, so call counts never leak between tests. The
process-wide default cache is also cleared around each test.
"""

from __future__ import annotations

import pytest

from cosmos_linq.config import RepositoryOptions
from cosmos_linq.provisioning import ProvisioningCache, default_provisioning_cache
from cosmos_linq.repositories import CosmosCrudRepository
from cosmos_linq.stores.mock_store import MockDocumentStore
from tests.sample_models import LineItem, Membership, Order

DATABASE_ID = "shop"


class OrderRepository(CosmosCrudRepository[Order]):
    pass


class MembershipRepository(CosmosCrudRepository[Membership]):
    pass


class LineItemRepository(CosmosCrudRepository[LineItem]):
    pass


@pytest.fixture(autouse=True)
def _clean_default_provisioning():
    default_provisioning_cache().reset()
    yield
    default_provisioning_cache().reset()


@pytest.fixture
def options() -> RepositoryOptions:
    return RepositoryOptions(database_id=DATABASE_ID, endpoint="mock://local")


@pytest.fixture
def store() -> MockDocumentStore:
    return MockDocumentStore()


@pytest.fixture
def provisioning() -> ProvisioningCache:
    return ProvisioningCache()


@pytest.fixture
def order_repo(options, store, provisioning) -> OrderRepository:
    return OrderRepository(options, store, provisioning=provisioning)


@pytest.fixture
def membership_repo(options, store, provisioning) -> MembershipRepository:
    return MembershipRepository(options, store, provisioning=provisioning)


@pytest.fixture
def line_item_repo(options, store, provisioning) -> LineItemRepository:
    return LineItemRepository(options, store, provisioning=provisioning)
