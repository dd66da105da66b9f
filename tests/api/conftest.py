"""Fixtures for API tests."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from marketplace.api.products import get_store
from marketplace.catalog.store import CatalogStore
from marketplace.domain.exceptions import StoreError
from marketplace.main import app


@pytest.fixture
def client(catalog_store) -> Iterator[TestClient]:
    """Create test client backed by the in-memory catalog."""
    app.dependency_overrides[get_store] = lambda: catalog_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client() -> Iterator[TestClient]:
    """Create test client whose store fails every call."""
    store = MagicMock(spec=CatalogStore)
    error = StoreError("fetch_products", "connection refused")
    store.fetch_products = AsyncMock(side_effect=error)
    store.fetch_variant_product_ids = AsyncMock(side_effect=error)
    store.fetch_product = AsyncMock(side_effect=error)
    store.fetch_categories = AsyncMock(side_effect=error)
    store.ping = AsyncMock(return_value=False)

    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
