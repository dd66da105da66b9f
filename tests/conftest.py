"""Shared fixtures for catalog tests."""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest

from marketplace.catalog.store import InMemoryCatalogStore

EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _make_product(
    product_id: str,
    title: str,
    base_price: Any,
    *,
    variants: list[dict[str, Any]] | None = None,
    ratings: list[int] | None = None,
    vendor_id: str = "vendor-1",
    category_id: int | None = None,
    category_tag: str | None = None,
    description: str | None = None,
    age_days: int = 0,
) -> dict[str, Any]:
    """Build a catalog row; larger ``age_days`` means an older product."""
    return {
        "id": product_id,
        "vendor_id": vendor_id,
        "category_id": category_id,
        "title": title,
        "slug": title.lower().replace(" ", "-"),
        "description": description,
        "base_price": base_price,
        "currency": "USD",
        "metadata": {"category": category_tag} if category_tag else {},
        "created_at": EPOCH - timedelta(days=age_days),
        "variants": [
            {"id": f"{product_id}-v{i}", "product_id": product_id, **variant}
            for i, variant in enumerate(variants or [])
        ],
        "ratings": [
            {"id": f"{product_id}-r{i}", "rating": value}
            for i, value in enumerate(ratings or [])
        ],
    }


@pytest.fixture
def make_product() -> Callable[..., dict[str, Any]]:
    """Factory for catalog product rows."""
    return _make_product


@pytest.fixture
def price_scenario_products() -> list[dict[str, Any]]:
    """Three products around an under-$50 boundary.

    - $80 base with a $10 variant
    - $40 base, no variants
    - $200 base with only a $150 variant
    """
    return [
        _make_product("p-variant", "Rum Cake", 8000, variants=[{"price_in_cents": 1000}], age_days=1),
        _make_product("p-base", "Hot Sauce", 4000, age_days=2),
        _make_product("p-pricey", "Carved Bowl", 20000, variants=[{"price_cents": 15000}], age_days=3),
    ]


@pytest.fixture
def catalog_products() -> list[dict[str, Any]]:
    """Small mixed catalog used across service and API tests."""
    return [
        _make_product(
            "p1", "Coconut Bread", 4.5,
            vendor_id="sunrise-bakery", category_id=3, category_tag="bakery",
            description="Sweet island loaf", ratings=[5, 4], age_days=5,
        ),
        _make_product(
            "p2", "Jerk Seasoning", 1299,
            vendor_id="island-spice-co", category_id=1, category_tag="food-spices",
            description="Smoky and hot", variants=[{"price": 9.99}, {"price": 14.99}],
            ratings=[3], age_days=4,
        ),
        _make_product(
            "p3", "Woven Basket", 7500,
            vendor_id="blue-reef-crafts", category_tag="crafts",
            description="Palm leaf basket", variants=[{"price_cents": 6500}],
            ratings=[4, 4, 5], age_days=3,
        ),
        _make_product(
            "p4", "Linen Shirt", 59.99,
            vendor_id="palm-and-thread", category_id=4, category_tag="apparel",
            description="Breezy linen", age_days=2,
        ),
        _make_product(
            "p5", "Hot Pepper Sauce", 899,
            vendor_id="island-spice-co", category_id=1, category_tag="food-spices",
            description="Scotch bonnet sauce", ratings=[2, 3], age_days=1,
        ),
    ]


@pytest.fixture
def catalog_categories() -> list[dict[str, Any]]:
    """Category rows matching ``catalog_products``."""
    return [
        {"id": 4, "name": "Apparel", "slug": "apparel"},
        {"id": 3, "name": "Bakery", "slug": "bakery"},
        {"id": 1, "name": "Food & Spices", "slug": "food-spices"},
    ]


@pytest.fixture
def catalog_store(catalog_products, catalog_categories) -> InMemoryCatalogStore:
    """In-memory store loaded with the mixed catalog."""
    return InMemoryCatalogStore(catalog_products, catalog_categories)
