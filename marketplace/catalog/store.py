"""Catalog store interface and in-memory implementation.

A store answers filtered product queries expressed as predicate trees. It
returns plain dict rows with variants and rating records embedded under
``"variants"`` and ``"ratings"``.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Iterable

from marketplace.catalog.predicates import Predicate, evaluate, resolve_field
from marketplace.catalog.sorting import OrderBy, order_key

ProductRow = dict[str, Any]


class CatalogStore(ABC):
    """Read-only backing store for catalog queries.

    Implementations raise ``StoreError`` when the backend fails.
    """

    @abstractmethod
    async def fetch_products(
        self,
        predicate: Predicate | None,
        order_by: OrderBy | None = None,
        window: tuple[int, int] | None = None,
    ) -> tuple[list[ProductRow], int]:
        """Fetch products matching a predicate.

        Args:
            predicate: Filter over product fields, or None for all products.
            order_by: Optional store-side ordering.
            window: Optional zero-based inclusive ``(start, end)`` range.

        Returns:
            Tuple of (rows inside the window, exact count of all matches).
        """

    @abstractmethod
    async def fetch_variant_product_ids(self, predicate: Predicate) -> list[str]:
        """Fetch distinct parent product IDs of variants matching a predicate."""

    @abstractmethod
    async def fetch_product(self, product_id: str) -> ProductRow | None:
        """Fetch a single product by ID."""

    @abstractmethod
    async def fetch_categories(self) -> list[dict[str, Any]]:
        """Fetch all categories ordered by name."""

    @abstractmethod
    async def ping(self) -> bool:
        """Check the store is reachable."""


class InMemoryCatalogStore(CatalogStore):
    """Catalog store backed by dict rows held in memory.

    Rows are kept in insertion order, which is also the tie-break order for
    equal sort keys. Every read returns deep copies.

    Example usage:
        store = InMemoryCatalogStore([
            {"id": "p1", "title": "Mango Chutney", "base_price": 899,
             "variants": [{"id": "v1", "product_id": "p1", "price": 6.5}]},
        ])
        rows, total = await store.fetch_products(Eq("vendor_id", "v-1"))
    """

    def __init__(
        self,
        products: Iterable[ProductRow] = (),
        categories: Iterable[dict[str, Any]] = (),
    ) -> None:
        """Initialize store.

        Args:
            products: Product rows with embedded variants and ratings.
            categories: Category rows.
        """
        self._products: dict[str, ProductRow] = {}
        self._categories: list[dict[str, Any]] = [dict(c) for c in categories]
        for product in products:
            self.add_product(product)

    def add_product(self, product: ProductRow) -> None:
        """Insert or replace a product row."""
        row = copy.deepcopy(product)
        row.setdefault("variants", [])
        row.setdefault("ratings", [])
        for variant in row["variants"]:
            variant.setdefault("product_id", row["id"])
        self._products[row["id"]] = row

    def __len__(self) -> int:
        return len(self._products)

    async def fetch_products(
        self,
        predicate: Predicate | None,
        order_by: OrderBy | None = None,
        window: tuple[int, int] | None = None,
    ) -> tuple[list[ProductRow], int]:
        rows = [
            row
            for row in self._products.values()
            if predicate is None or evaluate(predicate, row)
        ]

        if order_by is not None:
            rows = sorted(
                rows,
                key=lambda row: order_key(resolve_field(row, order_by.field)),
                reverse=order_by.descending,
            )

        total = len(rows)
        if window is not None:
            start, end = window
            rows = rows[start:end + 1]

        return copy.deepcopy(rows), total

    async def fetch_variant_product_ids(self, predicate: Predicate) -> list[str]:
        product_ids: list[str] = []
        for row in self._products.values():
            for variant in row["variants"]:
                if evaluate(predicate, variant) and variant["product_id"] not in product_ids:
                    product_ids.append(variant["product_id"])
        return product_ids

    async def fetch_product(self, product_id: str) -> ProductRow | None:
        row = self._products.get(product_id)
        return copy.deepcopy(row) if row is not None else None

    async def fetch_categories(self) -> list[dict[str, Any]]:
        return sorted(
            (dict(c) for c in self._categories),
            key=lambda c: str(c.get("name", "")).lower(),
        )

    async def ping(self) -> bool:
        return True
