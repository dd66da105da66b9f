"""Product Catalog.

Catalog query engine, price normalization, predicate building and the
stores it runs against.
"""

from marketplace.catalog.generator import CatalogGenerator, GeneratorConfig
from marketplace.catalog.predicates import And, Eq, In, Like, Or, Predicate, Range
from marketplace.catalog.pricing import (
    PriceBounds,
    effective_price,
    normalize_to_cents,
    parse_price_range,
)
from marketplace.catalog.service import (
    QueryOptions,
    ResultPage,
    get_categories,
    get_product_by_id,
    get_products,
)
from marketplace.catalog.sorting import SortMode
from marketplace.catalog.store import CatalogStore, InMemoryCatalogStore

__all__ = [
    # Predicates
    "And",
    "Eq",
    "In",
    "Like",
    "Or",
    "Predicate",
    "Range",
    # Pricing
    "PriceBounds",
    "effective_price",
    "normalize_to_cents",
    "parse_price_range",
    # Sorting
    "SortMode",
    # Stores
    "CatalogStore",
    "InMemoryCatalogStore",
    # Generator
    "CatalogGenerator",
    "GeneratorConfig",
    # Service
    "QueryOptions",
    "ResultPage",
    "get_categories",
    "get_product_by_id",
    "get_products",
]
