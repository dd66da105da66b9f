"""Domain layer - catalog error types."""

from marketplace.domain.exceptions import (
    CatalogError,
    StoreError,
    StoreUnavailableError,
)

__all__ = [
    "CatalogError",
    "StoreError",
    "StoreUnavailableError",
]
