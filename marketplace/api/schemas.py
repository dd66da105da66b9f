"""API schemas for the marketplace catalog.

Pydantic models for response serialization.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorCode(str, Enum):
    """Machine-readable error codes returned by the catalog API."""

    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    STORE_ERROR = "STORE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Catalog Schemas
# ============================================================================


class ProductSchema(BaseModel):
    """Catalog product with its computed listing fields.

    Persisted fields vary by product (variant price aliases, metadata keys),
    so unknown fields are passed through unchanged.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Product ID")
    title: str | None = Field(default=None, description="Product title")
    vendor_id: str | None = Field(default=None, description="Vendor ID")
    base_price: float | None = Field(default=None, description="Stored base price (unit varies)")
    currency: str = Field(default="USD", description="Currency code")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    variants: list[dict[str, Any]] = Field(default_factory=list, description="Product variants")
    effective_price: int = Field(..., ge=0, description="Listing price in cents")
    avg_rating: float | None = Field(default=None, description="Average rating, rating sorts only")


class ProductListResponse(BaseModel):
    """Paginated catalog listing."""

    products: list[ProductSchema] = Field(default_factory=list)
    total: int = Field(..., description="Matching products before pagination")
    page: int = Field(..., description="Current page number")
    per_page: int = Field(..., description="Items per page")
    total_pages: int = Field(..., description="Number of pages")
    has_more: bool = Field(..., description="Whether there are more pages")
    filters: dict[str, Any] = Field(default_factory=dict, description="Applied filters")
    error: str | None = Field(default=None, description="Set when the store failed")


class CategorySchema(BaseModel):
    """Catalog category."""

    id: int | str
    name: str
    slug: str | None = None


class CategoryListResponse(BaseModel):
    """List of categories."""

    categories: list[CategorySchema] = Field(default_factory=list)
