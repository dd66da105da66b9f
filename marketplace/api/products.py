"""Catalog API endpoints.

Provides the marketplace product listing, product detail and category
endpoints consumed by the storefront.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.api.schemas import (
    CategoryListResponse,
    CategorySchema,
    ErrorCode,
    ErrorResponse,
    ProductListResponse,
    ProductSchema,
)
from marketplace.catalog.repository import SqlCatalogStore
from marketplace.catalog.service import (
    QueryOptions,
    ResultPage,
    get_categories,
    get_product_by_id,
    get_products,
)
from marketplace.catalog.store import CatalogStore
from marketplace.infrastructure.config import settings
from marketplace.infrastructure.database import get_session

router = APIRouter(tags=["Catalog"])


# ============================================================================
# Dependencies
# ============================================================================


async def get_store(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CatalogStore:
    """Get a SQL catalog store bound to the request session."""
    return SqlCatalogStore(session)


# ============================================================================
# Converters
# ============================================================================


def page_to_response(result: ResultPage) -> ProductListResponse:
    """Convert a ResultPage to response schema."""
    return ProductListResponse(
        products=[ProductSchema(**product) for product in result.products],
        total=result.total,
        page=result.page,
        per_page=result.per_page,
        total_pages=result.total_pages,
        has_more=result.has_next,
        filters=result.filters,
        error=result.error,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/products",
    response_model=ProductListResponse,
    summary="List catalog products",
    description=(
        "Filter, sort and paginate the catalog. Price ranges match on a "
        "product's base price or on any of its variants."
    ),
)
async def list_products(
    store: Annotated[CatalogStore, Depends(get_store)],
    seller_id: str | None = Query(default=None, description="Vendor ID"),
    category_id: str | None = Query(default=None, description="Category ID"),
    category_slug: str | None = Query(default=None, description="Category tag or slug"),
    q: str | None = Query(default=None, description="Search in title and description"),
    price_range: str | None = Query(
        default=None, description="all, under-N, over-N or A-B (whole currency units)"
    ),
    sort_by: str = Query(default="newest", description="Sort mode"),
    page: int = Query(default=1, ge=1, description="Page number (1-based)"),
    per_page: int = Query(
        default=settings.default_per_page,
        ge=1,
        le=settings.max_per_page,
        description="Items per page",
    ),
) -> ProductListResponse:
    """List products.

    Store failures produce an empty page with ``error`` set rather than an
    error status, so the storefront renders its "no products" state.
    """
    options = QueryOptions(
        seller_id=seller_id,
        category_id=category_id,
        category_slug=category_slug,
        search_query=q,
        price_range=price_range,
        sort_by=sort_by,
        page=page,
        per_page=per_page,
    )
    result = await get_products(options, store)
    return page_to_response(result)


@router.get(
    "/products/{product_id}",
    response_model=ProductSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Get product details",
)
async def get_product(
    product_id: str,
    store: Annotated[CatalogStore, Depends(get_store)],
) -> ProductSchema:
    """Get a product by ID.

    Raises:
        HTTPException: If product not found.
    """
    product = await get_product_by_id(product_id, store)

    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error_code": ErrorCode.PRODUCT_NOT_FOUND.value,
                "message": f"Product not found: {product_id}",
            },
        )

    return ProductSchema(**product)


@router.get(
    "/categories",
    response_model=CategoryListResponse,
    summary="List categories",
)
async def list_categories(
    store: Annotated[CatalogStore, Depends(get_store)],
) -> CategoryListResponse:
    """List catalog categories."""
    categories = await get_categories(store)
    return CategoryListResponse(
        categories=[CategorySchema(**category) for category in categories],
    )
