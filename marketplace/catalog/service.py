"""Catalog query engine.

Answers paginated, filterable, sortable catalog queries over products whose
listed price may come from the product itself or from its cheapest variant.

A request flows through four steps:

1. Non-price options become a base predicate (``filters``).
2. The price-range token becomes cents bounds (``pricing``).
3. Without a price range one store query answers the request. With a price
   range, products matching on base price and products owning a matching
   variant are fetched separately and merged by id.
4. Each row gets an ``effective_price``; price and rating sorts are done in
   memory over the full set and the page is sliced afterwards.

Store failures never propagate: the caller receives an empty page with the
error text attached.
"""

from dataclasses import asdict, dataclass, field
from typing import Any

import structlog

from marketplace.catalog.filters import build_base_predicate
from marketplace.catalog.predicates import In, Predicate, all_of
from marketplace.catalog.pricing import (
    PriceBounds,
    average_rating,
    base_price_predicate,
    effective_price,
    matches_price_bounds,
    parse_price_range,
    variant_price_predicate,
)
from marketplace.catalog.sorting import (
    DEFAULT_ORDERING,
    SERVER_ORDERING,
    SortMode,
    page_window,
    resolve_sort_mode,
    slice_window,
    sort_rows,
)
from marketplace.catalog.store import CatalogStore, ProductRow
from marketplace.domain.exceptions import StoreError, StoreUnavailableError

logger = structlog.get_logger()

DEFAULT_PER_PAGE = 24

# Keeps each id-list query well under asyncpg's 32767 bind parameter limit.
VARIANT_ID_BATCH_SIZE = 1000


@dataclass(frozen=True)
class QueryOptions:
    """Catalog query options.

    Attributes:
        seller_id: Filter by vendor.
        category_id: Filter by category ID (numeric or opaque).
        category_slug: Category tag/title match, used when no category_id.
        search_query: Text search in title/description.
        price_range: Price-range token (``under-50``, ``over-100``, ``25-75``).
        sort_by: Sort mode name.
        page: Page number (1-indexed).
        per_page: Items per page.
    """

    seller_id: str | None = None
    category_id: str | int | None = None
    category_slug: str | None = None
    search_query: str | None = None
    price_range: str | None = None
    sort_by: str = SortMode.NEWEST.value
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    @property
    def sort_mode(self) -> SortMode:
        """Resolved sort mode."""
        return resolve_sort_mode(self.sort_by)

    @property
    def current_page(self) -> int:
        """Page number, at least 1."""
        try:
            return max(1, int(self.page))
        except (TypeError, ValueError):
            return 1

    @property
    def page_size(self) -> int:
        """Items per page, falling back to the default for invalid values."""
        try:
            size = int(self.per_page)
        except (TypeError, ValueError):
            return DEFAULT_PER_PAGE
        return size if size > 0 else DEFAULT_PER_PAGE

    @property
    def window(self) -> tuple[int, int]:
        """Zero-based inclusive row window for the requested page."""
        return page_window(self.current_page, self.page_size)

    def filters(self) -> dict[str, Any]:
        """Echo of the filter options, for the response."""
        return {
            "seller_id": self.seller_id,
            "category_id": self.category_id,
            "category_slug": self.category_slug,
            "search_query": self.search_query,
            "price_range": self.price_range,
            "sort_by": self.sort_mode.value,
        }


@dataclass
class ResultPage:
    """One page of catalog results.

    Attributes:
        products: Product rows annotated with ``effective_price`` (and
            ``avg_rating`` for rating sorts).
        total: Number of matching products before pagination.
        page: Current page.
        per_page: Items per page.
        filters: Echo of the applied options.
        error: Store error text when the page degraded to empty.
    """

    products: list[ProductRow]
    total: int
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE
    filters: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return (self.total + self.per_page - 1) // self.per_page

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


def _annotate(row: ProductRow, with_rating: bool = False) -> ProductRow:
    annotated = dict(row)
    annotated["effective_price"] = effective_price(row)
    if with_rating:
        annotated["avg_rating"] = average_rating(row)
    return annotated


def merge_unique(*groups: list[ProductRow]) -> list[ProductRow]:
    """Concatenate row groups, keeping the first row seen for each id."""
    seen: set[Any] = set()
    merged = []
    for rows in groups:
        for row in rows:
            if row["id"] in seen:
                continue
            seen.add(row["id"])
            merged.append(row)
    return merged


async def find_variant_matched_ids(store: CatalogStore, bounds: PriceBounds) -> list[str]:
    """Look up products owning a variant priced inside the bounds.

    A store failure yields no ids rather than failing the request.
    """
    try:
        return await store.fetch_variant_product_ids(variant_price_predicate(bounds))
    except StoreError as e:
        logger.warning(
            "Variant price lookup failed, continuing without variant matches",
            error=str(e),
        )
        return []


async def _fetch_price_range_groups(
    store: CatalogStore,
    base: Predicate | None,
    bounds: PriceBounds,
) -> tuple[list[ProductRow], list[ProductRow]]:
    """Fetch unpaginated base-price and variant-price matches for a range.

    Variant-matched products are fetched in id batches. If any batch fails
    the variant group is dropped as a whole.

    Raises:
        StoreError: If the base-price query fails.
    """
    variant_ids = await find_variant_matched_ids(store, bounds)

    by_base_price, _ = await store.fetch_products(
        all_of(base, base_price_predicate(bounds))
    )

    by_variant: list[ProductRow] = []
    batches = [
        tuple(variant_ids[start:start + VARIANT_ID_BATCH_SIZE])
        for start in range(0, len(variant_ids), VARIANT_ID_BATCH_SIZE)
    ]
    for number, batch in enumerate(batches, start=1):
        try:
            rows, _ = await store.fetch_products(all_of(base, In("id", batch)))
        except StoreError as e:
            logger.warning(
                "Variant-matched product query failed, using base price matches only",
                error=str(e),
                operation=e.operation,
                variant_match_count=len(variant_ids),
                batch=number,
                batch_count=len(batches),
            )
            by_variant = []
            break
        by_variant.extend(rows)

    logger.debug(
        "Price range sub-queries complete",
        base_price_matches=len(by_base_price),
        variant_matches=len(by_variant),
    )
    return by_base_price, by_variant


def _empty_page(options: QueryOptions, error: str | None = None) -> ResultPage:
    return ResultPage(
        products=[],
        total=0,
        page=options.current_page,
        per_page=options.page_size,
        filters=options.filters(),
        error=error,
    )


async def get_products(
    options: QueryOptions,
    store: CatalogStore | None,
) -> ResultPage:
    """Run a catalog query.

    Args:
        options: Query options.
        store: Backing store. ``None`` is treated as an unavailable store.

    Returns:
        Requested page with the filtered total. On store failure an empty
        page with ``error`` set.
    """
    mode = options.sort_mode
    window = options.window
    bounds = parse_price_range(options.price_range)
    base = build_base_predicate(options)

    log = logger.bind(
        sort_by=mode.value,
        page=options.current_page,
        per_page=options.page_size,
        price_range=options.price_range,
    )

    if store is None:
        error = StoreUnavailableError("get_products")
        log.warning("Catalog store unavailable, returning empty page", error=str(error))
        return _empty_page(options, error=str(error))

    try:
        if bounds.is_bounded:
            by_base_price, by_variant = await _fetch_price_range_groups(store, base, bounds)
            try:
                matched = [
                    _annotate(row, mode.is_rating)
                    for row in merge_unique(by_base_price, by_variant)
                    if matches_price_bounds(row, bounds)
                ]
            except (KeyError, TypeError) as e:
                log.error("Failed to merge price range results", error=str(e))
                return _empty_page(options, error=str(e))
            ordered = sort_rows(matched, mode)
            total = len(ordered)
            products = slice_window(ordered, window)

        elif mode.server_side:
            rows, total = await store.fetch_products(
                base,
                order_by=SERVER_ORDERING[mode],
                window=window,
            )
            products = [_annotate(row, mode.is_rating) for row in rows]

        else:
            rows, _ = await store.fetch_products(base, order_by=DEFAULT_ORDERING)
            ordered = sort_rows([_annotate(row, mode.is_rating) for row in rows], mode)
            total = len(ordered)
            products = slice_window(ordered, window)

    except StoreError as e:
        log.error("Catalog query failed, returning empty page", error=str(e))
        return _empty_page(options, error=str(e))

    log.info("Catalog query complete", returned=len(products), total=total)

    return ResultPage(
        products=products,
        total=total,
        page=options.current_page,
        per_page=options.page_size,
        filters=options.filters(),
    )


async def get_product_by_id(
    product_id: str,
    store: CatalogStore | None,
) -> ProductRow | None:
    """Fetch one product annotated with its effective price and rating.

    Returns:
        Annotated product, or None when missing or the store fails.
    """
    if not product_id or store is None:
        return None

    try:
        row = await store.fetch_product(product_id)
    except StoreError as e:
        logger.warning("Product lookup failed", product_id=product_id, error=str(e))
        return None

    if row is None:
        return None
    return _annotate(row, with_rating=True)


async def get_categories(store: CatalogStore | None) -> list[dict[str, Any]]:
    """List catalog categories, empty when the store is unavailable."""
    if store is None:
        return []

    try:
        return await store.fetch_categories()
    except StoreError as e:
        logger.warning("Category lookup failed", error=str(e))
        return []
