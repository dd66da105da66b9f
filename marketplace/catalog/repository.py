"""SQL-backed catalog store.

Compiles predicate trees into SQLAlchemy expressions and runs them on an
async session.
"""

from typing import Any

import structlog
from sqlalchemy import and_, false, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from marketplace.catalog.models import Category, Product, ProductVariant
from marketplace.catalog.predicates import And, Eq, In, Like, Or, Predicate, Range
from marketplace.catalog.sorting import OrderBy
from marketplace.catalog.store import CatalogStore, ProductRow
from marketplace.domain.exceptions import StoreError, StoreUnavailableError

logger = structlog.get_logger()

# Predicate field names that differ from ORM attribute names.
_ATTRIBUTE_NAMES = {"metadata": "metadata_"}

# asyncpg raises OSError subclasses unwrapped when a connection cannot be opened.
_DATABASE_ERRORS = (SQLAlchemyError, OSError)


def _store_error(operation: str, error: Exception) -> StoreError:
    if isinstance(error, OSError):
        return StoreUnavailableError(operation, str(error) or type(error).__name__)
    return StoreError(operation, str(error))


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _column(model: type, field: str) -> Any:
    """Resolve a predicate field name to a column expression."""
    name, _, key = field.partition(".")
    attribute = getattr(model, _ATTRIBUTE_NAMES.get(name, name), None)
    if attribute is None:
        raise ValueError(f"{model.__name__} has no field '{name}'")
    if key:
        return attribute[key].as_string()
    return attribute


def compile_predicate(predicate: Predicate, model: type) -> Any:
    """Compile a predicate tree into a SQLAlchemy boolean expression.

    Args:
        predicate: Expression tree.
        model: ORM class the field names refer to.

    Returns:
        SQLAlchemy clause element.
    """
    if isinstance(predicate, And):
        return and_(*(compile_predicate(c, model) for c in predicate.clauses))

    if isinstance(predicate, Or):
        return or_(*(compile_predicate(c, model) for c in predicate.clauses))

    column = _column(model, predicate.field)

    if isinstance(predicate, Eq):
        # A slug compared against an integer column can never match.
        python_type = _python_type(column)
        if python_type is int and not isinstance(predicate.value, int):
            return false()
        return column == predicate.value

    if isinstance(predicate, Like):
        return column.ilike(f"%{_escape_like(predicate.value)}%", escape="\\")

    if isinstance(predicate, Range):
        conditions = []
        if predicate.min is not None:
            conditions.append(column >= predicate.min)
        if predicate.max is not None:
            conditions.append(column <= predicate.max)
        return and_(*conditions) if conditions else column.is_not(None)

    if isinstance(predicate, In):
        return column.in_(predicate.values)

    raise TypeError(f"Unknown predicate node: {predicate!r}")


def _python_type(column: Any) -> type | None:
    try:
        return column.type.python_type
    except NotImplementedError:
        return None


class SqlCatalogStore(CatalogStore):
    """Catalog store over the relational schema.

    Example usage:
        async with async_session_factory() as session:
            store = SqlCatalogStore(session)
            rows, total = await store.fetch_products(
                Eq("vendor_id", vendor_id),
                order_by=OrderBy("created_at", descending=True),
                window=(0, 23),
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize store with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def fetch_products(
        self,
        predicate: Predicate | None,
        order_by: OrderBy | None = None,
        window: tuple[int, int] | None = None,
    ) -> tuple[list[ProductRow], int]:
        query = select(Product).options(
            selectinload(Product.variants),
            selectinload(Product.ratings),
        )
        count_query = select(func.count(Product.id))

        if predicate is not None:
            condition = compile_predicate(predicate, Product)
            query = query.where(condition)
            count_query = count_query.where(condition)

        if order_by is not None:
            sort_column = self._get_sort_column(order_by.field)
            if order_by.descending:
                query = query.order_by(sort_column.desc())
            else:
                query = query.order_by(sort_column.asc())

        if window is not None:
            start, end = window
            query = query.offset(start).limit(end - start + 1)

        try:
            result = await self.session.execute(query)
            rows = [product.to_dict() for product in result.scalars().all()]
            # An unwindowed fetch already holds every match.
            if window is None:
                total = len(rows)
            else:
                total = (await self.session.execute(count_query)).scalar_one()
        except _DATABASE_ERRORS as e:
            raise _store_error("fetch_products", e) from e

        return rows, total

    async def fetch_variant_product_ids(self, predicate: Predicate) -> list[str]:
        query = (
            select(ProductVariant.product_id)
            .where(compile_predicate(predicate, ProductVariant))
            .distinct()
        )

        try:
            result = await self.session.execute(query)
        except _DATABASE_ERRORS as e:
            raise _store_error("fetch_variant_product_ids", e) from e

        return list(result.scalars().all())

    async def fetch_product(self, product_id: str) -> ProductRow | None:
        query = (
            select(Product)
            .where(Product.id == product_id)
            .options(
                selectinload(Product.variants),
                selectinload(Product.ratings),
            )
        )

        try:
            result = await self.session.execute(query)
        except _DATABASE_ERRORS as e:
            raise _store_error("fetch_product", e) from e

        product = result.scalar_one_or_none()
        return product.to_dict() if product is not None else None

    async def fetch_categories(self) -> list[dict[str, Any]]:
        try:
            result = await self.session.execute(select(Category).order_by(Category.name))
        except _DATABASE_ERRORS as e:
            raise _store_error("fetch_categories", e) from e

        return [category.to_dict() for category in result.scalars().all()]

    async def ping(self) -> bool:
        try:
            await self.session.execute(select(1))
        except _DATABASE_ERRORS as e:
            logger.warning("Catalog store ping failed", error=str(e))
            return False
        return True

    def _get_sort_column(self, field: str) -> Any:
        """Get SQLAlchemy column for sorting.

        Args:
            field: Sort field name.

        Returns:
            SQLAlchemy column.
        """
        columns = {
            "created_at": Product.created_at,
            "title": Product.title,
            "base_price": Product.base_price,
        }
        return columns.get(field, Product.created_at)
