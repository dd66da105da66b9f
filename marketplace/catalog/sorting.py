"""Sort modes and pagination windows.

Sorts on persisted columns are pushed to the store. Sorts on derived values
(effective price, average rating) run in memory over the full filtered set.
"""

from dataclasses import dataclass
from enum import Enum
from operator import itemgetter
from typing import Any


class SortMode(str, Enum):
    """Supported catalog orderings."""

    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE_ASC = "title_asc"
    TITLE_DESC = "title_desc"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    RATING_ASC = "rating_asc"
    RATING_DESC = "rating_desc"

    @property
    def server_side(self) -> bool:
        """Whether the store can order by this mode's key."""
        return self in SERVER_ORDERING

    @property
    def is_rating(self) -> bool:
        return self in (SortMode.RATING_ASC, SortMode.RATING_DESC)

    @property
    def descending(self) -> bool:
        return self in (
            SortMode.NEWEST,
            SortMode.TITLE_DESC,
            SortMode.PRICE_DESC,
            SortMode.RATING_DESC,
        )


@dataclass(frozen=True)
class OrderBy:
    """Store-side ordering on a named field."""

    field: str
    descending: bool = False


SERVER_ORDERING: dict[SortMode, OrderBy] = {
    SortMode.NEWEST: OrderBy("created_at", descending=True),
    SortMode.OLDEST: OrderBy("created_at"),
    SortMode.TITLE_ASC: OrderBy("title"),
    SortMode.TITLE_DESC: OrderBy("title", descending=True),
}

DEFAULT_ORDERING = SERVER_ORDERING[SortMode.NEWEST]

_ALIASES = {
    "price-low": SortMode.PRICE_ASC,
    "price_low": SortMode.PRICE_ASC,
    "price-high": SortMode.PRICE_DESC,
    "price_high": SortMode.PRICE_DESC,
}


def resolve_sort_mode(value: str | SortMode | None) -> SortMode:
    """Map a requested sort value onto a sort mode.

    Hyphenated spellings (``title-asc``) and the ``price-low`` /
    ``price-high`` aliases are accepted; anything unknown sorts newest first.
    """
    if isinstance(value, SortMode):
        return value
    if not value:
        return SortMode.NEWEST
    text = str(value).strip().lower()
    if text in _ALIASES:
        return _ALIASES[text]
    try:
        return SortMode(text.replace("-", "_"))
    except ValueError:
        return SortMode.NEWEST


def page_window(page: int, per_page: int) -> tuple[int, int]:
    """Convert a 1-indexed page into a zero-based inclusive ``(start, end)``."""
    start = (page - 1) * per_page
    return start, start + per_page - 1


def slice_window(rows: list[Any], window: tuple[int, int]) -> list[Any]:
    """Return the rows inside an inclusive window."""
    start, end = window
    return rows[start:end + 1]


def order_key(value: Any) -> tuple[bool, Any]:
    # Missing values sort after present ones in ascending order.
    return (value is None, value if value is not None else 0)


def sort_rows(rows: list[dict[str, Any]], mode: SortMode) -> list[dict[str, Any]]:
    """Stable in-memory sort of annotated rows.

    Price and rating modes read the ``effective_price`` / ``avg_rating``
    annotations. Server-side modes sort by their store column so that
    merged result sets can be ordered the same way.
    """
    if mode in (SortMode.PRICE_ASC, SortMode.PRICE_DESC):
        key = itemgetter("effective_price")
    elif mode.is_rating:
        key = itemgetter("avg_rating")
    else:
        field = SERVER_ORDERING[mode].field

        def key(row: dict[str, Any]) -> tuple[bool, Any]:
            return order_key(row.get(field))

    return sorted(rows, key=key, reverse=mode.descending)
