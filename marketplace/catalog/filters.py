"""Base filter construction for catalog queries.

Turns request options into the non-price predicates shared by every
sub-query of a catalog request.
"""

from typing import TYPE_CHECKING

from marketplace.catalog.predicates import Eq, Like, Predicate, all_of, any_of

if TYPE_CHECKING:
    from marketplace.catalog.service import QueryOptions


def coerce_category_id(category_id: str | int) -> str | int:
    """Return the category id as an int when it parses as one.

    Categories may be numeric IDs or opaque slugs; slugs pass through.
    """
    if isinstance(category_id, int) and not isinstance(category_id, bool):
        return category_id
    text = str(category_id).strip()
    try:
        return int(text)
    except ValueError:
        return text


def build_base_predicate(options: "QueryOptions") -> Predicate | None:
    """Build the AND of all non-price filters for a request.

    Args:
        options: Query options.

    Returns:
        Combined predicate, or None when no filter applies.
    """
    seller = Eq("vendor_id", options.seller_id) if options.seller_id else None

    category = None
    if options.category_id is not None and str(options.category_id).strip():
        category = Eq("category_id", coerce_category_id(options.category_id))
    elif options.category_slug and options.category_slug.strip():
        slug = options.category_slug.strip()
        category = any_of(
            Like("metadata.category", slug),
            Like("title", slug),
        )

    search = None
    if options.search_query and options.search_query.strip():
        term = options.search_query.strip()
        search = any_of(
            Like("title", term),
            Like("description", term),
        )

    return all_of(seller, category, search)
