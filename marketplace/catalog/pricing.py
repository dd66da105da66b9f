"""Price normalization and price-range resolution.

Stored prices are inconsistent: some rows hold integer cents, others hold
decimal currency units. Everything in the catalog engine compares prices in
integer cents after passing them through ``normalize_to_cents``.
"""

import math
import re
from dataclasses import dataclass
from typing import Any

from marketplace.catalog.predicates import Predicate, Range, any_of

# Variant rows carry their price under exactly one of these keys.
VARIANT_PRICE_FIELDS = ("price_in_cents", "price", "price_cents")

_UNDER_RE = re.compile(r"^under-(\d+)$")
_OVER_RE = re.compile(r"^over-(\d+)$")
_BETWEEN_RE = re.compile(r"^(\d+)-(\d+)$")


def normalize_to_cents(value: Any) -> int:
    """Convert a stored price to integer cents.

    Whole numbers are taken to be cents already; values with a fractional
    part are taken to be currency units and scaled by 100. Anything that is
    not a finite number becomes 0.

    Note:
        A whole-unit price such as ``50`` meaning $50.00 is read as 50 cents.
        There is no unit tag on stored prices to tell the two apart.

    Examples:
        >>> normalize_to_cents(1999)
        1999
        >>> normalize_to_cents(19.99)
        1999
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    if number.is_integer():
        return int(number)
    return math.floor(number * 100 + 0.5)


@dataclass(frozen=True)
class PriceBounds:
    """Inclusive price interval in cents. ``None`` means unbounded."""

    min: int | None = None
    max: int | None = None

    @property
    def is_bounded(self) -> bool:
        """Whether either side constrains the interval."""
        return self.min is not None or self.max is not None

    def contains(self, cents: int) -> bool:
        """Check whether a cents amount lies inside the interval."""
        if self.min is not None and cents < self.min:
            return False
        if self.max is not None and cents > self.max:
            return False
        return True


UNBOUNDED = PriceBounds()


def parse_price_range(token: str | None) -> PriceBounds:
    """Parse a price-range token into cents bounds.

    Grammar (case-insensitive), amounts in whole currency units:
        ``all`` or empty -> unbounded
        ``under-N``      -> max N*100
        ``over-N``       -> min N*100
        ``A-B``          -> min A*100, max B*100

    Unrecognized tokens are treated as unbounded.
    """
    if not token:
        return UNBOUNDED
    text = str(token).strip().lower()
    if not text or text == "all":
        return UNBOUNDED

    match = _UNDER_RE.match(text)
    if match:
        return PriceBounds(max=int(match.group(1)) * 100)

    match = _OVER_RE.match(text)
    if match:
        return PriceBounds(min=int(match.group(1)) * 100)

    match = _BETWEEN_RE.match(text)
    if match:
        return PriceBounds(
            min=int(match.group(1)) * 100,
            max=int(match.group(2)) * 100,
        )

    return UNBOUNDED


def _to_units(cents: int | None) -> float | None:
    return None if cents is None else cents / 100


def base_price_predicate(bounds: PriceBounds) -> Predicate:
    """Predicate constraining a product's own ``base_price`` to the bounds."""
    return Range("base_price", bounds.min, bounds.max)


def variant_price_predicate(bounds: PriceBounds) -> Predicate:
    """Predicate matching variants priced inside the bounds.

    Each price alias is compared twice, once as cents and once as currency
    units, since the stored unit is unknown.
    """
    clauses = []
    for field in VARIANT_PRICE_FIELDS:
        clauses.append(Range(field, bounds.min, bounds.max))
        clauses.append(Range(field, _to_units(bounds.min), _to_units(bounds.max)))
    return any_of(*clauses)


def variant_price(variant: dict[str, Any]) -> Any:
    """Return the raw price of a variant from whichever alias is populated."""
    for field in VARIANT_PRICE_FIELDS:
        value = variant.get(field)
        if value is not None:
            return value
    return None


def variant_prices_in_cents(product: dict[str, Any]) -> list[int]:
    """Normalized, strictly positive variant prices of a product."""
    prices = []
    for variant in product.get("variants") or []:
        cents = normalize_to_cents(variant_price(variant))
        if cents > 0:
            prices.append(cents)
    return prices


def effective_price(product: dict[str, Any]) -> int:
    """Compute the price a product is listed and sorted at, in cents.

    The cheapest positive variant price wins; products without priced
    variants fall back to their base price.
    """
    prices = variant_prices_in_cents(product)
    if prices:
        return min(prices)
    return max(0, normalize_to_cents(product.get("base_price")))


def matches_price_bounds(product: dict[str, Any], bounds: PriceBounds) -> bool:
    """Check whether a product qualifies for a price range.

    A product qualifies by its own base price or by any of its variants.
    """
    if not bounds.is_bounded:
        return True
    if bounds.contains(normalize_to_cents(product.get("base_price"))):
        return True
    return any(bounds.contains(cents) for cents in variant_prices_in_cents(product))


def average_rating(product: dict[str, Any]) -> float:
    """Average of a product's attached rating records, 0 when unrated."""
    values = []
    for record in product.get("ratings") or []:
        try:
            values.append(float(record.get("rating")))
        except (TypeError, ValueError):
            continue
    if not values:
        return 0.0
    return sum(values) / len(values)
