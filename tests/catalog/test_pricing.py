"""Tests for price normalization and price-range parsing."""

from decimal import Decimal

import pytest

from marketplace.catalog.predicates import Or, Range, evaluate
from marketplace.catalog.pricing import (
    PriceBounds,
    average_rating,
    effective_price,
    matches_price_bounds,
    normalize_to_cents,
    parse_price_range,
    variant_price,
    variant_price_predicate,
)


class TestNormalizeToCents:
    """Tests for normalize_to_cents."""

    def test_whole_number_is_already_cents(self) -> None:
        assert normalize_to_cents(1999) == 1999

    def test_fractional_value_is_currency_units(self) -> None:
        assert normalize_to_cents(19.99) == 1999

    def test_whole_float_is_cents(self) -> None:
        assert normalize_to_cents(2500.0) == 2500

    def test_decimal_and_numeric_string(self) -> None:
        assert normalize_to_cents(Decimal("19.99")) == 1999
        assert normalize_to_cents("12.5") == 1250

    @pytest.mark.parametrize(
        "value",
        [None, "abc", float("nan"), float("inf"), float("-inf"), True, [], {}],
    )
    def test_non_numeric_becomes_zero(self, value) -> None:
        assert normalize_to_cents(value) == 0

    def test_whole_dollar_price_reads_as_cents(self) -> None:
        """A $50.00 price stored as 50 is indistinguishable from 50 cents."""
        assert normalize_to_cents(50) == 50


class TestParsePriceRange:
    """Tests for price-range token parsing."""

    def test_under(self) -> None:
        assert parse_price_range("under-50") == PriceBounds(min=None, max=5000)

    def test_over(self) -> None:
        assert parse_price_range("over-100") == PriceBounds(min=10000, max=None)

    def test_between(self) -> None:
        assert parse_price_range("25-75") == PriceBounds(min=2500, max=7500)

    def test_case_insensitive_and_trimmed(self) -> None:
        assert parse_price_range("  UNDER-20 ") == PriceBounds(max=2000)

    @pytest.mark.parametrize(
        "token",
        ["all", "ALL", "", None, "garbage", "under-abc", "10-20-30", "over50", "$10-$20"],
    )
    def test_unrecognized_is_unbounded(self, token) -> None:
        bounds = parse_price_range(token)
        assert bounds == PriceBounds(min=None, max=None)
        assert bounds.is_bounded is False

    def test_contains_is_inclusive(self) -> None:
        bounds = PriceBounds(min=2500, max=7500)
        assert bounds.contains(2500)
        assert bounds.contains(7500)
        assert not bounds.contains(2499)
        assert not bounds.contains(7501)


class TestEffectivePrice:
    """Tests for effective price selection."""

    def test_cheapest_variant_wins(self) -> None:
        product = {
            "base_price": 5000,
            "variants": [{"price_in_cents": 3000}, {"price_in_cents": 7000}],
        }
        assert effective_price(product) == 3000

    def test_no_variants_uses_base_price(self) -> None:
        assert effective_price({"base_price": 2500, "variants": []}) == 2500

    def test_variant_aliases_and_units_are_normalized(self) -> None:
        product = {
            "base_price": 99.0,
            "variants": [{"price": 12.5}, {"price_cents": 1300}],
        }
        assert effective_price(product) == 1250

    def test_zero_priced_variants_are_ignored(self) -> None:
        product = {"base_price": 4200, "variants": [{"price": 0}, {"price_cents": None}]}
        assert effective_price(product) == 4200

    def test_never_negative(self) -> None:
        assert effective_price({"base_price": -300}) == 0

    def test_missing_base_price(self) -> None:
        assert effective_price({}) == 0


class TestVariantPrice:
    """Tests for variant price alias resolution."""

    def test_first_populated_alias(self) -> None:
        assert variant_price({"price_in_cents": None, "price": 4.99}) == 4.99
        assert variant_price({"price_cents": 700}) == 700

    def test_no_alias(self) -> None:
        assert variant_price({"inventory_quantity": 3}) is None


class TestVariantPricePredicate:
    """Tests for the variant price predicate."""

    def test_covers_every_alias_in_both_units(self) -> None:
        predicate = variant_price_predicate(PriceBounds(min=1000, max=5000))
        assert isinstance(predicate, Or)
        assert Range("price", 1000, 5000) in predicate.clauses
        assert Range("price", 10.0, 50.0) in predicate.clauses
        assert len(predicate.clauses) == 6

    def test_matches_cents_and_currency_rows(self) -> None:
        predicate = variant_price_predicate(PriceBounds(max=5000))
        assert evaluate(predicate, {"price_in_cents": 1000})
        assert evaluate(predicate, {"price": 19.99})
        assert not evaluate(predicate, {"price_cents": 7500})
        assert not evaluate(predicate, {"inventory_quantity": 1})


class TestMatchesPriceBounds:
    """Tests for price range qualification."""

    def test_qualifies_by_base_price(self) -> None:
        assert matches_price_bounds({"base_price": 4000}, PriceBounds(max=5000))

    def test_qualifies_by_variant(self) -> None:
        product = {"base_price": 8000, "variants": [{"price": 10.5}]}
        assert matches_price_bounds(product, PriceBounds(max=5000))

    def test_rejected_when_nothing_in_range(self) -> None:
        product = {"base_price": 20000, "variants": [{"price_cents": 15000}]}
        assert not matches_price_bounds(product, PriceBounds(max=5000))

    def test_unbounded_accepts_everything(self) -> None:
        assert matches_price_bounds({"base_price": 10**9}, PriceBounds())


class TestAverageRating:
    """Tests for average rating."""

    def test_average(self) -> None:
        assert average_rating({"ratings": [{"rating": 4}, {"rating": 5}]}) == 4.5

    def test_unrated_is_zero(self) -> None:
        assert average_rating({"ratings": []}) == 0.0
        assert average_rating({}) == 0.0

    def test_skips_invalid_records(self) -> None:
        assert average_rating({"ratings": [{"rating": None}, {"rating": 3}]}) == 3.0
