"""Tests for the demo catalog generator."""

import pytest

from marketplace.catalog.generator import CATEGORIES, CatalogGenerator, GeneratorConfig
from marketplace.catalog.pricing import (
    VARIANT_PRICE_FIELDS,
    effective_price,
    matches_price_bounds,
    parse_price_range,
)
from marketplace.catalog.service import QueryOptions, get_products
from marketplace.catalog.store import InMemoryCatalogStore


class TestGeneratorConfig:
    """Tests for GeneratorConfig."""

    def test_small_config(self) -> None:
        """Small config creates a compact catalog."""
        config = GeneratorConfig.small()
        assert config.products_per_category == 3
        assert config.products_per_category < GeneratorConfig().products_per_category


class TestCatalogGenerator:
    """Tests for CatalogGenerator."""

    @pytest.fixture
    def generator(self) -> CatalogGenerator:
        """Create generator with small config."""
        return CatalogGenerator(GeneratorConfig.small())

    def test_generate_products(self, generator: CatalogGenerator) -> None:
        """One batch of products per category."""
        products = generator.generate_list()
        assert len(products) == 3 * len(CATEGORIES)
        assert len({p["id"] for p in products}) == len(products)

    def test_deterministic_generation(self) -> None:
        """Same seed produces same products."""
        products1 = CatalogGenerator(GeneratorConfig(seed=42, products_per_category=2)).generate_list()
        products2 = CatalogGenerator(GeneratorConfig(seed=42, products_per_category=2)).generate_list()

        assert products1 == products2

    def test_different_seeds_produce_different_products(self) -> None:
        """Different seeds produce different products."""
        products1 = CatalogGenerator(GeneratorConfig(seed=42, products_per_category=2)).generate_list()
        products2 = CatalogGenerator(GeneratorConfig(seed=99, products_per_category=2)).generate_list()

        assert {p["id"] for p in products1} != {p["id"] for p in products2}

    def test_variants_use_one_price_alias(self, generator: CatalogGenerator) -> None:
        """Each variant carries exactly one price field."""
        for product in generator.generate():
            for variant in product["variants"]:
                aliases = [f for f in VARIANT_PRICE_FIELDS if f in variant]
                assert len(aliases) == 1
                assert variant["product_id"] == product["id"]

    def test_every_product_has_a_positive_price(self, generator: CatalogGenerator) -> None:
        for product in generator.generate():
            assert effective_price(product) > 0

    def test_categories_match_products(self, generator: CatalogGenerator) -> None:
        category_ids = {c["id"] for c in generator.categories()}
        for product in generator.generate():
            assert product["category_id"] is None or product["category_id"] in category_ids
            assert product["metadata"]["category"]

    @pytest.mark.asyncio
    async def test_generated_catalog_is_queryable(self) -> None:
        """Price-range results over generated data all fall inside the range."""
        generator = CatalogGenerator(GeneratorConfig())
        store = InMemoryCatalogStore(generator.generate(), generator.categories())

        page = await get_products(
            QueryOptions(price_range="10-40", sort_by="price_asc", per_page=100), store
        )

        bounds = parse_price_range("10-40")
        assert page.error is None
        assert page.total == len(page.products)
        assert all(matches_price_bounds(p, bounds) for p in page.products)
        prices = [p["effective_price"] for p in page.products]
        assert prices == sorted(prices)
