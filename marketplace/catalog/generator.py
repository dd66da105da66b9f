"""Demo catalog generator with deterministic seeding.

Produces catalog rows in the shape stores return, including the messy parts
of real marketplace data: base prices written in cents or in currency units,
variant prices under any of the three price aliases, and products tagged
with a category in metadata instead of a relational category.
"""

import hashlib
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator

from marketplace.catalog.pricing import VARIANT_PRICE_FIELDS


# ============================================================================
# Constants
# ============================================================================

VENDORS = [
    "island-spice-co",
    "blue-reef-crafts",
    "sunrise-bakery",
    "palm-and-thread",
]

ADJECTIVES = [
    "Classic",
    "Handmade",
    "Organic",
    "Spiced",
    "Island",
    "Premium",
    "Sunset",
    "Coral",
]

# (id, name, slug, price range in cents, product nouns)
CATEGORIES: list[tuple[int, str, str, tuple[int, int], list[str]]] = [
    (1, "Food & Spices", "food-spices", (499, 2999), ["Hot Sauce", "Curry Powder", "Jerk Seasoning"]),
    (2, "Crafts", "crafts", (1999, 19999), ["Woven Basket", "Carved Bowl", "Shell Necklace"]),
    (3, "Bakery", "bakery", (299, 1999), ["Coconut Bread", "Rum Cake", "Cassava Pone"]),
    (4, "Apparel", "apparel", (2499, 12999), ["Linen Shirt", "Batik Wrap", "Straw Hat"]),
]

VARIANT_LABELS = ["Small", "Medium", "Large", "Gift Pack"]

EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)


# ============================================================================
# Generator Configuration
# ============================================================================


@dataclass
class GeneratorConfig:
    """Configuration for demo catalog generation.

    Attributes:
        seed: Random seed for reproducibility.
        products_per_category: Number of products per category.
        max_variants: Max variants per product (0 disables variants).
        max_ratings: Max rating records per product.
    """

    seed: int = 42
    products_per_category: int = 6
    max_variants: int = 3
    max_ratings: int = 5

    @classmethod
    def small(cls) -> "GeneratorConfig":
        """Create config for a small demo catalog (~12 products)."""
        return cls(products_per_category=3, max_variants=2, max_ratings=3)


# ============================================================================
# Catalog Generator
# ============================================================================


class CatalogGenerator:
    """Generates demo catalog rows with deterministic seeding.

    Example usage:
        generator = CatalogGenerator(GeneratorConfig.small())
        store = InMemoryCatalogStore(generator.generate(), generator.categories())
    """

    def __init__(self, config: GeneratorConfig) -> None:
        """Initialize generator with configuration.

        Args:
            config: Generator configuration.
        """
        self.config = config

    def _deterministic_seed(self, *args: str | int) -> int:
        data = "|".join(str(a) for a in args)
        hash_bytes = hashlib.md5(data.encode()).digest()
        return int.from_bytes(hash_bytes[:4], "big")

    def _generate_id(self, *args: str | int) -> str:
        digest = hashlib.md5("|".join(str(a) for a in args).encode()).hexdigest()
        return f"{digest[:8]}-{digest[8:12]}-{digest[12:16]}-{digest[16:20]}-{digest[20:32]}"

    def categories(self) -> list[dict[str, Any]]:
        """Category rows used by generated products."""
        return [{"id": cid, "name": name, "slug": slug} for cid, name, slug, _, _ in CATEGORIES]

    def generate(self) -> Iterator[dict[str, Any]]:
        """Generate product rows.

        Yields:
            Product rows with embedded variants and ratings.
        """
        for category in CATEGORIES:
            for index in range(self.config.products_per_category):
                yield self._generate_product(category, index)

    def generate_list(self) -> list[dict[str, Any]]:
        """Generate all product rows as a list."""
        return list(self.generate())

    def _generate_product(
        self,
        category: tuple[int, str, str, tuple[int, int], list[str]],
        index: int,
    ) -> dict[str, Any]:
        category_id, category_name, category_slug, (low, high), nouns = category
        rng = random.Random(self._deterministic_seed(self.config.seed, category_id, index))

        title = f"{rng.choice(ADJECTIVES)} {rng.choice(nouns)}"
        product_id = self._generate_id(self.config.seed, category_id, index)

        cents = (rng.randint(low, high) // 100) * 100 + 99
        # Roughly a third of the rows were written in currency units.
        base_price: float | int = cents / 100 if rng.random() < 0.33 else cents

        # Some products only carry a metadata tag, no relational category.
        relational = rng.random() > 0.25

        return {
            "id": product_id,
            "vendor_id": rng.choice(VENDORS),
            "category_id": category_id if relational else None,
            "title": title,
            "slug": f"{title.lower().replace(' ', '-')}-{index}",
            "description": f"{title} from our {category_name.lower()} range.",
            "base_price": base_price,
            "currency": "USD",
            "image_url": None,
            "is_published": True,
            "metadata": {"category": category_slug},
            "created_at": EPOCH + timedelta(days=rng.randint(0, 365), minutes=index),
            "variants": list(self._generate_variants(product_id, cents, rng)),
            "ratings": [
                {"id": self._generate_id(product_id, "rating", n), "rating": rng.randint(1, 5)}
                for n in range(rng.randint(0, self.config.max_ratings))
            ],
        }

    def _generate_variants(
        self,
        product_id: str,
        base_cents: int,
        rng: random.Random,
    ) -> Iterator[dict[str, Any]]:
        count = rng.randint(0, self.config.max_variants)
        for label in VARIANT_LABELS[:count]:
            cents = max(99, int(base_cents * rng.uniform(0.5, 1.6)) // 100 * 100 + 99)
            field = rng.choice(VARIANT_PRICE_FIELDS)
            price: float | int = cents / 100 if field == "price" else cents
            yield {
                "id": self._generate_id(product_id, label),
                "product_id": product_id,
                "title": label,
                field: price,
                "inventory_quantity": rng.randint(0, 40),
            }
