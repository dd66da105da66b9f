#!/usr/bin/env python3
"""Seed demo catalog script.

Creates the catalog tables and loads a deterministic demo catalog with
mixed price units, variants and ratings.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --mode full --seed 7
    python scripts/seed_catalog.py --no-clear
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog
from sqlalchemy import delete

from marketplace.catalog.generator import CatalogGenerator, GeneratorConfig
from marketplace.catalog.models import Category, Product, ProductRating, ProductVariant
from marketplace.infrastructure.database import Base, async_session_factory, engine
from marketplace.infrastructure.logging_config import configure_logging

logger = structlog.get_logger()


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def to_models(row: dict) -> Product:
    """Build ORM objects from a generated catalog row."""
    return Product(
        id=row["id"],
        vendor_id=row["vendor_id"],
        category_id=row["category_id"],
        title=row["title"],
        slug=row["slug"],
        description=row["description"],
        base_price=row["base_price"],
        currency=row["currency"],
        image_url=row["image_url"],
        is_published=row["is_published"],
        metadata_=row["metadata"],
        created_at=row["created_at"],
        variants=[ProductVariant(**variant) for variant in row["variants"]],
        ratings=[ProductRating(**rating) for rating in row["ratings"]],
    )


async def seed(config: GeneratorConfig, clear: bool) -> dict:
    """Seed the demo catalog.

    Args:
        config: Generator configuration.
        clear: Whether to delete existing catalog rows first.

    Returns:
        Seeding result with counts.
    """
    generator = CatalogGenerator(config)
    rows = generator.generate_list()

    async with async_session_factory() as session:
        if clear:
            for model in (ProductRating, ProductVariant, Product, Category):
                await session.execute(delete(model))

        session.add_all(Category(**category) for category in generator.categories())
        await session.flush()
        session.add_all(to_models(row) for row in rows)
        await session.commit()

    return {
        "products_created": len(rows),
        "variants_created": sum(len(r["variants"]) for r in rows),
        "ratings_created": sum(len(r["ratings"]) for r in rows),
    }


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed the demo product catalog")
    parser.add_argument(
        "--mode",
        choices=["small", "full"],
        default="small",
        help="Catalog size: small (~12 products) or full (~24 products)",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Don't clear existing catalog rows before seeding",
    )
    args = parser.parse_args()

    configure_logging(json=False)

    config = GeneratorConfig.small() if args.mode == "small" else GeneratorConfig()
    config.seed = args.seed

    logger.info("Creating database tables")
    await create_tables()

    result = await seed(config, clear=not args.no_clear)
    logger.info("Catalog seeded", mode=args.mode, **result)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
