"""SQLAlchemy models for the product catalog.

Defines Category, Product, ProductVariant and ProductRating tables.
Price columns are numeric with no unit guarantee: rows written by older
tooling hold cents, newer rows may hold decimal currency units.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.infrastructure.database import Base


def _new_id() -> str:
    return str(uuid4())


class Category(Base):
    """Product category.

    Attributes:
        id: Numeric category identifier.
        name: Display name.
        slug: URL slug.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, slug={self.slug})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"id": self.id, "name": self.name, "slug": self.slug}


class Product(Base):
    """Product listed by a vendor.

    Attributes:
        id: Unique product identifier (UUID string).
        vendor_id: Vendor that sells this product.
        category_id: Category ID, if the product has a relational category.
        title: Product title.
        slug: URL slug.
        description: Product description.
        base_price: Base price, cents or currency units.
        currency: Currency code (default USD).
        image_url: Main product image URL.
        is_published: Whether the product is visible in the marketplace.
        metadata_: Free-form JSON; ``category`` holds a tag for
            products without a relational category.
        created_at: Creation timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    vendor_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    slug: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    base_price: Mapped[float] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=False, default=0
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    metadata_: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    # Relationships
    variants: Mapped[list["ProductVariant"]] = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
    )
    ratings: Mapped[list["ProductRating"]] = relationship(
        "ProductRating",
        back_populates="product",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, title={self.title[:30]}...)>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a catalog row.

        Variants and ratings must already be loaded.

        Returns:
            Dictionary representation with embedded variants and ratings.
        """
        return {
            "id": self.id,
            "vendor_id": self.vendor_id,
            "category_id": self.category_id,
            "title": self.title,
            "slug": self.slug,
            "description": self.description,
            "base_price": self.base_price,
            "currency": self.currency,
            "image_url": self.image_url,
            "is_published": self.is_published,
            "metadata": dict(self.metadata_ or {}),
            "created_at": self.created_at,
            "variants": [v.to_dict() for v in self.variants],
            "ratings": [r.to_dict() for r in self.ratings],
        }


class ProductVariant(Base):
    """Purchasable variant of a product (size, colour, pack).

    Exactly one of the three price columns is populated per row; which one
    depends on the tool that wrote it.

    Attributes:
        id: Unique variant identifier.
        product_id: Parent product ID.
        title: Variant title (e.g., "Large, 500ml").
        price_in_cents: Price alias.
        price: Price alias.
        price_cents: Price alias.
        inventory_quantity: Units on hand.
    """

    __tablename__ = "product_variants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    product_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    price_in_cents: Mapped[float | None] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=True
    )
    price: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    price_cents: Mapped[float | None] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=True
    )
    inventory_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    product: Mapped["Product"] = relationship("Product", back_populates="variants")

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductVariant(id={self.id}, title={self.title})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, dropping unpopulated price aliases."""
        row: dict[str, Any] = {
            "id": self.id,
            "product_id": self.product_id,
            "title": self.title,
            "inventory_quantity": self.inventory_quantity,
        }
        for field in ("price_in_cents", "price", "price_cents"):
            value = getattr(self, field)
            if value is not None:
                row[field] = value
        return row


class ProductRating(Base):
    """Customer rating attached to a product.

    Attributes:
        id: Unique rating identifier.
        product_id: Rated product ID.
        rating: Stars, 1-5.
        created_at: Creation timestamp.
    """

    __tablename__ = "product_ratings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    product_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    product: Mapped["Product"] = relationship("Product", back_populates="ratings")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"id": self.id, "rating": self.rating}
