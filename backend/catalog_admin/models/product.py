"""Product model for catalog items."""

from typing import Optional

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from catalog_admin.models.base import Base, TimestampMixin


class Product(TimestampMixin, Base):
    """Catalog item with price and an optional category reference.

    ``category_id`` is validated when written; category deletion rewrites it
    explicitly, the foreign key only backs that up.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    thumbnail: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    brand: Mapped[str] = mapped_column(String(200), nullable=False, default="", index=True)

    category_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Pricing
    price: Mapped[float] = mapped_column(Float, nullable=False)
    discount_percentage: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, title='{self.title[:50]}', category_id={self.category_id})>"
