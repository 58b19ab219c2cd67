"""Category model for product grouping."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from catalog_admin.models.base import Base, TimestampMixin


class Category(TimestampMixin, Base):
    """Named product grouping.

    ``id`` is assigned by the identity generator, never by the database,
    and ``name`` is stored in slug form (``home-decoration``).
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False, comment="Slug form")

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
