"""SQLAlchemy models for the catalog.

All models are imported here so ``Base.metadata`` knows every table.
"""

from catalog_admin.models.base import Base, TimestampMixin
from catalog_admin.models.category import Category
from catalog_admin.models.product import Product
from catalog_admin.models.id_sequence import IdSequence

__all__ = [
    "Base",
    "TimestampMixin",
    "Category",
    "Product",
    "IdSequence",
]
