"""Repositories wrapping an injected AsyncSession, one per collection."""

from catalog_admin.repositories.category_repository import CategoryRepository
from catalog_admin.repositories.product_repository import ProductFilter, ProductRepository

__all__ = [
    "CategoryRepository",
    "ProductFilter",
    "ProductRepository",
]
