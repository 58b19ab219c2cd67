"""Product store operations."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.models.category import Category
from catalog_admin.models.product import Product


@dataclass
class ProductFilter:
    """Listing filter.

    Attributes:
        category_ids: Keep products whose category is one of these ids and
            still exists. Empty means no category filter.
        search: Case-insensitive substring matched against title or brand
    """

    category_ids: List[int] = field(default_factory=list)
    search: Optional[str] = None

    def apply(self, query: Select) -> Select:
        if self.category_ids:
            existing = select(Category.id).where(Category.id.in_(self.category_ids))
            query = query.where(Product.category_id.in_(existing))
        if self.search:
            query = query.where(
                or_(
                    Product.title.icontains(self.search, autoescape=True),
                    Product.brand.icontains(self.search, autoescape=True),
                )
            )
        return query


class ProductRepository:
    """Data access for the products collection."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, product_id: int) -> Optional[Product]:
        result = await self.db.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def find_many(
        self,
        product_filter: Optional[ProductFilter] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Product]:
        """Return products ordered by id ascending."""
        query = select(Product)
        if product_filter:
            query = product_filter.apply(query)
        query = query.order_by(Product.id.asc()).offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(self, product_filter: Optional[ProductFilter] = None) -> int:
        query = select(func.count(Product.id))
        if product_filter:
            query = product_filter.apply(query)
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def max_id(self) -> int:
        result = await self.db.execute(select(func.max(Product.id)))
        return result.scalar() or 0

    async def insert(self, product: Product) -> Product:
        self.db.add(product)
        await self.db.flush()
        return product

    async def update_one(self, product: Product, **values) -> Product:
        for name, value in values.items():
            setattr(product, name, value)
        await self.db.flush()
        return product

    async def delete_one(self, product: Product) -> None:
        await self.db.delete(product)
        await self.db.flush()

    async def reassign_category(self, source_id: int, target_id: Optional[int]) -> int:
        """Point every product of ``source_id`` at ``target_id`` (None clears it).

        Returns:
            Number of products rewritten
        """
        result = await self.db.execute(
            update(Product)
            .where(Product.category_id == source_id)
            .values(category_id=target_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def aggregate_count(self) -> Dict[int, int]:
        """Count products per referenced category id with a GROUP BY."""
        result = await self.db.execute(
            select(Product.category_id, func.count(Product.id))
            .where(Product.category_id.is_not(None))
            .group_by(Product.category_id)
        )
        return {category_id: count for category_id, count in result.all()}

    async def category_refs(self) -> List[Optional[int]]:
        """Return the category reference of every product (full scan)."""
        result = await self.db.execute(select(Product.category_id))
        return list(result.scalars().all())
