"""Category store operations."""

from typing import Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.models.category import Category


class CategoryRepository:
    """Data access for the categories collection."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, category_id: int) -> Optional[Category]:
        result = await self.db.execute(select(Category).where(Category.id == category_id))
        return result.scalar_one_or_none()

    async def find_many(self, ids: Optional[Iterable[int]] = None) -> List[Category]:
        """Return categories ordered by id, optionally restricted to ``ids``."""
        query = select(Category).order_by(Category.id.asc())
        if ids is not None:
            query = query.where(Category.id.in_(list(ids)))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_by_name(
        self,
        names: Iterable[str],
        exclude_id: Optional[int] = None,
    ) -> Optional[Category]:
        """Return the first category whose name is one of ``names``.

        Args:
            names: Candidate names (raw and slug form)
            exclude_id: Category to ignore, used when renaming

        Returns:
            The clashing Category or None
        """
        query = select(Category).where(Category.name.in_(set(names)))
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def max_id(self) -> int:
        result = await self.db.execute(select(func.max(Category.id)))
        return result.scalar() or 0

    async def insert(self, category: Category) -> Category:
        self.db.add(category)
        await self.db.flush()
        return category

    async def update_one(self, category: Category, **values) -> Category:
        for field, value in values.items():
            setattr(category, field, value)
        await self.db.flush()
        return category

    async def delete_one(self, category: Category) -> None:
        await self.db.delete(category)
        await self.db.flush()
