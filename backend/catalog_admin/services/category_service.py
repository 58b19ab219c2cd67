"""Category lifecycle: creation, renaming and deletion.

Names are stored in slug form and must be unique. Deleting a category never
fails because of products referencing it: those products are either moved
to a transfer target or lose their category reference, in the same
transaction as the delete.
"""

from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.core.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
    translate_store_errors,
)
from catalog_admin.models.category import Category
from catalog_admin.repositories import CategoryRepository, ProductRepository
from catalog_admin.services.aggregation_service import AggregationService, CategoryCount
from catalog_admin.services.identity import CATEGORIES, IdGenerator, collection_lock, get_id_generator
from catalog_admin.utils.normalizer import slugify

logger = structlog.get_logger(__name__)

MAX_NAME_LENGTH = Category.__table__.c.name.type.length


class CategoryService:
    """Service enforcing category uniqueness, id assignment and deletion policy."""

    def __init__(self, db: AsyncSession, id_generator: Optional[IdGenerator] = None):
        """Initialize category service.

        Args:
            db: Async database session
            id_generator: Identity source; defaults to the configured strategy
        """
        self.db = db
        self.categories = CategoryRepository(db)
        self.products = ProductRepository(db)
        self.aggregation = AggregationService(db)
        self.id_generator = id_generator or get_id_generator()
        self.logger = logger.bind(service="category_service")

    async def _normalized_name(self, name: Optional[str], exclude_id: Optional[int] = None) -> str:
        """Validate ``name`` and return its slug.

        Raises:
            ValidationError: Name is empty after trimming or its slug is too long
            ConflictError: Raw or slug form is taken by another category
        """
        raw = (name or "").strip()
        if not raw:
            raise ValidationError("Category name is required")

        slug = slugify(raw)
        if len(slug) > MAX_NAME_LENGTH:
            raise ValidationError(f"Category name must be at most {MAX_NAME_LENGTH} characters")
        clash = await self.categories.find_by_name({raw, slug}, exclude_id=exclude_id)
        if clash:
            raise ConflictError(f"Category '{slug}' already exists")
        return slug

    async def get_category(self, category_id: int) -> Category:
        category = await self.categories.find_by_id(category_id)
        if not category:
            raise NotFoundError("Category", category_id)
        return category

    @translate_store_errors
    async def create_category(self, name: Optional[str]) -> CategoryCount:
        """Create a category with the next id.

        Returns:
            The new category with a product count of zero
        """
        async with collection_lock(CATEGORIES):
            slug = await self._normalized_name(name)
            category_id = await self.id_generator.next_id(self.db, CATEGORIES)

            category = await self.categories.insert(Category(id=category_id, name=slug))
            await self.db.commit()

        self.logger.info("category_created", category_id=category.id, name=category.name)
        return CategoryCount(id=category.id, name=category.name, count=0)

    @translate_store_errors
    async def update_category(self, category_id: int, name: Optional[str]) -> CategoryCount:
        """Rename a category.

        Returns:
            The renamed category with its current product count
        """
        async with collection_lock(CATEGORIES):
            category = await self.get_category(category_id)
            slug = await self._normalized_name(name, exclude_id=category_id)

            await self.categories.update_one(category, name=slug)
            await self.db.commit()

        count = await self.aggregation.count_for(category_id)
        self.logger.info("category_updated", category_id=category_id, name=slug, count=count)
        return CategoryCount(id=category_id, name=slug, count=count)

    @translate_store_errors
    async def delete_category(
        self,
        category_id: int,
        transfer_to_category_id: Optional[int] = None,
    ) -> dict:
        """Delete a category and resolve its products.

        Args:
            category_id: Category to delete
            transfer_to_category_id: Category receiving the products. When
                None, the products keep no category.

        Returns:
            {"id", "name", "deleted": True}

        Raises:
            NotFoundError: Category does not exist
            ValidationError: Transfer target equals the category or is missing
        """
        async with collection_lock(CATEGORIES):
            category = await self.get_category(category_id)

            if transfer_to_category_id is not None:
                if transfer_to_category_id == category_id:
                    raise ValidationError("Cannot transfer products to the category being deleted")
                target = await self.categories.find_by_id(transfer_to_category_id)
                if not target:
                    raise ValidationError(
                        f"Transfer target category '{transfer_to_category_id}' does not exist"
                    )

            moved = await self.products.reassign_category(category_id, transfer_to_category_id)
            name = category.name
            await self.categories.delete_one(category)
            await self.db.commit()

        self.logger.info(
            "category_deleted",
            category_id=category_id,
            name=name,
            products_reassigned=moved,
            transfer_to=transfer_to_category_id,
        )
        return {"id": category_id, "name": name, "deleted": True}
