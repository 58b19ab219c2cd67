"""Product service for managing the product catalog.

Handles product CRUD. Every returned product carries the display name of
its category, resolved at call time.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.core.exceptions import NotFoundError, ValidationError, translate_store_errors
from catalog_admin.models.product import Product
from catalog_admin.repositories import CategoryRepository, ProductRepository
from catalog_admin.services.aggregation_service import resolve_category_name
from catalog_admin.services.identity import PRODUCTS, IdGenerator, collection_lock, get_id_generator

logger = structlog.get_logger(__name__)

WRITABLE_FIELDS = (
    "title",
    "thumbnail",
    "brand",
    "category_id",
    "price",
    "discount_percentage",
    "rating",
    "stock",
)
REQUIRED_FIELDS = ("title", "price")
NOT_NULL_FIELDS = ("title", "price", "thumbnail", "brand", "rating", "stock")


class ProductService:
    """Service for managing products.

    Validates required fields and category references before every write.
    """

    def __init__(self, db: AsyncSession, id_generator: Optional[IdGenerator] = None):
        """Initialize product service.

        Args:
            db: Async database session
            id_generator: Identity source; defaults to the configured strategy
        """
        self.db = db
        self.products = ProductRepository(db)
        self.categories = CategoryRepository(db)
        self.id_generator = id_generator or get_id_generator()
        self.logger = logger.bind(service="product_service")

    async def _category_name(self, category_id: Optional[int]) -> str:
        if category_id is None:
            return resolve_category_name(None, {})
        category = await self.categories.find_by_id(category_id)
        names = {category.id: category.name} if category else {}
        return resolve_category_name(category_id, names)

    async def _check_category_ref(self, category_id: Optional[int]) -> None:
        if category_id is None:
            return
        if not await self.categories.find_by_id(category_id):
            raise ValidationError(f"Category '{category_id}' does not exist")

    def _check_required(self, fields: Dict[str, Any]) -> None:
        for name in NOT_NULL_FIELDS:
            if name in fields and fields[name] is None:
                raise ValidationError(f"Field '{name}' is required")
        if "title" in fields and not str(fields["title"]).strip():
            raise ValidationError("Field 'title' is required")

    @translate_store_errors
    async def get_product(self, product_id: int) -> Tuple[Product, str]:
        """Get product by ID with its category display name.

        Raises:
            NotFoundError: Product does not exist
        """
        product = await self.products.find_by_id(product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        return product, await self._category_name(product.category_id)

    @translate_store_errors
    async def create_product(self, fields: Dict[str, Any]) -> Tuple[Product, str]:
        """Insert a product with the next id.

        Args:
            fields: Column values keyed by model attribute name

        Returns:
            Tuple of (product, category display name)
        """
        values = {k: v for k, v in fields.items() if k in WRITABLE_FIELDS}
        for name in REQUIRED_FIELDS:
            values.setdefault(name, None)
        self._check_required(values)
        values["title"] = values["title"].strip()

        async with collection_lock(PRODUCTS):
            await self._check_category_ref(values.get("category_id"))
            product_id = await self.id_generator.next_id(self.db, PRODUCTS)
            product = await self.products.insert(Product(id=product_id, **values))
            await self.db.commit()
            await self.db.refresh(product)

        self.logger.info(
            "product_created",
            product_id=product.id,
            title=product.title[:50],
            category_id=product.category_id,
        )
        return product, await self._category_name(product.category_id)

    @translate_store_errors
    async def update_product(self, product_id: int, fields: Dict[str, Any]) -> Tuple[Product, str]:
        """Apply a partial update.

        Only keys present in ``fields`` are written; an explicit None on a
        required field is rejected, an explicit None ``category_id`` clears
        the reference.
        """
        product = await self.products.find_by_id(product_id)
        if not product:
            raise NotFoundError("Product", product_id)

        values = {k: v for k, v in fields.items() if k in WRITABLE_FIELDS}
        self._check_required(values)
        if "title" in values:
            values["title"] = values["title"].strip()
        if values.get("category_id") is not None and values["category_id"] != product.category_id:
            await self._check_category_ref(values["category_id"])

        await self.products.update_one(product, **values)
        await self.db.commit()
        await self.db.refresh(product)

        self.logger.info("product_updated", product_id=product_id, fields=sorted(values))
        return product, await self._category_name(product.category_id)

    @translate_store_errors
    async def delete_product(self, product_id: int) -> Tuple[Product, str, datetime]:
        """Hard-delete a product.

        Returns:
            Tuple of (deleted product, category display name, deletion time)
        """
        product = await self.products.find_by_id(product_id)
        if not product:
            raise NotFoundError("Product", product_id)

        category_name = await self._category_name(product.category_id)
        await self.products.delete_one(product)
        await self.db.commit()

        deleted_on = datetime.now(timezone.utc)
        self.logger.info("product_deleted", product_id=product_id)
        return product, category_name, deleted_on
