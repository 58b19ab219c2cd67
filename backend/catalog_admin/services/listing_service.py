"""Paginated category and product listings."""

from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Sequence, TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.core.exceptions import translate_store_errors
from catalog_admin.models.product import Product
from catalog_admin.repositories import ProductFilter, ProductRepository
from catalog_admin.services.aggregation_service import (
    AggregationService,
    CategoryCount,
    resolve_category_name,
)

logger = structlog.get_logger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100

T = TypeVar("T")


def clamp_limit(limit: Any) -> int:
    """Page size in [1, MAX_LIMIT]; missing, unparseable or zero means DEFAULT_LIMIT."""
    try:
        value = int(limit)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT
    if value == 0:
        return DEFAULT_LIMIT
    return min(MAX_LIMIT, max(1, value))


def clamp_skip(skip: Any) -> int:
    """Offset >= 0; missing or unparseable means 0."""
    try:
        value = int(skip)
    except (TypeError, ValueError):
        return 0
    return max(0, value)


@dataclass
class Page(Generic[T]):
    """One slice of a listing plus the unsliced total."""

    items: List[T]
    total: int
    skip: int
    limit: int


@dataclass
class ProductRow:
    """A product with its resolved category display name."""

    product: Product
    category: str


class ListingService:
    """Applies skip/limit/filter/search to both collections."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.products = ProductRepository(db)
        self.aggregation = AggregationService(db)
        self.logger = logger.bind(service="listing_service")

    @translate_store_errors
    async def list_categories(self, limit: Any = None, skip: Any = None) -> Page[CategoryCount]:
        """Categories ranked by product count, sliced to one page."""
        limit = clamp_limit(limit)
        skip = clamp_skip(skip)

        ranked = await self.aggregation.ranked_categories()
        page = ranked[skip:skip + limit]

        self.logger.info("categories_listed", total=len(ranked), skip=skip, limit=limit, returned=len(page))
        return Page(items=page, total=len(ranked), skip=skip, limit=limit)

    @translate_store_errors
    async def list_products(
        self,
        limit: Any = None,
        skip: Any = None,
        category_ids: Optional[Sequence[int]] = None,
        search: Optional[str] = None,
    ) -> Page[ProductRow]:
        """Products ordered by id, filtered by category and text search.

        Args:
            limit: Page size, clamped to [1, 100]
            skip: Offset, clamped to >= 0
            category_ids: Keep products in one of these (existing) categories
            search: Case-insensitive substring of title or brand

        Returns:
            Page of ProductRow with the filtered (unsliced) total
        """
        limit = clamp_limit(limit)
        skip = clamp_skip(skip)
        product_filter = ProductFilter(
            category_ids=list(category_ids or []),
            search=search.strip() if search and search.strip() else None,
        )

        total = await self.products.count(product_filter)
        products = await self.products.find_many(product_filter, skip=skip, limit=limit)
        names = await self.aggregation.name_by_category() if products else {}

        rows = [ProductRow(product=p, category=resolve_category_name(p.category_id, names)) for p in products]

        self.logger.info(
            "products_listed",
            total=total,
            skip=skip,
            limit=limit,
            category_ids=product_filter.category_ids,
            search=product_filter.search,
            returned=len(rows),
        )
        return Page(items=rows, total=total, skip=skip, limit=limit)
