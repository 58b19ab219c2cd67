"""Product counts per category and category display names per product.

Counting runs as a GROUP BY in the database by default. The in-memory
path (``AGGREGATION_MODE=memory``) scans every product reference and tallies
it with a Counter; it gives identical results and is kept for stores
without grouping support and for cross-checking in tests.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.config import settings
from catalog_admin.repositories import CategoryRepository, ProductRepository

logger = structlog.get_logger(__name__)

# Display name for products whose category reference is null or dangling.
UNRESOLVED_CATEGORY_NAME = ""


@dataclass(frozen=True)
class CategoryCount:
    """A category together with the number of products referencing it."""

    id: int
    name: str
    count: int


def tally_category_refs(refs: Iterable[Optional[int]]) -> Dict[int, int]:
    """Count non-null category references."""
    return dict(Counter(ref for ref in refs if ref is not None))


def resolve_category_name(category_id: Optional[int], names: Mapping[int, str]) -> str:
    """Return the display name for a category reference.

    Null references and references to deleted categories both yield
    ``UNRESOLVED_CATEGORY_NAME``.
    """
    if category_id is None:
        return UNRESOLVED_CATEGORY_NAME
    return names.get(category_id, UNRESOLVED_CATEGORY_NAME)


def rank_by_count(counted: Iterable[CategoryCount]) -> List[CategoryCount]:
    """Sort by descending count; equal counts keep ascending id order."""
    return sorted(counted, key=lambda c: (-c.count, c.id))


class AggregationService:
    """Read-only joins between the category and product collections."""

    def __init__(self, db: AsyncSession, mode: Optional[str] = None):
        """Initialize aggregation service.

        Args:
            db: Async database session
            mode: "native" or "memory"; defaults to settings.AGGREGATION_MODE
        """
        self.db = db
        self.mode = mode or settings.AGGREGATION_MODE
        self.categories = CategoryRepository(db)
        self.products = ProductRepository(db)
        self.logger = logger.bind(service="aggregation_service", mode=self.mode)

    async def count_by_category(self) -> Dict[int, int]:
        """Map category id -> product count. Missing keys mean zero."""
        if self.mode == "memory":
            counts = tally_category_refs(await self.products.category_refs())
        else:
            counts = await self.products.aggregate_count()

        self.logger.debug("category_counts_computed", categories_with_products=len(counts))
        return counts

    async def count_for(self, category_id: int) -> int:
        counts = await self.count_by_category()
        return counts.get(category_id, 0)

    async def name_by_category(self) -> Dict[int, str]:
        """Map category id -> category name."""
        return {c.id: c.name for c in await self.categories.find_many()}

    async def ranked_categories(self) -> List[CategoryCount]:
        """Every category with its product count, most-populated first."""
        categories = await self.categories.find_many()
        counts = await self.count_by_category()

        return rank_by_count(
            CategoryCount(id=c.id, name=c.name, count=counts.get(c.id, 0))
            for c in categories
        )
