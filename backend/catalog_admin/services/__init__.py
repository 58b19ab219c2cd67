"""Services module for catalog business logic.

Services own a request-scoped AsyncSession, talk to the stores through the
repositories and raise the errors defined in ``catalog_admin.core.exceptions``.
"""

from catalog_admin.services.aggregation_service import AggregationService, CategoryCount
from catalog_admin.services.category_service import CategoryService
from catalog_admin.services.listing_service import ListingService, Page, ProductRow
from catalog_admin.services.product_service import ProductService

__all__ = [
    "AggregationService",
    "CategoryCount",
    "CategoryService",
    "ListingService",
    "Page",
    "ProductRow",
    "ProductService",
]
