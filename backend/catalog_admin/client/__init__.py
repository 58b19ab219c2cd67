"""Client-side helpers for catalog front ends.

``CatalogApiClient`` talks to the HTTP API; ``PageCache`` keeps fetched
pages and applies optimistic updates after writes.
"""

from catalog_admin.client.api_client import CatalogApiClient
from catalog_admin.client.formatting import format_category_name, format_discount, format_price
from catalog_admin.client.page_cache import (
    CachedPage,
    InvalidTransition,
    PageCache,
    PageKey,
    PageState,
    PageStatus,
)
from catalog_admin.client.pagination import ELLIPSIS, PageWindow

__all__ = [
    "CatalogApiClient",
    "CachedPage",
    "InvalidTransition",
    "PageCache",
    "PageKey",
    "PageState",
    "PageStatus",
    "PageWindow",
    "ELLIPSIS",
    "format_category_name",
    "format_discount",
    "format_price",
]
