"""Pydantic schemas for the catalog API.

All request/response models are defined here for easy import.
"""

from catalog_admin.schemas.common import CamelModel, ErrorResponse
from catalog_admin.schemas.category import (
    CategoryDeleteResponse,
    CategoryListResponse,
    CategoryResponse,
    CategoryWriteRequest,
)
from catalog_admin.schemas.product import (
    ProductCreateRequest,
    ProductDeleteResponse,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
    dump_product,
    resolve_select,
)
from catalog_admin.schemas.health import HealthCheckResponse

__all__ = [
    # Common
    "CamelModel",
    "ErrorResponse",
    # Category
    "CategoryWriteRequest",
    "CategoryResponse",
    "CategoryListResponse",
    "CategoryDeleteResponse",
    # Product
    "ProductCreateRequest",
    "ProductUpdateRequest",
    "ProductResponse",
    "ProductDeleteResponse",
    "ProductListResponse",
    "dump_product",
    "resolve_select",
    # Health
    "HealthCheckResponse",
]
