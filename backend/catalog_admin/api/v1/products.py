"""Products API endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.core.exceptions import ValidationError
from catalog_admin.dependencies import get_cache, get_db
from catalog_admin.schemas import (
    ProductCreateRequest,
    ProductDeleteResponse,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
    dump_product,
    resolve_select,
)
from catalog_admin.services.cache_service import CacheService, invalidate_category_cache
from catalog_admin.services.listing_service import ListingService
from catalog_admin.services.product_service import ProductService
from catalog_admin.utils.normalizer import parse_csv, parse_int_list

router = APIRouter()


@router.get("", response_model=ProductListResponse)
async def list_products(
    limit: Optional[str] = Query(None, description="Items per page (1-100, default 10)"),
    skip: Optional[str] = Query(None, description="Number of products to skip"),
    category_id: Optional[List[str]] = Query(
        None,
        alias="categoryId",
        description="Category filter; repeat the parameter or comma-separate ids",
    ),
    q: Optional[str] = Query(None, description="Case-insensitive search on title or brand"),
    select: Optional[str] = Query(None, description="Comma-separated fields to return"),
    db: AsyncSession = Depends(get_db),
):
    """List products ordered by id with their category display names."""
    try:
        category_ids = parse_int_list(category_id)
    except ValueError:
        raise ValidationError("categoryId must be a list of integers")

    fields = resolve_select(parse_csv(select))

    service = ListingService(db)
    page = await service.list_products(limit=limit, skip=skip, category_ids=category_ids, search=q)

    return ProductListResponse(
        products=[
            dump_product(ProductResponse.from_product(row.product, row.category), fields)
            for row in page.items
        ],
        total=page.total,
        skip=page.skip,
        limit=page.limit,
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get product details by ID."""
    service = ProductService(db)
    product, category = await service.get_product(product_id)

    return ProductResponse.from_product(product, category)


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(
    body: ProductCreateRequest,
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Create a product. ``categoryId`` must reference an existing category."""
    service = ProductService(db)
    product, category = await service.create_product(body.model_dump())
    await invalidate_category_cache(cache)

    return ProductResponse.from_product(product, category)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    body: ProductUpdateRequest,
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Partially update a product; omitted fields are left unchanged."""
    service = ProductService(db)
    product, category = await service.update_product(product_id, body.model_dump(exclude_unset=True))
    await invalidate_category_cache(cache)

    return ProductResponse.from_product(product, category)


@router.delete("/{product_id}", response_model=ProductDeleteResponse)
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Delete a product and return it flagged as deleted."""
    service = ProductService(db)
    product, category, deleted_on = await service.delete_product(product_id)
    await invalidate_category_cache(cache)

    response = ProductResponse.from_product(product, category)
    return ProductDeleteResponse(**response.model_dump(), is_deleted=True, deleted_on=deleted_on)
