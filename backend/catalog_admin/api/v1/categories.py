"""Categories API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.config import settings
from catalog_admin.dependencies import get_cache, get_db
from catalog_admin.schemas import (
    CategoryDeleteResponse,
    CategoryListResponse,
    CategoryResponse,
    CategoryWriteRequest,
)
from catalog_admin.services.cache_service import (
    CacheService,
    cache_key_for_categories,
    invalidate_category_cache,
)
from catalog_admin.services.category_service import CategoryService
from catalog_admin.services.listing_service import ListingService, clamp_limit, clamp_skip

router = APIRouter()


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    limit: Optional[str] = Query(None, description="Items per page (1-100, default 10)"),
    skip: Optional[str] = Query(None, description="Number of categories to skip"),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """List categories ordered by product count (descending).

    Cached for CATEGORY_CACHE_TTL seconds; writes clear the cache.
    """
    limit_value = clamp_limit(limit)
    skip_value = clamp_skip(skip)
    cache_key = cache_key_for_categories(limit_value, skip_value)

    cached = await cache.get(cache_key)
    if cached:
        return CategoryListResponse.model_validate_json(cached)

    service = ListingService(db)
    page = await service.list_categories(limit=limit_value, skip=skip_value)

    response = CategoryListResponse(
        categories=[CategoryResponse.model_validate(c) for c in page.items],
        total=page.total,
        skip=page.skip,
        limit=page.limit,
    )

    await cache.set(cache_key, response.model_dump_json(by_alias=True), ttl=settings.CATEGORY_CACHE_TTL)
    return response


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    body: CategoryWriteRequest,
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Create a category. The name is stored in slug form."""
    service = CategoryService(db)
    category = await service.create_category(body.name)
    await invalidate_category_cache(cache)

    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    body: CategoryWriteRequest,
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Rename a category."""
    service = CategoryService(db)
    category = await service.update_category(category_id, body.name)
    await invalidate_category_cache(cache)

    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", response_model=CategoryDeleteResponse)
async def delete_category(
    category_id: int,
    transfer_to_category_id: Optional[int] = Query(
        None,
        alias="transferToCategoryId",
        description="Move the category's products here instead of clearing their category",
    ),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Delete a category, moving or un-categorizing its products."""
    service = CategoryService(db)
    result = await service.delete_category(category_id, transfer_to_category_id=transfer_to_category_id)
    await invalidate_category_cache(cache)

    return CategoryDeleteResponse(**result)
