"""Category Pydantic schemas for request/response validation."""

from typing import List, Optional

from pydantic import BaseModel

from catalog_admin.schemas.common import CamelModel


class CategoryWriteRequest(BaseModel):
    """Body of POST /categories and PUT /categories/{id}.

    ``name`` is optional here so that a missing or blank name is reported by
    the service with its own message.
    """

    name: Optional[str] = None


class CategoryResponse(CamelModel):
    """Category with the number of products referencing it."""

    id: int
    name: str
    count: int = 0


class CategoryListResponse(CamelModel):
    """One page of categories, most products first."""

    categories: List[CategoryResponse]
    total: int
    skip: int
    limit: int


class CategoryDeleteResponse(CamelModel):
    id: int
    name: str
    deleted: bool = True
