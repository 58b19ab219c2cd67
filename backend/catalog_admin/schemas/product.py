"""Product Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set

from pydantic import Field

from catalog_admin.schemas.common import CamelModel


class ProductCreateRequest(CamelModel):
    """Body of POST /products."""

    title: str = Field(min_length=1, max_length=500)
    category_id: Optional[int] = None
    price: float = Field(ge=0)
    thumbnail: str = Field(default="", max_length=1000)
    brand: str = Field(default="", max_length=200)
    discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    rating: float = Field(default=0, ge=0, le=5)
    stock: int = Field(default=0, ge=0)


class ProductUpdateRequest(CamelModel):
    """Body of PUT /products/{id}. Only fields present in the body are written."""

    title: Optional[str] = Field(default=None, max_length=500)
    category_id: Optional[int] = None
    price: Optional[float] = Field(default=None, ge=0)
    thumbnail: Optional[str] = Field(default=None, max_length=1000)
    brand: Optional[str] = Field(default=None, max_length=200)
    discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    stock: Optional[int] = Field(default=None, ge=0)


class ProductResponse(CamelModel):
    """Product with its resolved category display name."""

    id: int
    title: str
    thumbnail: str = ""
    brand: str = ""
    category_id: Optional[int] = None
    category: str = ""
    price: float
    discount_percentage: Optional[float] = None
    rating: float = 0
    stock: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_product(cls, product: Any, category: str) -> "ProductResponse":
        return cls.model_validate(product).model_copy(update={"category": category})


class ProductDeleteResponse(ProductResponse):
    is_deleted: bool = True
    deleted_on: datetime


class ProductListResponse(CamelModel):
    """One page of products.

    Items are plain dicts because ``select`` can trim them to a subset of
    the product fields.
    """

    products: List[Dict[str, Any]]
    total: int
    skip: int
    limit: int


# Wire name and attribute name both select a field.
_SELECTABLE: Dict[str, str] = {}
for _name, _field in ProductResponse.model_fields.items():
    _SELECTABLE[_name] = _name
    _SELECTABLE[_field.alias or _name] = _name


def resolve_select(requested: Iterable[str]) -> Optional[Set[str]]:
    """Map requested field names to ProductResponse attributes.

    Unknown names are ignored and ``category`` is always kept. Returns None
    (no restriction) when nothing was requested.
    """
    requested = list(requested)
    if not requested:
        return None
    fields = {_SELECTABLE[name] for name in requested if name in _SELECTABLE}
    fields.add("category")
    return fields


def dump_product(response: ProductResponse, fields: Optional[Set[str]] = None) -> Dict[str, Any]:
    return response.model_dump(mode="json", by_alias=True, include=fields)
