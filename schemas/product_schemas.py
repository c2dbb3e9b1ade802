from datetime import datetime
from decimal import Decimal
from typing import Literal
from pydantic import BaseModel, ConfigDict
from schemas.common_schemas import Money

SortBy = Literal["newest", "oldest", "price_asc", "price_desc", "name"]


class CategoryView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    created_at: datetime


class CategoryList(BaseModel):
    categories: list[CategoryView]


class ProductView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    price: Money
    category: CategoryView
    created_at: datetime
    updated_at: datetime


class ProductFilters(BaseModel):
    """Catalog search criteria. Every filter is optional; bounds are inclusive."""
    search: str | None = None
    category_id: int | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    sort_by: SortBy = "newest"
    page: int = 1
    page_size: int = 20


class ProductSearchResult(BaseModel):
    products: list[ProductView]
    total: int
    page: int
    total_pages: int
