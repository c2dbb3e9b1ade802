from decimal import Decimal
from typing import Annotated
from fastapi import APIRouter, Query, Request, status
from utils.deps import db_dependency
from schemas.common_schemas import SuccessResponse
from schemas.product_schemas import ProductFilters, ProductSearchResult, SortBy
from services.product_service import ProductService
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/products",
    tags=["products"]
)

@router.get("", status_code=status.HTTP_200_OK, response_model=SuccessResponse[ProductSearchResult])
@limiter.limit("60/minute")
async def search_products(
    request: Request,
    db: db_dependency,
    search: Annotated[str | None, Query(max_length=100)] = None,
    category_id: Annotated[int | None, Query(gt=0)] = None,
    min_price: Annotated[Decimal | None, Query(ge=0)] = None,
    max_price: Annotated[Decimal | None, Query(ge=0)] = None,
    sort_by: SortBy = "newest",
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1)] = 20,
):
    """
    Public catalog search. Page sizes above 100 are capped at 100.
    """
    filters = ProductFilters(
        search=search,
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        page=page,
        page_size=page_size,
    )

    return SuccessResponse(data=ProductService.search_products(filters, db))
