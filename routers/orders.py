from fastapi import APIRouter, Path, Query, Request, status
from typing import Annotated
from utils.deps import db_dependency, user_dependency
from schemas.common_schemas import SuccessResponse
from schemas.order_schemas import OrderView, OrderHistory, PartialOrderRequest
from services.order_service import OrderService, DEFAULT_HISTORY_PAGE_SIZE
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/orders",
    tags=["orders"]
)


@router.post("", status_code=status.HTTP_200_OK, response_model=SuccessResponse[OrderView])
@limiter.limit("10/minute")
async def place_order(request: Request, user: user_dependency, db: db_dependency):
    """
    Check out the whole cart. The cart is emptied once the order exists.
    """
    return SuccessResponse(data=OrderService.create_order(user, db))


@router.post("/partial", status_code=status.HTTP_200_OK, response_model=SuccessResponse[OrderView])
@limiter.limit("10/minute")
async def place_partial_order(request: Request, body: PartialOrderRequest, user: user_dependency, db: db_dependency):
    """
    Check out only the selected cart lines; the rest stay in the cart.
    """
    order = OrderService.create_order(user, db, selected_item_ids=body.selected_item_ids)

    return SuccessResponse(data=order)


@router.get("", status_code=status.HTTP_200_OK, response_model=SuccessResponse[OrderHistory])
@limiter.limit("60/minute")
async def get_order_history(request: Request, user: user_dependency, db: db_dependency,
    page: Annotated[int, Query()] = 1,
    page_size: Annotated[int, Query()] = DEFAULT_HISTORY_PAGE_SIZE):
    """
    Paginated order history, newest first. Out-of-range paging input is
    clamped rather than rejected.
    """
    return SuccessResponse(data=OrderService.get_order_history(user, db, page, page_size))


@router.get("/{order_id}", status_code=status.HTTP_200_OK, response_model=SuccessResponse[OrderView])
@limiter.limit("60/minute")
async def get_order(request: Request, order_id: Annotated[int, Path()], user: user_dependency, db: db_dependency):
    return SuccessResponse(data=OrderService.get_order_by_id(order_id, user, db))
