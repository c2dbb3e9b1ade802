from fastapi import APIRouter, Path, Request, status
from typing import Annotated
from utils.deps import db_dependency, user_dependency
from schemas.cart_schemas import AddCartItemRequest, UpdateCartItemRequest, CartData
from schemas.common_schemas import SuccessResponse, MessageData
from services.cart_service import CartService
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/carts",
    tags=["carts"]
)

ProductId = Annotated[int, Path(gt=0)]


def _cart_response(user, db) -> SuccessResponse[CartData]:
    return SuccessResponse(data=CartData(cart=CartService.get_cart_with_items(user, db)))


@router.get("", status_code=status.HTTP_200_OK, response_model=SuccessResponse[CartData])
@limiter.limit("60/minute")
async def get_cart(request: Request, user: user_dependency, db: db_dependency):
    return _cart_response(user, db)


@router.post("/items", status_code=status.HTTP_200_OK, response_model=SuccessResponse[CartData])
@limiter.limit("30/minute")
async def add_cart_item(request: Request, body: AddCartItemRequest, user: user_dependency, db: db_dependency):
    """
    Add a product to the cart. Adding a product already in the cart
    increases its quantity.
    """
    CartService.add_to_cart(user, body.product_id, body.quantity, db)

    return _cart_response(user, db)


@router.put("/items/{product_id}", status_code=status.HTTP_200_OK, response_model=SuccessResponse[CartData])
@limiter.limit("30/minute")
async def update_cart_item(request: Request, product_id: ProductId, body: UpdateCartItemRequest,
    user: user_dependency, db: db_dependency):
    CartService.update_cart_item(user, product_id, body.quantity, db)

    return _cart_response(user, db)


@router.delete("/items/{product_id}", status_code=status.HTTP_200_OK, response_model=SuccessResponse[CartData])
@limiter.limit("30/minute")
async def remove_cart_item(request: Request, product_id: ProductId, user: user_dependency, db: db_dependency):
    CartService.remove_from_cart(user, product_id, db)

    return _cart_response(user, db)


@router.delete("", status_code=status.HTTP_200_OK, response_model=SuccessResponse[MessageData])
@limiter.limit("30/minute")
async def clear_cart(request: Request, user: user_dependency, db: db_dependency):
    CartService.clear_cart(user, db)

    return SuccessResponse(data=MessageData(message="Cart cleared successfully"))
