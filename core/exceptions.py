"""
Domain errors raised by the service layer.

Every error carries the HTTP status it maps to, so routers never translate
them by hand; the handler registered in main.py renders them as
{"success": false, "message": ...}.
"""

from fastapi import HTTPException
from starlette import status


class AppError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Application error"

    def __init__(self, message: str | None = None):
        super().__init__(status_code=self.status_code, detail=message or self.message)


class EmailConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "A user with this email address already exists. Please use a different email."


class InvalidCredentialError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Incorrect email or password"


class ProductNotFoundError(AppError):
    message = "Product not found"


class CartNotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Cart not found"


class ItemNotFoundInCartError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Item not found in the cart"


class CartIsEmptyError(AppError):
    message = "Cart is empty"


class NoValidItemsSelectedError(AppError):
    message = "No valid items selected"


class OrderNotFoundError(AppError):
    # Same error whether the order is missing or owned by someone else
    message = "Order not found"
