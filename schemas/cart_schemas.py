from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, PositiveInt, computed_field
from schemas.common_schemas import Money


class AddCartItemRequest(BaseModel):
    product_id: PositiveInt
    quantity: PositiveInt = 1


class UpdateCartItemRequest(BaseModel):
    quantity: PositiveInt


class CartProduct(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Money
    description: str | None = None


class CartItemView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quantity: int
    product: CartProduct

    @computed_field
    @property
    def subtotal(self) -> Money:
        # priced at the product's current price, unlike order lines
        return self.quantity * self.product.price


class CartView(BaseModel):
    """
    Read model of a cart. A user without a cart gets the zero-valued
    instance (no id, no timestamps, no items).
    """
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[CartItemView] = []

    @computed_field
    @property
    def total(self) -> Money:
        return sum((item.subtotal for item in self.items), Decimal("0"))

    @computed_field
    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items if item.quantity > 0)


class CartData(BaseModel):
    cart: CartView
