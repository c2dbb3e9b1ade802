from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field, PositiveInt, computed_field
from schemas.common_schemas import Money

OrderStatus = Literal["pending", "processing", "completed", "cancelled"]


class PartialOrderRequest(BaseModel):
    selected_item_ids: list[PositiveInt] = Field(min_length=1)


class OrderProduct(BaseModel):
    id: int
    name: str
    description: str | None = None


class OrderItemView(BaseModel):
    id: int
    quantity: int
    price: Money
    product: OrderProduct

    @computed_field
    @property
    def subtotal(self) -> Money:
        return self.quantity * self.price

    @classmethod
    def from_model(cls, item) -> "OrderItemView":
        return cls(
            id=item.id,
            quantity=item.quantity,
            price=item.price,
            product=OrderProduct(
                id=item.product_id,
                name=item.product_name,
                description=item.product_description,
            ),
        )


class OrderView(BaseModel):
    id: int
    total: Money
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemView]

    @classmethod
    def from_model(cls, order) -> "OrderView":
        return cls(
            id=order.id,
            total=order.total,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[OrderItemView.from_model(item) for item in order.items],
        )


class OrderHistory(BaseModel):
    orders: list[OrderView]
    total: int
    page: int
    total_pages: int
