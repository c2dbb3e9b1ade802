from core.database import Base
from sqlalchemy import (Column, Integer, ForeignKey, UniqueConstraint)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin, UpdatedAtMixin

class CartItem(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
    )

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    #relationships
    cart = relationship("Cart", back_populates="items")
    product = relationship("Product", back_populates="cart_items")

    quantity = Column(Integer, nullable=False, default=0)
