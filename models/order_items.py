from core.database import Base
from sqlalchemy import (Column, Integer, String, ForeignKey, Numeric)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

class OrderItem(Base, CreatedAtMixin):
    """
    Immutable snapshot of one cart line at checkout time.

    ``price`` and the product name/description are copied from the product
    when the order is placed and never follow later catalog edits. The
    subtotal is derived (quantity x price) and not stored.
    """
    __tablename__ = "order_items"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    #relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product", back_populates="order_items")

    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    product_name = Column(String, nullable=False)
    product_description = Column(String)
