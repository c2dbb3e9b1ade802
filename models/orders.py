from core.database import Base
from sqlalchemy.orm import relationship
from sqlalchemy import (Column, Integer, ForeignKey, Numeric, Enum)
from .mixins import CreatedAtMixin, UpdatedAtMixin

ORDER_STATUSES = ("pending", "processing", "completed", "cancelled")

class Order(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "orders"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id"
    )

    # frozen at checkout, never recomputed from the items
    total = Column(Numeric(10, 2), nullable=False)
    status = Column(Enum(*ORDER_STATUSES, name="order_status"), default="pending", nullable=False)
