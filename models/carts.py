from core.database import Base
from sqlalchemy import (Column, Integer, ForeignKey)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin, UpdatedAtMixin

class Cart(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "carts"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    # unique: one cart per user, enforced by the database
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)

    #relationships
    user = relationship("User", back_populates="cart")
    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.id"
    )
