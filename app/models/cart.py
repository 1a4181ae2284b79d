"""
Shopping cart models
A patient owns carts; a cart owns its line items
"""

from sqlalchemy import Column, Integer, ForeignKey, text
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel

class Cart(Base, TimestampedModel):
    """A patient's in-progress selection of products"""

    __tablename__ = "carts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, nullable=False)

    # Relationships (rows are removed by ON DELETE CASCADE, never loaded for deletion)
    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    orders = relationship(
        "Order",
        back_populates="cart",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

class CartItem(Base, TimestampedModel):
    """Shopping cart line item, keyed by (cart_id, product_id)"""

    __tablename__ = "cart_items"

    cart_id = Column(
        Integer,
        ForeignKey("carts.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    )
    product_id = Column(Integer, primary_key=True, nullable=False, autoincrement=False)

    # No lower bound at the schema level; the API drops non-positive quantities
    quantity = Column(Integer, nullable=False, default=1, server_default=text("1"))

    cart = relationship("Cart", back_populates="items")
