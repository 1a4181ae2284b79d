"""Order model with soft delete"""

from sqlalchemy import Column, Integer, Text, ForeignKey, JSON, Uuid, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, SoftDeleteModel

class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    RESERVED = "RESERVED"
    REJECTED = "REJECTED"
    PAYMENT_PENDING = "PAYMENT_PENDING"
    DELIVERY_PENDING = "DELIVERY_PENDING"
    DELIVERED = "DELIVERED"
    CANCEL_PENDING = "CANCEL_PENDING"
    CANCELLED = "CANCELLED"

class OrderType(str, enum.Enum):
    PICKUP = "PICKUP"
    DELIVERY = "DELIVERY"

class Order(Base, TimestampedModel, SoftDeleteModel):
    """
    Order placed from a cart

    ``status`` and ``order_type`` are stored as free text; the enums above
    list the values the service writes.
    """

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    patient_id = Column(Integer, nullable=False)

    status = Column(
        Text,
        nullable=False,
        default=OrderStatus.PENDING.value,
        server_default=text("'PENDING'"),
    )
    order_type = Column(
        Text,
        nullable=False,
        default=OrderType.PICKUP.value,
        server_default=text("'PICKUP'"),
    )

    # Delivery metadata, owned by the delivery service
    delivery_id = Column(Uuid(as_uuid=True), nullable=True)
    delivery_address = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)

    # Relationships
    cart = relationship("Cart", back_populates="orders")
    payments = relationship(
        "Payment",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
