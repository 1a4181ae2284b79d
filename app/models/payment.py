"""
Payment model
One or more payment attempts per order
"""

from sqlalchemy import Column, Integer, String, Text, REAL, ForeignKey, Uuid, text
from sqlalchemy.orm import relationship
import uuid
import enum

from .base import Base, TimestampedModel

class PaymentStatus(str, enum.Enum):
    """Payment status enumeration"""
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"

class PaymentProvider(str, enum.Enum):
    """Payment provider enumeration"""
    INTERNAL = "internal"
    QR_PAYMENT = "qr_payment"

# Providers a patient may choose when paying for an order
SUPPORTED_PROVIDERS = {PaymentProvider.QR_PAYMENT.value}

class Payment(Base, TimestampedModel):
    """Payment transaction records"""

    __tablename__ = "payments"

    # The migration also sets gen_random_uuid() as the server default
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)

    amount = Column(REAL, nullable=False)
    status = Column(
        String(32),
        nullable=False,
        default=PaymentStatus.PENDING.value,
        server_default=text("'PENDING'"),
    )
    provider = Column(
        String(64),
        nullable=False,
        default=PaymentProvider.INTERNAL.value,
        server_default=text("'internal'"),
    )
    provider_ref = Column(String(128), nullable=True)  # external transaction reference
    failure_reason = Column(Text, nullable=True)

    order = relationship("Order", back_populates="payments")

    def __str__(self):
        return f"Payment {self.id} - {self.amount} ({self.status})"
