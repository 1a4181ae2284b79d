"""Models package initialization"""

from .base import Base, TimestampedModel, SoftDeleteModel
from .cart import Cart, CartItem
from .order import Order, OrderStatus, OrderType
from .payment import Payment, PaymentStatus, PaymentProvider, SUPPORTED_PROVIDERS
from .outbox import OutboxEvent, OutboxStatus

# Export all models
__all__ = [
    "Base",
    "TimestampedModel",
    "SoftDeleteModel",
    "Cart",
    "CartItem",
    "Order",
    "OrderStatus",
    "OrderType",
    "Payment",
    "PaymentStatus",
    "PaymentProvider",
    "SUPPORTED_PROVIDERS",
    "OutboxEvent",
    "OutboxStatus",
]
