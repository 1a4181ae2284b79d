"""
Integration event payloads
Published through the outbox and consumed from the event broker
"""

from pydantic import BaseModel
from typing import Any, List, Optional
import uuid

# Outgoing routing keys
RESERVE_ORDER = "inventory.reserve_order"
CANCEL_ORDER = "inventory.cancel_order"
DELIVERY_ORDER_REQUEST = "delivery.order_request"

# Incoming routing keys
ORDER_RESERVED = "orders.order_reserved"
ORDER_REJECTED = "orders.order_rejected"
ORDER_CANCELLED = "orders.order_cancelled"
DELIVERY_CREATED = "orders.delivery_created"
DELIVERY_SUCCESS = "orders.delivery_success"

class OrderItem(BaseModel):
    product_id: int
    quantity: int

class OrderRequestedEvent(BaseModel):
    """Ask inventory to reserve stock for a new order"""
    order_id: int
    order_items: List[OrderItem]

class OrderCancelledEvent(BaseModel):
    """Ask inventory to release the stock of a cancelled order"""
    order_id: int
    order_items: List[OrderItem]

class DeliveryOrderRequestEvent(BaseModel):
    """Ask the delivery service to fulfil a paid order"""
    order_id: int
    order_type: str
    delivery_address: Optional[Any] = None

class OrderReservedEvent(BaseModel):
    order_id: int

class OrderRejectedEvent(BaseModel):
    order_id: int

class OrderCancelSuccessEvent(BaseModel):
    order_id: int

class DeliveryCreatedEvent(BaseModel):
    order_id: int
    delivery_id: uuid.UUID

class DeliverySuccessEvent(BaseModel):
    order_id: int
