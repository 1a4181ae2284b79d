"""
Order schemas for request/response validation
"""

from pydantic import BaseModel
from typing import Optional, List, Any
from datetime import datetime
import uuid

from app.models.order import OrderType
from app.schemas.base import BaseSchema
from app.api.v1.cart.schemas import CartItemResponse

class OrderCreate(BaseModel):
    """Schema for creating order"""
    cart_id: int
    order_type: OrderType = OrderType.PICKUP
    delivery_address_id: Optional[int] = None

class OrderResponse(BaseSchema):
    """Schema for order response"""
    id: int
    cart_id: int
    patient_id: int
    status: str
    order_type: str
    delivery_id: Optional[uuid.UUID] = None
    delivery_address: Optional[Any] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

class OrderDetailResponse(BaseModel):
    """Order with the cart items it was placed from"""
    order: OrderResponse
    order_items: List[CartItemResponse]
    total_price: float

class OrderPaymentCreate(BaseModel):
    """Schema for opening a payment against an order"""
    provider: str
