"""
Payment schemas for request/response validation
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime
import uuid

from app.schemas.base import BaseSchema
from app.api.v1.orders.schemas import OrderResponse

class PaymentResponse(BaseSchema):
    """Schema for payment response"""
    id: uuid.UUID
    order_id: int
    amount: float
    status: str
    provider: str
    provider_ref: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class MockPayResponse(BaseModel):
    """Payment settled by the mock gateway and the order it released"""
    updated_payment: PaymentResponse
    updated_order: OrderResponse

class OrderPaymentResponse(BaseModel):
    """Payment opened for an order and the order awaiting it"""
    payment: PaymentResponse
    updated_order: OrderResponse
