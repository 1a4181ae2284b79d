"""
Cart schemas for request/response validation
"""

from pydantic import BaseModel, Field
from typing import List
from datetime import datetime

from app.schemas.base import BaseSchema

class CartItemIn(BaseModel):
    """Product and quantity requested for a cart"""
    product_id: int
    quantity: int = 1

class CartCreate(BaseModel):
    """Schema for creating a cart or replacing its items"""
    cart_items: List[CartItemIn] = Field(default_factory=list)

class CartItemResponse(BaseSchema):
    """Schema for cart item response"""
    cart_id: int
    product_id: int
    quantity: int
    created_at: datetime
    updated_at: datetime

class CartResponse(BaseSchema):
    """Schema for cart response"""
    id: int
    patient_id: int
    created_at: datetime
    updated_at: datetime

class CartCreateResponse(BaseModel):
    cart: CartResponse
    cart_items: List[CartItemResponse]

class CartDetailResponse(BaseModel):
    """Cart with its items priced by the product service"""
    cart: CartResponse
    cart_items: List[CartItemResponse]
    total_price: float

class CartUpdateResponse(BaseModel):
    deleted_items: List[CartItemResponse]
    updated_items: List[CartItemResponse]
    updated_cart: CartResponse
