"""Patient cart routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.core.security import get_current_patient
from app.schemas.base import StdResponse
from app.services.products import ProductService, get_product_service
from .schemas import (
    CartCreate,
    CartResponse,
    CartItemResponse,
    CartCreateResponse,
    CartDetailResponse,
    CartUpdateResponse
)
from .services import CartService

router = APIRouter(dependencies=[Depends(get_current_patient)])

def get_cart_service(
    db: AsyncSession = Depends(get_db),
    product_service: ProductService = Depends(get_product_service)
) -> CartService:
    return CartService(db, product_service)

@router.get("/", response_model=StdResponse[List[CartResponse]])
async def get_carts(service: CartService = Depends(get_cart_service)):
    """Get all carts"""
    carts = await service.list_carts()
    return StdResponse(
        data=[CartResponse.model_validate(cart) for cart in carts],
        message="Get carts successfully"
    )

@router.post(
    "/",
    response_model=StdResponse[CartCreateResponse],
    status_code=status.HTTP_201_CREATED
)
async def create_cart(
    cart_data: CartCreate,
    patient_id: int = Depends(get_current_patient),
    service: CartService = Depends(get_cart_service)
):
    """Create a cart for the current patient"""
    cart, items = await service.create_cart(patient_id, cart_data)
    return StdResponse(
        data=CartCreateResponse(
            cart=CartResponse.model_validate(cart),
            cart_items=[CartItemResponse.model_validate(item) for item in items]
        ),
        message="Created cart successfully"
    )

@router.get("/my-carts", response_model=StdResponse[List[CartDetailResponse]])
async def get_my_carts(
    patient_id: int = Depends(get_current_patient),
    service: CartService = Depends(get_cart_service)
):
    """Get the current patient's carts with items and totals"""
    carts = await service.get_my_carts(patient_id)
    return StdResponse(data=carts, message="Get my carts successfully")

@router.get("/{cart_id}", response_model=StdResponse[CartDetailResponse])
async def get_cart(
    cart_id: int,
    patient_id: int = Depends(get_current_patient),
    service: CartService = Depends(get_cart_service)
):
    """Get one of the current patient's carts"""
    cart = await service.get_cart(cart_id, patient_id)
    return StdResponse(data=cart, message="Get cart successfully")

@router.patch("/{cart_id}", response_model=StdResponse[CartUpdateResponse])
async def update_cart(
    cart_id: int,
    cart_data: CartCreate,
    patient_id: int = Depends(get_current_patient),
    service: CartService = Depends(get_cart_service)
):
    """Replace the items of one of the current patient's carts"""
    result = await service.update_cart(cart_id, patient_id, cart_data)
    return StdResponse(data=result, message="Updated cart successfully")

@router.delete("/{cart_id}", response_model=StdResponse[CartResponse])
async def delete_cart(
    cart_id: int,
    patient_id: int = Depends(get_current_patient),
    service: CartService = Depends(get_cart_service)
):
    """Delete a cart together with its items and orders"""
    cart = await service.delete_cart(cart_id, patient_id)
    return StdResponse(data=cart, message="Deleted cart successfully")
