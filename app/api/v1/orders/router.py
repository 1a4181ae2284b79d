"""
Order API routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.core.security import get_current_patient
from app.schemas.base import StdResponse
from app.services.deliveries import DeliveryService, get_delivery_service
from app.services.products import ProductService, get_product_service
from app.api.v1.payments.schemas import PaymentResponse, OrderPaymentResponse
from .schemas import (
    OrderCreate,
    OrderResponse,
    OrderDetailResponse,
    OrderPaymentCreate
)
from .services import OrderService

# Patient facing routes
router = APIRouter(dependencies=[Depends(get_current_patient)])

# Service to service routes
internal_router = APIRouter()

def get_order_service(
    db: AsyncSession = Depends(get_db),
    product_service: ProductService = Depends(get_product_service),
    delivery_service: DeliveryService = Depends(get_delivery_service)
) -> OrderService:
    return OrderService(db, product_service, delivery_service)

@router.get(
    "/",
    response_model=StdResponse[List[OrderResponse]],
    summary="List orders"
)
async def get_orders(service: OrderService = Depends(get_order_service)):
    """Get all orders"""
    orders = await service.list_orders()
    return StdResponse(
        data=[OrderResponse.model_validate(order) for order in orders],
        message="Get orders successfully"
    )

@router.post(
    "/",
    response_model=StdResponse[OrderResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
    description="Place an order from one of the patient's carts"
)
async def create_order(
    order_data: OrderCreate,
    patient_id: int = Depends(get_current_patient),
    service: OrderService = Depends(get_order_service)
):
    """Create new order"""
    order = await service.create_order(patient_id, order_data)
    return StdResponse(
        data=OrderResponse.model_validate(order),
        message="Created order successfully"
    )

@router.get(
    "/my-orders",
    response_model=StdResponse[List[OrderDetailResponse]],
    summary="List my orders"
)
async def get_my_orders(
    patient_id: int = Depends(get_current_patient),
    service: OrderService = Depends(get_order_service)
):
    """Get the current patient's orders with items and totals"""
    orders = await service.get_my_orders(patient_id)
    return StdResponse(data=orders, message="Get my orders successfully")

@router.get(
    "/{order_id}",
    response_model=StdResponse[OrderDetailResponse],
    summary="Get order details"
)
async def get_order(
    order_id: int,
    patient_id: int = Depends(get_current_patient),
    service: OrderService = Depends(get_order_service)
):
    """Get one of the current patient's orders"""
    order = await service.get_order(order_id, patient_id)
    return StdResponse(data=order, message="Get order successfully")

@router.delete(
    "/{order_id}",
    response_model=StdResponse[OrderResponse],
    summary="Cancel order",
    description="Cancel a reserved order and release its stock"
)
async def cancel_order(
    order_id: int,
    patient_id: int = Depends(get_current_patient),
    service: OrderService = Depends(get_order_service)
):
    """Cancel order"""
    order = await service.cancel_order(order_id, patient_id)
    return StdResponse(
        data=OrderResponse.model_validate(order),
        message="Cancelled order successfully"
    )

@router.post(
    "/{order_id}/payment",
    response_model=StdResponse[OrderPaymentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create payment for order"
)
async def create_payment_for_order(
    order_id: int,
    payment_data: OrderPaymentCreate,
    patient_id: int = Depends(get_current_patient),
    service: OrderService = Depends(get_order_service)
):
    """Open a payment for a reserved order"""
    payment, order = await service.create_payment(order_id, patient_id, payment_data.provider)
    return StdResponse(
        data=OrderPaymentResponse(
            payment=PaymentResponse.model_validate(payment),
            updated_order=OrderResponse.model_validate(order)
        ),
        message="Created payment successfully"
    )

@internal_router.get(
    "/{order_id}",
    response_model=StdResponse[OrderDetailResponse],
    summary="Get any order"
)
async def get_order_internal(
    order_id: int,
    service: OrderService = Depends(get_order_service)
):
    """Get an order regardless of owner"""
    order = await service.get_order(order_id)
    return StdResponse(data=order, message="Get order successfully")
