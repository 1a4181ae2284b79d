"""
Payment API routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.database import get_db
from app.schemas.base import StdResponse
from app.api.v1.orders.schemas import OrderResponse
from .schemas import PaymentResponse, MockPayResponse
from .services import PaymentService

router = APIRouter()

@router.post(
    "/{payment_id}/mock-pay",
    response_model=StdResponse[MockPayResponse],
    summary="Mock payment",
    description="Mark a pending payment as paid without a payment gateway"
)
async def mock_pay(
    payment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db)
):
    """Settle a payment"""
    service = PaymentService(db)
    payment, order = await service.mock_pay(payment_id)
    return StdResponse(
        data=MockPayResponse(
            updated_payment=PaymentResponse.model_validate(payment),
            updated_order=OrderResponse.model_validate(order)
        ),
        message="Payment paid successfully"
    )
