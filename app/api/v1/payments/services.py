"""
Payment service layer
Settles payments and hands paid orders over to delivery
"""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid
import logging

from app.models import Order, OrderStatus, Payment, PaymentStatus
from app.core.exceptions import NotFoundException, ConflictException
from app.api.v1.orders.state_machine import OrderStateMachine
from app.schemas.events import DeliveryOrderRequestEvent, DELIVERY_ORDER_REQUEST
from app.services import outbox

logger = logging.getLogger(__name__)

class PaymentService:
    """Payment service for processing transactions"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.state_machine = OrderStateMachine()

    async def mock_pay(self, payment_id: uuid.UUID) -> Tuple[Payment, Order]:
        """
        Mark a pending payment as paid

        The order moves on to DELIVERY_PENDING and a delivery request is
        staged in the outbox, all in one transaction.

        Raises:
            NotFoundException: payment missing or no longer pending
            ConflictException: order is not awaiting payment
        """
        result = await self.db.execute(
            select(Payment)
            .where(
                Payment.id == payment_id,
                Payment.status == PaymentStatus.PENDING.value
            )
            .with_for_update()
        )
        payment = result.scalar_one_or_none()

        if not payment:
            raise NotFoundException("Payment not found or already settled")

        result = await self.db.execute(
            select(Order)
            .where(Order.id == payment.order_id)
            .with_for_update()
        )
        order = result.scalar_one()

        if not self.state_machine.can_transition(order.status, OrderStatus.DELIVERY_PENDING):
            raise ConflictException(
                f"Order #{order.id} is {order.status}, not awaiting payment",
                error_code="ORDER_NOT_AWAITING_PAYMENT"
            )

        payment.status = PaymentStatus.PAID.value
        order.status = OrderStatus.DELIVERY_PENDING.value

        outbox.publish(
            self.db,
            DELIVERY_ORDER_REQUEST,
            DeliveryOrderRequestEvent(
                order_id=order.id,
                order_type=order.order_type,
                delivery_address=order.delivery_address
            )
        )

        await self.db.commit()
        await self.db.refresh(payment)
        await self.db.refresh(order)

        logger.info(f"Payment {payment.id} paid, order #{order.id} awaiting delivery")
        return payment, order
