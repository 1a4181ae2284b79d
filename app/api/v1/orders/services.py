"""
Order service layer
Handles order processing and management
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from app.models import (
    Order, OrderStatus, OrderType, CartItem,
    Payment, PaymentStatus, SUPPORTED_PROVIDERS
)
from app.core.exceptions import (
    NotFoundException, BadRequestException,
    InvalidPaymentProviderException, OrderNotCancellableException
)
from app.api.v1.cart.services import CartService, calculate_total
from app.api.v1.cart.schemas import CartItemResponse
from app.schemas.events import (
    OrderItem, OrderRequestedEvent, OrderCancelledEvent,
    RESERVE_ORDER, CANCEL_ORDER
)
from app.services import outbox
from app.services.deliveries import DeliveryService
from app.services.products import ProductService
from .schemas import OrderCreate, OrderResponse, OrderDetailResponse
from .state_machine import OrderStateMachine

logger = logging.getLogger(__name__)

def to_order_items(items: List[CartItem]) -> List[OrderItem]:
    return [OrderItem(product_id=item.product_id, quantity=item.quantity) for item in items]

class OrderService:
    """Order service for business logic"""

    def __init__(
        self,
        db: AsyncSession,
        product_service: ProductService,
        delivery_service: Optional[DeliveryService] = None
    ):
        self.db = db
        self.cart_service = CartService(db, product_service)
        self.delivery_service = delivery_service
        self.state_machine = OrderStateMachine()

    async def list_orders(self) -> List[Order]:
        """Get every order in the system"""
        result = await self.db.execute(select(Order).order_by(Order.id))
        return list(result.scalars().all())

    async def _find_order(
        self,
        order_id: int,
        patient_id: Optional[int] = None,
        for_update: bool = False
    ) -> Optional[Order]:
        query = select(Order).where(Order.id == order_id)
        if patient_id is not None:
            query = query.where(Order.patient_id == patient_id)
        if for_update:
            query = query.with_for_update()

        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_order(self, order_id: int, patient_id: Optional[int] = None) -> OrderDetailResponse:
        """
        Get order details with the items of its cart

        Args:
            order_id: Order ID
            patient_id: Restrict the lookup to this patient's orders

        Raises:
            NotFoundException: If order not found
        """
        order = await self._find_order(order_id, patient_id)

        if not order:
            raise NotFoundException("Order not found")

        items = (await self.cart_service.get_items([order.cart_id]))[order.cart_id]
        unit_prices = await self.cart_service.get_unit_prices(items)

        return OrderDetailResponse(
            order=OrderResponse.model_validate(order),
            order_items=[CartItemResponse.model_validate(item) for item in items],
            total_price=calculate_total(items, unit_prices)
        )

    async def get_my_orders(self, patient_id: int) -> List[OrderDetailResponse]:
        """Get the patient's orders, most recently updated first"""
        result = await self.db.execute(
            select(Order)
            .where(Order.patient_id == patient_id)
            .order_by(Order.updated_at.desc(), Order.id.desc())
        )
        orders = result.scalars().all()

        grouped = await self.cart_service.get_items({order.cart_id for order in orders})
        unit_prices = await self.cart_service.get_unit_prices(
            item for items in grouped.values() for item in items
        )

        return [
            OrderDetailResponse(
                order=OrderResponse.model_validate(order),
                order_items=[CartItemResponse.model_validate(item) for item in grouped[order.cart_id]],
                total_price=calculate_total(grouped[order.cart_id], unit_prices)
            )
            for order in orders
        ]

    async def create_order(self, patient_id: int, data: OrderCreate) -> Order:
        """
        Place an order from one of the patient's carts

        The order row and the inventory reservation request are written in
        the same transaction.

        Raises:
            BadRequestException: DELIVERY order without a delivery address
            DeliveryAddressOwnershipException: address belongs to another patient
            NotFoundException: cart not found
        """
        if data.order_type == OrderType.DELIVERY and data.delivery_address_id is None:
            raise BadRequestException("delivery_address_id is required for DELIVERY orders")

        delivery_address = None
        if data.delivery_address_id is not None:
            delivery_address = await self.delivery_service.get_owned_delivery_address(
                data.delivery_address_id,
                patient_id
            )

        cart = await self.cart_service.get_owned_cart(data.cart_id, patient_id)

        order = Order(
            cart_id=cart.id,
            patient_id=patient_id,
            status=OrderStatus.PENDING.value,
            order_type=data.order_type.value,
            delivery_address=delivery_address
        )
        self.db.add(order)
        await self.db.flush()

        items = (await self.cart_service.get_items([cart.id]))[cart.id]
        outbox.publish(
            self.db,
            RESERVE_ORDER,
            OrderRequestedEvent(order_id=order.id, order_items=to_order_items(items))
        )

        await self.db.commit()
        await self.db.refresh(order)

        logger.info(f"Order #{order.id} created from cart #{cart.id} for patient {patient_id}")
        return order

    async def cancel_order(self, order_id: int, patient_id: int) -> Order:
        """
        Cancel a reserved order

        The order is soft deleted and parked in CANCEL_PENDING until
        inventory confirms the stock release.

        Raises:
            OrderNotCancellableException: order missing, not owned, already
                deleted or not in a cancellable status
        """
        order = await self._find_order(order_id, patient_id, for_update=True)

        if (
            not order
            or not order.is_active
            or not self.state_machine.is_cancellable(order.status)
        ):
            raise OrderNotCancellableException()

        order.status = OrderStatus.CANCEL_PENDING.value
        order.soft_delete()

        items = (await self.cart_service.get_items([order.cart_id]))[order.cart_id]
        outbox.publish(
            self.db,
            CANCEL_ORDER,
            OrderCancelledEvent(order_id=order.id, order_items=to_order_items(items))
        )

        await self.db.commit()
        await self.db.refresh(order)

        logger.info(f"Order #{order.id} cancellation requested by patient {patient_id}")
        return order

    async def create_payment(
        self,
        order_id: int,
        patient_id: int,
        provider: str
    ) -> Tuple[Payment, Order]:
        """
        Open a payment for a reserved order

        The payment amount is the order total at current unit prices.

        Raises:
            InvalidPaymentProviderException: provider not supported
            NotFoundException: order missing, not owned or not reserved
        """
        if provider not in SUPPORTED_PROVIDERS:
            raise InvalidPaymentProviderException(provider)

        order = await self._find_order(order_id, patient_id, for_update=True)

        if not order or not self.state_machine.is_payable(order.status):
            raise NotFoundException("Order not found or not awaiting payment")

        items = (await self.cart_service.get_items([order.cart_id]))[order.cart_id]
        unit_prices = await self.cart_service.get_unit_prices(items)

        order.status = OrderStatus.PAYMENT_PENDING.value
        payment = Payment(
            order_id=order.id,
            amount=calculate_total(items, unit_prices),
            provider=provider,
            status=PaymentStatus.PENDING.value
        )
        self.db.add(payment)

        await self.db.commit()
        await self.db.refresh(order)
        await self.db.refresh(payment)

        logger.info(f"Payment {payment.id} opened for order #{order.id} ({payment.amount})")
        return payment, order
