"""
Order event handlers
Advance orders when inventory and delivery report back
"""

from typing import Callable, Dict, Optional, Tuple, Type, Union
from pydantic import BaseModel
from sqlalchemy.orm import Session
import logging

from app.core.database import get_db_sync_context
from app.models import Order, OrderStatus
from app.api.v1.orders.state_machine import OrderStateMachine
from app.schemas.events import (
    OrderReservedEvent, OrderRejectedEvent, OrderCancelSuccessEvent,
    DeliveryCreatedEvent, DeliverySuccessEvent,
    ORDER_RESERVED, ORDER_REJECTED, ORDER_CANCELLED,
    DELIVERY_CREATED, DELIVERY_SUCCESS
)

logger = logging.getLogger(__name__)

state_machine = OrderStateMachine()

# Outcomes reported back to the worker
APPLIED = "applied"
SKIPPED = "skipped"
UNHANDLED = "unhandled"

def _lock_order(session: Session, order_id: int) -> Optional[Order]:
    order = session.get(Order, order_id, with_for_update=True)
    if order is None:
        logger.warning(f"Order #{order_id} does not exist, event ignored")
    return order

def _transition(session: Session, order_id: int, new_status: OrderStatus) -> bool:
    order = _lock_order(session, order_id)
    if order is None:
        return False

    if not state_machine.can_transition(order.status, new_status):
        logger.warning(
            f"Order #{order_id} cannot move from {order.status} to {new_status.value}, event ignored"
        )
        return False

    order.status = new_status.value
    logger.info(f"Order #{order_id} is now {new_status.value}")
    return True

def handle_order_reserved(session: Session, event: OrderReservedEvent) -> bool:
    return _transition(session, event.order_id, OrderStatus.RESERVED)

def handle_order_rejected(session: Session, event: OrderRejectedEvent) -> bool:
    return _transition(session, event.order_id, OrderStatus.REJECTED)

def handle_order_cancelled(session: Session, event: OrderCancelSuccessEvent) -> bool:
    return _transition(session, event.order_id, OrderStatus.CANCELLED)

def handle_delivery_created(session: Session, event: DeliveryCreatedEvent) -> bool:
    order = _lock_order(session, event.order_id)
    if order is None:
        return False

    order.delivery_id = event.delivery_id
    logger.info(f"Delivery {event.delivery_id} for order #{event.order_id} has been created")
    return True

def handle_delivery_success(session: Session, event: DeliverySuccessEvent) -> bool:
    return _transition(session, event.order_id, OrderStatus.DELIVERED)

HANDLERS: Dict[str, Tuple[Type[BaseModel], Callable[[Session, BaseModel], bool]]] = {
    ORDER_RESERVED: (OrderReservedEvent, handle_order_reserved),
    ORDER_REJECTED: (OrderRejectedEvent, handle_order_rejected),
    ORDER_CANCELLED: (OrderCancelSuccessEvent, handle_order_cancelled),
    DELIVERY_CREATED: (DeliveryCreatedEvent, handle_delivery_created),
    DELIVERY_SUCCESS: (DeliverySuccessEvent, handle_delivery_success),
}

def process_event(routing_key: str, body: Union[bytes, str]) -> str:
    """
    Parse an event body and apply it in its own transaction

    Returns:
        APPLIED, SKIPPED or UNHANDLED

    Raises:
        pydantic.ValidationError: body does not match the event schema
    """
    if routing_key not in HANDLERS:
        logger.error(f"No handler for routing key {routing_key}")
        return UNHANDLED

    schema, handler = HANDLERS[routing_key]
    event = schema.model_validate_json(body)
    logger.info(f"Received {routing_key}: {event!r}")

    with get_db_sync_context() as session:
        applied = handler(session, event)

    return APPLIED if applied else SKIPPED
