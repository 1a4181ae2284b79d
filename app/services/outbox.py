"""
Transactional outbox
Stages integration events next to the state change that produced them and
relays them to the event broker afterwards
"""

from typing import Union
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session
import logging

from app.core.broker import events_exchange
from app.core.monitoring import outbox_events_published
from app.models import OutboxEvent, OutboxStatus

logger = logging.getLogger(__name__)

def publish(
    session: Union[Session, AsyncSession],
    event_type: str,
    event: BaseModel
) -> OutboxEvent:
    """
    Stage an event in the caller's transaction

    Nothing is flushed or committed here; the row is written together with
    the rest of the unit of work.
    """
    outbox_event = OutboxEvent(
        event_type=event_type,
        payload=event.model_dump_json(),
    )
    session.add(outbox_event)
    logger.debug(f"Staged {event_type} event")
    return outbox_event

def relay_pending_events(session: Session, producer, batch_size: int = 100) -> int:
    """
    Publish pending outbox rows in id order and mark them sent

    Rows are locked with SKIP LOCKED so concurrent relays never pick the same
    row. The first publish failure ends the batch and leaves that row and the
    ones after it pending.

    Args:
        session: Synchronous session owning the transaction
        producer: kombu producer bound to the event broker
        batch_size: Maximum number of rows handled in one call

    Returns:
        Number of rows published
    """
    result = session.execute(
        select(OutboxEvent)
        .where(OutboxEvent.status == OutboxStatus.PENDING.value)
        .order_by(OutboxEvent.id)
        .limit(batch_size)
        .with_for_update(skip_locked=True)
    )
    pending = result.scalars().all()

    sent = 0
    for outbox_event in pending:
        try:
            producer.publish(
                outbox_event.payload,
                exchange=events_exchange,
                routing_key=outbox_event.event_type,
                content_type="application/json",
                content_encoding="utf-8",
                declare=[events_exchange],
                retry=True,
            )
        except Exception as e:
            logger.error(f"Failed to relay outbox event #{outbox_event.id} ({outbox_event.event_type}): {str(e)}")
            break

        outbox_event.status = OutboxStatus.SENT.value
        outbox_events_published.labels(event_type=outbox_event.event_type).inc()
        sent += 1

    session.flush()
    return sent
