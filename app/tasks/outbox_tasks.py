"""Outbox relay tasks"""

from celery.utils.log import get_task_logger
from typing import Optional

from app.core.broker import get_broker_connection
from app.core.celery_app import celery_app
from app.core.config import settings
from app.core.database import get_db_sync_context
from app.services.outbox import relay_pending_events

logger = get_task_logger(__name__)

@celery_app.task(name="relay_outbox_events")
def relay_outbox_events(batch_size: Optional[int] = None):
    """Ship pending outbox rows to the event broker"""
    batch_size = batch_size or settings.OUTBOX_BATCH_SIZE

    with get_broker_connection() as connection:
        producer = connection.Producer()
        with get_db_sync_context() as db:
            sent = relay_pending_events(db, producer, batch_size)

    if sent:
        logger.info(f"Relayed {sent} outbox events")

    return {"sent": sent}
