"""
Event consumer worker
Binds one queue per order routing key on the events exchange
"""

from kombu import Connection, Queue
from kombu.mixins import ConsumerMixin
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.core.broker import events_exchange, get_broker_connection
from app.core.monitoring import order_events_consumed, setup_logging
from .orders import HANDLERS, UNHANDLED, process_event

logger = logging.getLogger(__name__)

def build_queues():
    return [
        Queue(routing_key, exchange=events_exchange, routing_key=routing_key, durable=True)
        for routing_key in HANDLERS
    ]

class OrderEventConsumer(ConsumerMixin):
    """Consumes order events and acknowledges them once handled"""

    def __init__(self, connection: Connection):
        self.connection = connection
        self.queues = build_queues()

    def get_consumers(self, Consumer, channel):
        return [
            Consumer(queues=self.queues, on_message=self.on_message, prefetch_count=10)
        ]

    def on_message(self, message):
        routing_key = message.delivery_info.get("routing_key", "")

        try:
            outcome = process_event(routing_key, message.body)
        except ValidationError as e:
            logger.error(f"Malformed {routing_key} event rejected: {str(e)}")
            order_events_consumed.labels(routing_key=routing_key, outcome="invalid").inc()
            message.reject(requeue=False)
            return
        except SQLAlchemyError as e:
            logger.error(f"Database error handling {routing_key} event, requeueing: {str(e)}")
            order_events_consumed.labels(routing_key=routing_key, outcome="error").inc()
            message.requeue()
            return

        order_events_consumed.labels(routing_key=routing_key, outcome=outcome).inc()

        if outcome == UNHANDLED:
            message.reject(requeue=False)
        else:
            message.ack()

def run_consumer():
    """Run the consumer until interrupted"""
    setup_logging()
    with get_broker_connection() as connection:
        logger.info(f"Consuming {len(HANDLERS)} order event queues")
        OrderEventConsumer(connection).run()
