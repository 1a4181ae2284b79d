"""
Event broker wiring
Topic exchange shared by the outbox relay and the event consumer
"""

from kombu import Connection, Exchange

from .config import settings

events_exchange = Exchange(settings.EVENTS_EXCHANGE, type="topic", durable=True)

def get_broker_connection() -> Connection:
    """Open a connection to the integration event broker"""
    return Connection(settings.EVENT_BROKER_URL)
