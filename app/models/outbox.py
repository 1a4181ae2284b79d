"""
Transactional outbox
Events are written in the same transaction as the state change that caused
them and shipped to the broker later by the relay task.
"""

from sqlalchemy import Column, Integer, Text, text
import enum

from .base import Base, TimestampedModel

class OutboxStatus(str, enum.Enum):
    PENDING = "PENDING"
    SENT = "SENT"

class OutboxEvent(Base, TimestampedModel):
    """Serialized integration event awaiting delivery"""

    __tablename__ = "outbox"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_type = Column(Text, nullable=False)  # doubles as the broker routing key
    payload = Column(Text, nullable=False)  # JSON document, opaque to the schema
    status = Column(
        Text,
        nullable=False,
        default=OutboxStatus.PENDING.value,
        server_default=text("'PENDING'"),
    )
