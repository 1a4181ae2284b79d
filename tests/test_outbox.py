"""Outbox staging and relay"""

import json
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import select

from app.core.broker import events_exchange
from app.models import OutboxEvent
from app.schemas.events import OrderItem, OrderRequestedEvent, RESERVE_ORDER
from app.services.outbox import publish, relay_pending_events
from app.tasks.outbox_tasks import relay_outbox_events

def stage(session, count):
    for order_id in range(1, count + 1):
        publish(
            session,
            RESERVE_ORDER,
            OrderRequestedEvent(order_id=order_id, order_items=[OrderItem(product_id=1, quantity=2)])
        )
    session.commit()

def statuses(session):
    session.expire_all()
    return [event.status for event in session.execute(select(OutboxEvent).order_by(OutboxEvent.id)).scalars()]

class TestPublish:
    def test_publish_stages_pending_row(self, sync_session):
        event = publish(sync_session, RESERVE_ORDER, OrderRequestedEvent(order_id=5, order_items=[]))
        sync_session.commit()

        stored = sync_session.get(OutboxEvent, event.id)
        assert stored.event_type == "inventory.reserve_order"
        assert stored.status == "PENDING"
        assert json.loads(stored.payload) == {"order_id": 5, "order_items": []}

    def test_publish_does_not_commit(self, sync_session):
        publish(sync_session, RESERVE_ORDER, OrderRequestedEvent(order_id=5, order_items=[]))
        sync_session.rollback()

        assert statuses(sync_session) == []

class TestRelay:
    @pytest.fixture
    def producer(self):
        return MagicMock()

    def test_relays_in_id_order_and_marks_sent(self, sync_session, producer):
        stage(sync_session, 3)

        sent = relay_pending_events(sync_session, producer, batch_size=10)
        sync_session.commit()

        assert sent == 3
        assert statuses(sync_session) == ["SENT", "SENT", "SENT"]
        payloads = [json.loads(call.args[0])["order_id"] for call in producer.publish.call_args_list]
        assert payloads == [1, 2, 3]
        _, kwargs = producer.publish.call_args
        assert kwargs["routing_key"] == "inventory.reserve_order"
        assert kwargs["exchange"] is events_exchange

    def test_respects_batch_size(self, sync_session, producer):
        stage(sync_session, 3)

        sent = relay_pending_events(sync_session, producer, batch_size=2)
        sync_session.commit()

        assert sent == 2
        assert statuses(sync_session) == ["SENT", "SENT", "PENDING"]

    def test_failure_stops_batch_and_keeps_rows_pending(self, sync_session, producer):
        stage(sync_session, 3)
        producer.publish.side_effect = [None, ConnectionError("broker down"), None]

        sent = relay_pending_events(sync_session, producer, batch_size=10)
        sync_session.commit()

        assert sent == 1
        assert producer.publish.call_count == 2
        assert statuses(sync_session) == ["SENT", "PENDING", "PENDING"]

    def test_sent_rows_are_not_relayed_again(self, sync_session, producer):
        stage(sync_session, 2)
        relay_pending_events(sync_session, producer)
        sync_session.commit()
        producer.reset_mock()

        assert relay_pending_events(sync_session, producer) == 0
        producer.publish.assert_not_called()

class TestRelayTask:
    def test_task_relays_through_broker_connection(self, sync_session):
        stage(sync_session, 2)
        connection = MagicMock()

        with patch("app.tasks.outbox_tasks.get_broker_connection", return_value=connection):
            result = relay_outbox_events(batch_size=5)

        assert result == {"sent": 2}
        producer = connection.__enter__.return_value.Producer.return_value
        assert producer.publish.call_count == 2
        assert statuses(sync_session) == ["SENT", "SENT"]
