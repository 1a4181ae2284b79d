"""Order status transitions"""

import pytest

from app.api.v1.orders.state_machine import OrderStateMachine
from app.models import OrderStatus

class TestOrderStateMachine:
    @pytest.fixture
    def machine(self):
        return OrderStateMachine()

    @pytest.mark.parametrize("current, new", [
        (OrderStatus.PENDING, OrderStatus.RESERVED),
        (OrderStatus.PENDING, OrderStatus.REJECTED),
        (OrderStatus.RESERVED, OrderStatus.PAYMENT_PENDING),
        (OrderStatus.RESERVED, OrderStatus.CANCEL_PENDING),
        (OrderStatus.PAYMENT_PENDING, OrderStatus.DELIVERY_PENDING),
        (OrderStatus.DELIVERY_PENDING, OrderStatus.DELIVERED),
        (OrderStatus.CANCEL_PENDING, OrderStatus.CANCELLED),
    ])
    def test_allowed_transitions(self, machine, current, new):
        assert machine.can_transition(current, new)

    @pytest.mark.parametrize("current, new", [
        (OrderStatus.PENDING, OrderStatus.PAYMENT_PENDING),
        (OrderStatus.RESERVED, OrderStatus.RESERVED),
        (OrderStatus.PAYMENT_PENDING, OrderStatus.CANCEL_PENDING),
        (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
        (OrderStatus.CANCELLED, OrderStatus.RESERVED),
    ])
    def test_rejected_transitions(self, machine, current, new):
        assert not machine.can_transition(current, new)

    def test_accepts_stored_strings(self, machine):
        assert machine.can_transition("PENDING", "RESERVED")
        assert not machine.can_transition("PENDING", "SHIPPED")
        assert not machine.can_transition("UNKNOWN", "RESERVED")

    def test_valid_transitions_listing(self, machine):
        assert machine.get_valid_transitions(OrderStatus.RESERVED) == [
            OrderStatus.CANCEL_PENDING,
            OrderStatus.PAYMENT_PENDING,
        ]
        assert machine.get_valid_transitions("DELIVERED") == []

    @pytest.mark.parametrize("status", ["REJECTED", "DELIVERED", "CANCELLED"])
    def test_terminal_states(self, machine, status):
        assert machine.is_terminal_state(status)

    def test_non_terminal_state(self, machine):
        assert not machine.is_terminal_state(OrderStatus.PAYMENT_PENDING)

    def test_only_reserved_orders_are_cancellable_and_payable(self, machine):
        for status in OrderStatus:
            expected = status == OrderStatus.RESERVED
            assert machine.is_cancellable(status) is expected
            assert machine.is_payable(status) is expected
