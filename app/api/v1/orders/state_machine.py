"""
Order state machine for managing order status transitions
"""

from typing import Dict, List, Optional, Set, Union
from app.models.order import OrderStatus

StatusLike = Union[OrderStatus, str]

class OrderStateMachine:
    """
    Manages valid order status transitions

    Statuses are stored as plain text, so every method accepts either an
    ``OrderStatus`` or its string value.
    """

    def __init__(self):
        # Define valid transitions
        self.transitions: Dict[OrderStatus, Set[OrderStatus]] = {
            OrderStatus.PENDING: {
                OrderStatus.RESERVED,
                OrderStatus.REJECTED
            },
            OrderStatus.RESERVED: {
                OrderStatus.PAYMENT_PENDING,
                OrderStatus.CANCEL_PENDING
            },
            OrderStatus.PAYMENT_PENDING: {
                OrderStatus.DELIVERY_PENDING
            },
            OrderStatus.DELIVERY_PENDING: {
                OrderStatus.DELIVERED
            },
            OrderStatus.CANCEL_PENDING: {
                OrderStatus.CANCELLED
            },
            OrderStatus.REJECTED: set(),  # Terminal state
            OrderStatus.DELIVERED: set(),  # Terminal state
            OrderStatus.CANCELLED: set()  # Terminal state
        }

    @staticmethod
    def _coerce(status: StatusLike) -> Optional[OrderStatus]:
        try:
            return OrderStatus(status)
        except ValueError:
            return None

    def can_transition(
        self,
        current_status: StatusLike,
        new_status: StatusLike
    ) -> bool:
        """
        Check if transition is valid

        Args:
            current_status: Current order status
            new_status: Desired new status

        Returns:
            True if transition is allowed
        """
        valid_transitions = self.transitions.get(self._coerce(current_status), set())
        return self._coerce(new_status) in valid_transitions

    def get_valid_transitions(
        self,
        current_status: StatusLike
    ) -> List[OrderStatus]:
        """
        Get list of valid transitions from current status

        Args:
            current_status: Current order status

        Returns:
            List of valid next statuses, sorted by value
        """
        return sorted(
            self.transitions.get(self._coerce(current_status), set()),
            key=lambda status: status.value
        )

    def is_terminal_state(self, status: StatusLike) -> bool:
        """
        Check if status is a terminal state

        Args:
            status: Order status

        Returns:
            True if no more transitions possible
        """
        return len(self.transitions.get(self._coerce(status), set())) == 0

    def is_cancellable(self, status: StatusLike) -> bool:
        """
        Check if a patient can cancel an order in this status

        Cancellation goes through CANCEL_PENDING while inventory releases
        the reserved stock.
        """
        return self.can_transition(status, OrderStatus.CANCEL_PENDING)

    def is_payable(self, status: StatusLike) -> bool:
        """Check if a payment can be opened for an order in this status"""
        return self.can_transition(status, OrderStatus.PAYMENT_PENDING)
