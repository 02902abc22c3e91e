"""State machine and transition logic for work items."""

from typing import Dict, Tuple

from .errors import InvalidTransitionError
from .models import DeliveryStatus, StatusAction, WorkItem


class StateMachine:
    """Enforce status transitions for work items."""

    # Valid transitions: (from_status, action) → to_status
    TRANSITIONS: Dict[Tuple[DeliveryStatus, StatusAction], DeliveryStatus] = {
        (DeliveryStatus.PENDING, StatusAction.SCHEDULE): DeliveryStatus.SCHEDULED,
        (DeliveryStatus.SCHEDULED, StatusAction.DELIVER): DeliveryStatus.SENT,

        # Cancel (from any non-terminal status)
        (DeliveryStatus.PENDING, StatusAction.CANCEL): DeliveryStatus.CANCELLED,
        (DeliveryStatus.SCHEDULED, StatusAction.CANCEL): DeliveryStatus.CANCELLED,
    }

    @staticmethod
    def can_transition(status: DeliveryStatus, action: StatusAction) -> bool:
        """
        Check if transition is valid.

        Args:
            status: Current DeliveryStatus
            action: StatusAction to perform

        Returns:
            True if transition is allowed
        """
        return (status, action) in StateMachine.TRANSITIONS

    @staticmethod
    def transition(item: WorkItem, action: StatusAction) -> WorkItem:
        """
        Move an item to its next status (modified in-place).

        Leaving `scheduled` always drops the delivery handle; cancelling also
        forgets the committed time.

        Raises:
            InvalidTransitionError: If transition is not allowed
        """
        key = (item.status, action)
        if key not in StateMachine.TRANSITIONS:
            raise InvalidTransitionError(item.status.value, action.value)

        item.status = StateMachine.TRANSITIONS[key]
        if item.status != DeliveryStatus.SCHEDULED:
            item.delivery_handle = None
        if item.status == DeliveryStatus.CANCELLED:
            item.scheduled_at = None
        return item
