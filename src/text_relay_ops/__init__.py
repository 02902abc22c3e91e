"""
text_relay_ops - Use-case layer for text delivery.

CLI commands and embedding applications delegate to these objects and
functions; they never talk to a delivery backend directly.

Modules:
    coordinator: Batch delivery lifecycle (schedule, send, cancel, remove, clear, edit)
    planning: Dry-run planning against an in-memory backend
"""

from .coordinator import (
    CancelResult,
    ClearResult,
    DeliveryCoordinator,
    EditResult,
    RemoveResult,
    ScheduleResult,
    SplitResult,
)
from .planning import DeliveryPlan, plan_delivery

__all__ = [
    "CancelResult",
    "ClearResult",
    "DeliveryCoordinator",
    "EditResult",
    "RemoveResult",
    "ScheduleResult",
    "SplitResult",
    "DeliveryPlan",
    "plan_delivery",
]
