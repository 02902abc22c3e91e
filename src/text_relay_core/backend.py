"""Delivery backend abstraction."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Protocol

# Platform maximum of not-yet-delivered items.
DEFAULT_OUTSTANDING_CEILING = 64


class PermissionStatus(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"


class DeliveryBackend(Protocol):
    """Delivery backend protocol.

    Implementations raise BackendUnavailableError when a call fails.
    """

    def check_permission(self) -> PermissionStatus:
        """Ask whether sending/scheduling is allowed."""
        ...

    def outstanding_count(self) -> int:
        """Number of items queued but not yet delivered."""
        ...

    def outstanding_ceiling(self) -> int:
        """Maximum number of outstanding items allowed at once."""
        ...

    def enqueue_at(self, content: str, title: str, when: datetime) -> str:
        """Queue content for delivery at ``when``; return its handle."""
        ...

    def enqueue_immediate(self, content: str, title: str) -> str:
        """Queue content for delivery right away; return its handle."""
        ...

    def cancel(self, handle: str) -> None:
        """Drop a queued item. Unknown handles are ignored."""
        ...

    def cancel_all(self) -> None:
        """Drop every queued item."""
        ...
