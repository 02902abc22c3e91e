import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Set
import uuid

from .backend import DEFAULT_OUTSTANDING_CEILING, PermissionStatus
from .errors import BackendUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class QueuedDelivery:
    handle: str
    content: str
    title: str
    deliver_at: Optional[datetime]  # None means "as soon as possible"


class InMemoryDeliveryBackend:
    """Deterministic in-process backend for testing and dry runs.

    Keeps queued deliveries in insertion order. Failures can be injected per
    enqueue call so callers can exercise partial scheduling.
    """

    def __init__(
        self,
        ceiling: int = DEFAULT_OUTSTANDING_CEILING,
        permission: PermissionStatus = PermissionStatus.GRANTED,
    ):
        if ceiling < 0:
            raise ValueError("ceiling must be >= 0")
        self.ceiling = ceiling
        self.permission = permission
        self.available = True
        self._queue: Dict[str, QueuedDelivery] = {}
        self._fail_on: Set[int] = set()
        self._fail_after: Optional[int] = None
        self._fail_cancel: Set[str] = set()
        self.enqueue_calls = 0
        self.cancelled: List[str] = []

    # Failure injection

    def fail_on_call(self, *call_numbers: int) -> None:
        """Make the given 1-based enqueue calls raise BackendUnavailableError."""
        self._fail_on.update(call_numbers)

    def fail_after(self, count: int) -> None:
        """Let the first ``count`` enqueue calls through; every later one fails."""
        self._fail_after = count

    def fail_cancel_for(self, *handles: str) -> None:
        self._fail_cancel.update(handles)

    def preload(self, count: int) -> List[str]:
        """Occupy ``count`` outstanding slots with placeholder deliveries."""
        return [self._store("", "", None) for _ in range(count)]

    # DeliveryBackend

    def check_permission(self) -> PermissionStatus:
        self._ensure_available()
        return self.permission

    def outstanding_count(self) -> int:
        self._ensure_available()
        return len(self._queue)

    def outstanding_ceiling(self) -> int:
        self._ensure_available()
        return self.ceiling

    def enqueue_at(self, content: str, title: str, when: datetime) -> str:
        self._before_enqueue()
        return self._store(content, title, when)

    def enqueue_immediate(self, content: str, title: str) -> str:
        self._before_enqueue()
        return self._store(content, title, None)

    def cancel(self, handle: str) -> None:
        self._ensure_available()
        if handle in self._fail_cancel:
            raise BackendUnavailableError(f"cancel failed for {handle}")
        if self._queue.pop(handle, None) is not None:
            self.cancelled.append(handle)

    def cancel_all(self) -> None:
        self._ensure_available()
        self.cancelled.extend(self._queue)
        self._queue.clear()

    # Inspection

    @property
    def queued(self) -> List[QueuedDelivery]:
        return list(self._queue.values())

    def deliver_due(self, now: datetime) -> List[str]:
        """Remove and return handles whose delivery time has come."""
        due = [
            handle
            for handle, queued in self._queue.items()
            if queued.deliver_at is None or queued.deliver_at <= now
        ]
        for handle in due:
            del self._queue[handle]
        logger.debug(f"Delivered {len(due)} item(s) at {now.isoformat()}")
        return due

    def _ensure_available(self) -> None:
        if not self.available:
            raise BackendUnavailableError("delivery backend is unavailable")

    def _before_enqueue(self) -> None:
        self._ensure_available()
        self.enqueue_calls += 1
        if self.enqueue_calls in self._fail_on or (
            self._fail_after is not None and self.enqueue_calls > self._fail_after
        ):
            raise BackendUnavailableError(f"enqueue call {self.enqueue_calls} failed")
        if len(self._queue) >= self.ceiling:
            raise BackendUnavailableError("outstanding ceiling reached")

    def _store(self, content: str, title: str, when: Optional[datetime]) -> str:
        handle = uuid.uuid4().hex
        self._queue[handle] = QueuedDelivery(handle=handle, content=content, title=title, deliver_at=when)
        return handle
