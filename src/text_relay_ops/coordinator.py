"""
coordinator.py - Delivery lifecycle for one batch of work items.

A DeliveryCoordinator owns a single ordered batch. Every public method takes
the batch lock for its whole duration and issues backend calls one at a time,
so target times are assigned in batch order and scheduling stops at the first
backend failure.

Failures never escape as exceptions: each operation returns a result object
whose ``error`` field carries the typed error from text_relay_core.errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional, Union

from text_relay_core.backend import DeliveryBackend, PermissionStatus
from text_relay_core.errors import (
    BackendUnavailableError,
    BatchBusyError,
    CapacityExceededError,
    InputEmptyError,
    InvalidTransitionError,
    ItemNotFoundError,
    PartialSchedulingFailure,
    PermissionDeniedError,
    RelayError,
)
from text_relay_core.items import build_items, renumber
from text_relay_core.models import DeliveryStatus, SplitConfiguration, StatusAction, WorkItem
from text_relay_core.segmenter import split
from text_relay_core.state import StateMachine

logger = logging.getLogger(__name__)

ItemRef = Union[WorkItem, str]
BatchListener = Callable[[List[WorkItem]], None]


@dataclass
class SplitResult:
    """Result of loading text into the batch."""
    items: List[WorkItem] = field(default_factory=list)
    error: Optional[RelayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ScheduleResult:
    """Result of scheduling or sending the pending items of a batch.

    ``pending`` lists the eligible items that are still pending afterwards,
    in batch order: exactly the items a caller has to retry.
    """
    scheduled: List[WorkItem] = field(default_factory=list)
    pending: List[WorkItem] = field(default_factory=list)
    truncated_count: int = 0
    error: Optional[RelayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def succeeded_count(self) -> int:
        return len(self.scheduled)

    @property
    def truncated(self) -> bool:
        return self.truncated_count > 0


@dataclass
class CancelResult:
    """Result of cancelling one item."""
    item: Optional[WorkItem] = None
    backend_error: Optional[BackendUnavailableError] = None
    error: Optional[RelayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RemoveResult:
    """Result of removing one item from the batch."""
    item: Optional[WorkItem] = None
    remaining: int = 0
    backend_error: Optional[BackendUnavailableError] = None
    error: Optional[RelayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ClearResult:
    """Result of clearing the batch."""
    removed_count: int = 0
    cancelled_count: int = 0
    backend_failures: int = 0

    @property
    def ok(self) -> bool:
        return True


@dataclass
class EditResult:
    """Result of editing item content."""
    item: Optional[WorkItem] = None
    error: Optional[RelayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _snapshot(items: Iterable[WorkItem]) -> List[WorkItem]:
    return [item.model_copy() for item in items]


class DeliveryCoordinator:
    """Drive one batch of work items through the delivery lifecycle."""

    def __init__(
        self,
        backend: DeliveryBackend,
        config: SplitConfiguration,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._backend = backend
        self._config = config
        self._clock = clock or _utc_now
        self._items: List[WorkItem] = []
        self._listeners: List[BatchListener] = []
        self._lock = threading.RLock()

    # Read access

    @property
    def config(self) -> SplitConfiguration:
        return self._config

    @property
    def items(self) -> List[WorkItem]:
        """Snapshot of the batch in order."""
        with self._lock:
            return _snapshot(self._items)

    def get(self, item_id: str) -> Optional[WorkItem]:
        with self._lock:
            for item in self._items:
                if item.id == item_id:
                    return item.model_copy()
            return None

    @property
    def can_send(self) -> bool:
        with self._lock:
            return any(item.is_editable for item in self._items)

    def counts(self) -> Dict[DeliveryStatus, int]:
        with self._lock:
            counts = {status: 0 for status in DeliveryStatus}
            for item in self._items:
                counts[item.status] += 1
            return counts

    def subscribe(self, listener: BatchListener) -> Callable[[], None]:
        """Call ``listener`` with a batch snapshot after every change.

        Returns:
            A function that removes the listener again.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # Batch creation

    def load_text(self, text: str) -> SplitResult:
        """Split text and replace the batch with fresh pending items."""
        with self._lock:
            trimmed = text.strip()
            if not trimmed:
                return SplitResult(error=InputEmptyError())

            scheduled = sum(1 for item in self._items if item.status == DeliveryStatus.SCHEDULED)
            if scheduled:
                return SplitResult(error=BatchBusyError(scheduled))

            segments = split(trimmed, self._config.max_segment_length)
            self._items = build_items(segments)
            logger.info(f"Loaded {len(trimmed)} chars as {len(self._items)} item(s)")
            self._notify()
            return SplitResult(items=_snapshot(self._items))

    # Delivery

    def schedule_batch(self, base_time: datetime, interval: Optional[timedelta] = None) -> ScheduleResult:
        """Schedule pending items at ``base_time + i * interval``."""
        with self._lock:
            return self._schedule(base_time, interval, immediate=False)

    def send_immediately(self, interval: Optional[timedelta] = None) -> ScheduleResult:
        """Send the first pending item now and space the rest from now."""
        with self._lock:
            return self._schedule(self._clock(), interval, immediate=True)

    def confirm_delivered(self, handles: Iterable[str]) -> List[WorkItem]:
        """Mark scheduled items whose handle the backend reports as delivered."""
        with self._lock:
            delivered_handles = set(handles)
            delivered: List[WorkItem] = []
            for item in self._items:
                if item.status == DeliveryStatus.SCHEDULED and item.delivery_handle in delivered_handles:
                    StateMachine.transition(item, StatusAction.DELIVER)
                    delivered.append(item)
            if delivered:
                logger.info(f"Confirmed delivery of {len(delivered)} item(s)")
                self._notify()
            return _snapshot(delivered)

    # Item maintenance

    def cancel(self, item: ItemRef) -> CancelResult:
        with self._lock:
            try:
                target = self._resolve(item)
            except ItemNotFoundError as e:
                return CancelResult(error=e)

            if target.status == DeliveryStatus.CANCELLED:
                return CancelResult(item=target.model_copy())
            if target.status == DeliveryStatus.SENT:
                return CancelResult(
                    item=target.model_copy(),
                    error=InvalidTransitionError(target.status.value, StatusAction.CANCEL.value),
                )

            backend_error = self._cancel_item(target)
            self._notify()
            return CancelResult(item=target.model_copy(), backend_error=backend_error)

    def remove(self, item: ItemRef) -> RemoveResult:
        """Cancel (if still active) and delete an item, then renumber the batch."""
        with self._lock:
            try:
                target = self._resolve(item)
            except ItemNotFoundError as e:
                return RemoveResult(remaining=len(self._items), error=e)

            backend_error = None
            if not target.is_terminal:
                backend_error = self._cancel_item(target)

            self._items.remove(target)
            renumber(self._items)
            logger.info(f"Removed item {target.id}; {len(self._items)} item(s) remain")
            self._notify()
            return RemoveResult(
                item=target.model_copy(),
                remaining=len(self._items),
                backend_error=backend_error,
            )

    def clear_all(self) -> ClearResult:
        """Cancel every active item (best-effort) and empty the batch."""
        with self._lock:
            if not self._items:
                return ClearResult()

            result = ClearResult(removed_count=len(self._items))
            for item in self._items:
                if item.is_terminal:
                    continue
                if self._cancel_item(item) is not None:
                    result.backend_failures += 1
                result.cancelled_count += 1

            self._items.clear()
            logger.info(
                f"Cleared batch: removed={result.removed_count} cancelled={result.cancelled_count} "
                f"backend_failures={result.backend_failures}"
            )
            self._notify()
            return result

    def edit_content(self, item: ItemRef, new_content: str) -> EditResult:
        """Replace the text of a pending or scheduled item."""
        with self._lock:
            try:
                target = self._resolve(item)
            except ItemNotFoundError as e:
                return EditResult(error=e)

            if not target.is_editable:
                return EditResult(
                    item=target.model_copy(),
                    error=InvalidTransitionError(target.status.value, "edit"),
                )
            if not new_content.strip():
                return EditResult(item=target.model_copy(), error=InputEmptyError())

            target.content = new_content
            self._notify()
            return EditResult(item=target.model_copy())

    # Internals

    def _resolve(self, item: ItemRef) -> WorkItem:
        item_id = item.id if isinstance(item, WorkItem) else item
        for candidate in self._items:
            if candidate.id == item_id:
                return candidate
        raise ItemNotFoundError(item_id)

    def _call_backend(self, operation: Callable, *args):
        """Invoke a backend operation, reporting any failure as BackendUnavailableError."""
        try:
            return operation(*args)
        except BackendUnavailableError:
            raise
        except Exception as e:
            raise BackendUnavailableError(f"{type(e).__name__}: {e}") from e

    def _cancel_item(self, item: WorkItem) -> Optional[BackendUnavailableError]:
        """Cancel an active item; backend failures are logged and returned, never raised."""
        backend_error = None
        if item.delivery_handle:
            try:
                self._call_backend(self._backend.cancel, item.delivery_handle)
            except BackendUnavailableError as e:
                logger.warning(f"Failed to cancel delivery {item.delivery_handle} for item {item.id}: {e}")
                backend_error = e
        StateMachine.transition(item, StatusAction.CANCEL)
        return backend_error

    def _schedule(self, base_time: datetime, interval: Optional[timedelta], *, immediate: bool) -> ScheduleResult:
        step = self._config.interval if interval is None else interval

        try:
            permission = self._call_backend(self._backend.check_permission)
        except BackendUnavailableError as e:
            logger.warning(f"Permission check failed: {e}")
            return ScheduleResult(error=PermissionDeniedError(f"backend unavailable: {e}"))
        if permission != PermissionStatus.GRANTED:
            return ScheduleResult(error=PermissionDeniedError())

        eligible = [item for item in self._items if item.status == DeliveryStatus.PENDING]
        if not eligible:
            return ScheduleResult()

        try:
            ceiling = self._call_backend(self._backend.outstanding_ceiling)
            outstanding = self._call_backend(self._backend.outstanding_count)
        except BackendUnavailableError as e:
            logger.warning(f"Outstanding count query failed: {e}")
            return ScheduleResult(pending=_snapshot(eligible), error=e)

        available = ceiling - outstanding
        if available <= 0:
            return ScheduleResult(
                pending=_snapshot(eligible),
                error=CapacityExceededError(outstanding, ceiling),
            )

        attempt = eligible[:available]
        truncated_count = len(eligible) - len(attempt)
        scheduled: List[WorkItem] = []
        error: Optional[RelayError] = None

        for index, item in enumerate(attempt):
            target_time = base_time + index * step
            title = item.title(self._config.title_prefix)
            try:
                if immediate and index == 0:
                    handle = self._call_backend(self._backend.enqueue_immediate, item.content, title)
                else:
                    handle = self._call_backend(self._backend.enqueue_at, item.content, title, target_time)
                if not handle:
                    raise BackendUnavailableError("backend returned no delivery handle")
            except BackendUnavailableError as e:
                logger.warning(f"Enqueue failed for {title} (item {item.id}): {e}")
                error = PartialSchedulingFailure(len(scheduled), item.id, cause=e)
                break

            StateMachine.transition(item, StatusAction.SCHEDULE)
            item.scheduled_at = target_time
            item.delivery_handle = handle
            scheduled.append(item)
            logger.debug(f"Scheduled {title} at {target_time.isoformat()} (handle={handle})")

        if truncated_count:
            logger.info(f"Capacity allows {len(attempt)} of {len(eligible)} pending item(s)")
        logger.info(f"Scheduled {len(scheduled)} item(s); {len(eligible) - len(scheduled)} still pending")

        if scheduled:
            self._notify()
        return ScheduleResult(
            scheduled=_snapshot(scheduled),
            pending=_snapshot(item for item in eligible if item.status == DeliveryStatus.PENDING),
            truncated_count=truncated_count,
            error=error,
        )

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = _snapshot(self._items)
        for listener in list(self._listeners):
            try:
                listener(list(snapshot))
            except Exception:
                logger.exception("Batch listener failed")
