"""Exception taxonomy for text-relay-core."""

from typing import Optional


class RelayError(Exception):
    """Base exception for all text-relay errors."""

    pass


# Input errors


class InputEmptyError(RelayError):
    """Text to split is blank after trimming."""

    def __init__(self) -> None:
        super().__init__("Input text is empty")


# Config errors


class ConfigError(RelayError):
    """Failed to load or validate split configuration."""

    pass


# Batch errors


class ItemNotFoundError(RelayError):
    """Work item is not part of the current batch."""

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"Item not found in batch: {item_id}")


class BatchBusyError(RelayError):
    """Batch still has scheduled items and cannot be replaced."""

    def __init__(self, scheduled_count: int) -> None:
        self.scheduled_count = scheduled_count
        super().__init__(
            f"Batch has {scheduled_count} scheduled item(s); cancel or clear it first"
        )


# State machine errors


class InvalidTransitionError(RelayError):
    """Status transition not allowed."""

    def __init__(self, from_status: str, action: str) -> None:
        self.from_status = from_status
        self.action = action
        super().__init__(f"Invalid transition: {from_status} --{action}--> (no target status)")


# Delivery backend errors


class BackendUnavailableError(RelayError):
    """A single delivery backend call failed."""

    pass


class PermissionDeniedError(RelayError):
    """Backend refused to send or schedule."""

    def __init__(self, reason: str = "permission denied") -> None:
        self.reason = reason
        super().__init__(f"Delivery not permitted: {reason}")


class CapacityExceededError(RelayError):
    """No outstanding slots available on the backend."""

    def __init__(self, outstanding: int, ceiling: int) -> None:
        self.outstanding = outstanding
        self.ceiling = ceiling
        super().__init__(f"No delivery slots available ({outstanding}/{ceiling} outstanding)")


class PartialSchedulingFailure(RelayError):
    """Scheduling stopped at the first backend failure."""

    def __init__(
        self,
        succeeded_count: int,
        failed_at: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.succeeded_count = succeeded_count
        self.failed_at = failed_at
        self.cause = cause
        message = f"Scheduling stopped after {succeeded_count} item(s); failed at {failed_at}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
