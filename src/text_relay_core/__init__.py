"""Text Relay Core - Transport-agnostic text segmentation and delivery domain."""

from .__version__ import __version__, __version_info__

from .models import (
    DeliveryStatus,
    SplitConfiguration,
    StatusAction,
    WorkItem,
)
from .state import StateMachine
from .segmenter import (
    BOUNDARY_WINDOW,
    CLAUSE_PUNCTUATION,
    estimate_segment_count,
    split,
)
from .items import build_items, renumber
from .backend import DEFAULT_OUTSTANDING_CEILING, DeliveryBackend, PermissionStatus
from .memory_backend import InMemoryDeliveryBackend
from .config import ConfigLoader
from .errors import (
    BackendUnavailableError,
    BatchBusyError,
    CapacityExceededError,
    ConfigError,
    InputEmptyError,
    InvalidTransitionError,
    ItemNotFoundError,
    PartialSchedulingFailure,
    PermissionDeniedError,
    RelayError,
)

__all__ = [
    # Version
    "__version__",
    "__version_info__",
    # Models
    "DeliveryStatus",
    "SplitConfiguration",
    "StatusAction",
    "WorkItem",
    # State
    "StateMachine",
    # Segmenter
    "BOUNDARY_WINDOW",
    "CLAUSE_PUNCTUATION",
    "estimate_segment_count",
    "split",
    # Items
    "build_items",
    "renumber",
    # Backend
    "DEFAULT_OUTSTANDING_CEILING",
    "DeliveryBackend",
    "PermissionStatus",
    "InMemoryDeliveryBackend",
    # Config
    "ConfigLoader",
    # Errors
    "BackendUnavailableError",
    "BatchBusyError",
    "CapacityExceededError",
    "ConfigError",
    "InputEmptyError",
    "InvalidTransitionError",
    "ItemNotFoundError",
    "PartialSchedulingFailure",
    "PermissionDeniedError",
    "RelayError",
]
