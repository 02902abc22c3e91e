"""Pydantic models for work items and split settings."""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator


PREVIEW_LENGTH = 50


class DeliveryStatus(str, Enum):
    """Work item delivery status."""

    PENDING = "pending"
    SCHEDULED = "scheduled"
    SENT = "sent"
    CANCELLED = "cancelled"


class StatusAction(str, Enum):
    """Actions that trigger status transitions."""

    SCHEDULE = "schedule"    # pending → scheduled
    DELIVER = "deliver"      # scheduled → sent
    CANCEL = "cancel"        # pending/scheduled → cancelled


TERMINAL_STATUSES = frozenset({DeliveryStatus.SENT, DeliveryStatus.CANCELLED})
EDITABLE_STATUSES = frozenset({DeliveryStatus.PENDING, DeliveryStatus.SCHEDULED})


def new_item_id() -> str:
    return uuid.uuid4().hex


class WorkItem(BaseModel):
    """One segment of text wrapped with delivery state."""

    id: str = Field(default_factory=new_item_id, description="Opaque immutable id")
    part_number: int = Field(..., ge=1, description="1-based position in the batch")
    total_parts: int = Field(..., ge=1, description="Number of items in the batch")
    content: str
    scheduled_at: Optional[datetime] = Field(None, description="Committed delivery time")
    delivery_handle: Optional[str] = Field(None, description="Backend handle while scheduled")
    status: DeliveryStatus = DeliveryStatus.PENDING

    model_config = ConfigDict(
        use_enum_values=False,  # Keep enum objects, not string values
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_editable(self) -> bool:
        return self.status in EDITABLE_STATUSES

    @property
    def preview(self) -> str:
        """Short form of the content for listings."""
        if len(self.content) <= PREVIEW_LENGTH:
            return self.content
        return self.content[: PREVIEW_LENGTH - 3] + "..."

    def title(self, prefix: str) -> str:
        """Format as: Notification 2/5"""
        return f"{prefix} {self.part_number}/{self.total_parts}"


class SplitConfiguration(BaseModel):
    """Read-only settings consumed by the segmenter and the coordinator."""

    max_segment_length: int = Field(100, gt=0, description="Maximum characters per segment")
    interval_seconds: float = Field(60.0, ge=0, description="Delay between consecutive items")
    title_prefix: str = Field("Notification", description="Title prefix for delivered items")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("title_prefix")
    @classmethod
    def validate_title_prefix(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title_prefix cannot be empty")
        return v.strip()

    @property
    def interval(self) -> timedelta:
        return timedelta(seconds=self.interval_seconds)
