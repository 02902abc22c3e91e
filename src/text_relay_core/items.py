"""Turn segments into numbered work items."""

from __future__ import annotations

from typing import List, Sequence

from .models import DeliveryStatus, WorkItem


def build_items(segments: Sequence[str]) -> List[WorkItem]:
    """Wrap each segment in a fresh pending WorkItem, numbered 1..N."""
    total = len(segments)
    return [
        WorkItem(
            part_number=index + 1,
            total_parts=total,
            content=content,
            status=DeliveryStatus.PENDING,
        )
        for index, content in enumerate(segments)
    ]


def renumber(items: List[WorkItem]) -> None:
    """Restore contiguous part numbers after the batch changed size."""
    total = len(items)
    for index, item in enumerate(items):
        item.part_number = index + 1
        item.total_parts = total
