"""
planning.py - Dry-run delivery planning.

Runs a full split + schedule cycle against an in-memory backend so callers
can see segment boundaries and target times without touching a real
delivery backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from text_relay_core.backend import DEFAULT_OUTSTANDING_CEILING
from text_relay_core.memory_backend import InMemoryDeliveryBackend
from text_relay_core.models import SplitConfiguration, WorkItem

from .coordinator import DeliveryCoordinator, ScheduleResult


@dataclass
class DeliveryPlan:
    """Outcome of a dry run."""
    items: List[WorkItem]
    schedule: Optional[ScheduleResult]
    ceiling: int
    outstanding_before: int


def plan_delivery(
    text: str,
    config: SplitConfiguration,
    base_time: datetime,
    *,
    ceiling: int = DEFAULT_OUTSTANDING_CEILING,
    outstanding: int = 0,
) -> DeliveryPlan:
    """
    Split text and schedule it against a throwaway in-memory backend.

    Args:
        text: Text to deliver
        config: Effective split configuration
        base_time: Target time of the first item
        ceiling: Outstanding ceiling to simulate
        outstanding: Slots already occupied before this batch

    Returns:
        DeliveryPlan with the final item states. ``schedule`` is None when
        the text was blank.
    """
    backend = InMemoryDeliveryBackend(ceiling=ceiling)
    backend.preload(min(outstanding, ceiling))
    coordinator = DeliveryCoordinator(backend, config)

    loaded = coordinator.load_text(text)
    if not loaded.ok:
        return DeliveryPlan(items=[], schedule=None, ceiling=ceiling, outstanding_before=outstanding)

    schedule = coordinator.schedule_batch(base_time)
    return DeliveryPlan(
        items=coordinator.items,
        schedule=schedule,
        ceiling=ceiling,
        outstanding_before=outstanding,
    )
