from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import pytest
from hypothesis import settings

from text_relay_core.memory_backend import InMemoryDeliveryBackend
from text_relay_core.models import SplitConfiguration
from text_relay_ops.coordinator import DeliveryCoordinator

# Prevent Hypothesis from writing a local example database (e.g. `.hypothesis/`) during tests.
settings.register_profile("text-relay-tests", database=None)
settings.load_profile("text-relay-tests")

FIXED_NOW = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


def write_split_config(project_root: Path, values: Optional[Dict[str, Any]] = None) -> Path:
    """Write a .text-relay/config.toml with a [split] table for tests.

    Args:
        project_root: Temporary workspace root (tmp_path).
        values: Keys for the [split] table (strings and numbers only).

    Returns:
        Path to the written config file.
    """
    if values is None:
        values = {"max_segment_length": 40}

    lines = ["[split]"]
    for key, value in values.items():
        if isinstance(value, str):
            lines.append(f'{key} = "{value}"')
        else:
            lines.append(f"{key} = {value}")

    path = project_root / ".text-relay" / "config.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def numbered_text(count: int) -> str:
    """Text that splits into exactly ``count`` segments at max_length=6."""
    return " ".join(f"word{n:02d}" for n in range(count))


@pytest.fixture
def backend() -> InMemoryDeliveryBackend:
    return InMemoryDeliveryBackend(ceiling=64)


@pytest.fixture
def config() -> SplitConfiguration:
    return SplitConfiguration(max_segment_length=6, interval_seconds=60, title_prefix="Note")


@pytest.fixture
def coordinator(backend: InMemoryDeliveryBackend, config: SplitConfiguration) -> DeliveryCoordinator:
    return DeliveryCoordinator(backend, config, clock=lambda: FIXED_NOW)
