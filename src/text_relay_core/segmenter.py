"""Deterministic text segmentation.

Splits a block of text into bounded-length segments, preferring to cut:
- before whitespace (keeps words whole)
- after clause punctuation (keeps sentences readable)
- at the hard limit only when the look-back window has neither
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

logger = logging.getLogger(__name__)

# Characters searched backward from the limit when looking for a boundary.
BOUNDARY_WINDOW = 50
CLAUSE_PUNCTUATION = frozenset(".,!?;:")


def _find_cut(text: str, max_length: int) -> int:
    """Return the index at which ``text`` should be cut (exclusive end).

    ``text`` is longer than ``max_length``, so whitespace sitting exactly at
    the limit is a valid boundary.
    """
    window_start = max(0, max_length - BOUNDARY_WINDOW)

    space_at = _rfind(text, window_start, max_length + 1, str.isspace)
    if space_at is not None:
        return space_at

    punct_at = _rfind(text, window_start, max_length, CLAUSE_PUNCTUATION.__contains__)
    if punct_at is not None:
        return punct_at + 1

    return max_length


def _rfind(text: str, start: int, end: int, predicate) -> Optional[int]:
    for index in range(end - 1, start - 1, -1):
        if predicate(text[index]):
            return index
    return None


def split(text: str, max_length: int) -> List[str]:
    """Split text into segments of at most ``max_length`` characters.

    Args:
        text: Raw input text. Surrounding whitespace is ignored.
        max_length: Maximum characters per segment (must be positive).

    Returns:
        Segments in reading order. Blank input yields an empty list; no
        segment is ever empty.
    """
    if max_length <= 0:
        raise ValueError("max_length must be positive")

    segments: List[str] = []
    remaining = text.strip()

    while remaining:
        if len(remaining) <= max_length:
            segments.append(remaining)
            break

        cut = _find_cut(remaining, max_length)
        segment = remaining[:cut].strip()
        if segment:
            segments.append(segment)
        remaining = remaining[cut:].strip()

    logger.debug(f"Split {len(text)} chars into {len(segments)} segment(s) (max_length={max_length})")
    return segments


def estimate_segment_count(text: str, max_length: int) -> int:
    """Rough segment count for a text, without running the split."""
    if max_length <= 0:
        raise ValueError("max_length must be positive")
    stripped = text.strip()
    if not stripped:
        return 0
    return max(1, math.ceil(len(stripped) / max_length))
