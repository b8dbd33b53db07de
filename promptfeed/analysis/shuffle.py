"""Deterministic per-day ordering."""

from datetime import UTC, date, datetime
from typing import TypeVar

T = TypeVar("T")

_MASK_31 = 0x7FFFFFFF


def daily_seed(day: date | None = None) -> int:
    """Stable non-negative seed for a calendar day.

    Uses a 31-multiplier string hash rather than ``hash()``, which is salted
    per process.
    """
    day = day or datetime.now(UTC).date()
    value = 0
    for ch in day.isoformat():
        value = (value * 31 + ord(ch)) & 0xFFFFFFFF
    return value & _MASK_31


def seeded_shuffle(items: list[T], seed: int) -> list[T]:
    """Fisher-Yates shuffle driven by a linear congruential generator.

    Returns a new list; the same seed always gives the same order.
    """
    result = list(items)
    state = seed & _MASK_31
    index = len(result)
    while index > 0:
        state = (state * 1103515245 + 12345) & _MASK_31
        pick = state % index
        index -= 1
        result[index], result[pick] = result[pick], result[index]
    return result
