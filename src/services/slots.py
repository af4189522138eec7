"""
Slot Resolver - Splits availability ranges into one-hour slots and
checks a requested hour against them.

Split slots keep the order of the ranges in the dataset. They are never
re-sorted, so the "nearest" suggestion is the first later slot in dataset
order, which is not always the numerically closest one.
"""

import re
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from src.models.clinic import SlotResolution, SlotStatus, SlotWindow
from src.models.filters import Absent, RequestedTime

HOUR_RANGE_PATTERN = re.compile(
    r"^\s*(\d{1,2})(?::\d{2})?\s*-\s*(\d{1,2})(?::\d{2})?\s*$"
)


def parse_hour_range(text: str) -> Optional[Tuple[int, int]]:
    """Parse ``"9:00-12:00"`` into ``(9, 12)``; minutes are ignored."""
    match = HOUR_RANGE_PATTERN.match(text)
    if not match:
        logger.debug(f"Skipping malformed availability range: {text!r}")
        return None
    return int(match.group(1)), int(match.group(2))


def split_range(start: int, end: int, weekday: Optional[str] = None) -> List[SlotWindow]:
    """Expand ``[start, end)`` into unit-hour windows; empty when start >= end."""
    return [SlotWindow(weekday=weekday, start=hour) for hour in range(start, end)]


def split_slots(ranges: Sequence[str], weekday: Optional[str] = None) -> List[SlotWindow]:
    """Expand every range in order and concatenate the windows."""
    windows: List[SlotWindow] = []
    for text in ranges:
        bounds = parse_hour_range(text)
        if bounds is None:
            continue
        windows.extend(split_range(*bounds, weekday=weekday))
    return windows


def find_exact_window(windows: Sequence[SlotWindow], hour: int) -> Optional[SlotWindow]:
    """First window starting exactly at ``hour``."""
    return next((w for w in windows if w.start == hour), None)


def find_later_window(windows: Sequence[SlotWindow], hour: int) -> Optional[SlotWindow]:
    """First window, in the given order, starting strictly after ``hour``."""
    return next((w for w in windows if w.start > hour), None)


def resolve_slot(
    weekday: Optional[str],
    requested: RequestedTime,
    ranges: Sequence[str],
) -> SlotResolution:
    """
    Resolve a requested day and hour against one doctor's ranges for that day.

    Args:
        weekday: Requested weekday name, or None for a day-agnostic query
        requested: Requested hour, or Absent
        ranges: The doctor's ranges for ``weekday`` in dataset order

    Returns:
        SlotResolution describing availability and any suggested window
    """
    if weekday is None:
        return SlotResolution(status=SlotStatus.DAY_AGNOSTIC)

    windows = split_slots(ranges, weekday=weekday)
    if not windows:
        return SlotResolution(status=SlotStatus.NOT_ON_DAY, weekday=weekday)

    if isinstance(requested, Absent):
        return SlotResolution(status=SlotStatus.DAY_SCHEDULE, weekday=weekday, windows=windows)

    exact = find_exact_window(windows, requested.value)
    if exact is not None:
        return SlotResolution(
            status=SlotStatus.EXACT_MATCH, weekday=weekday, windows=windows, window=exact
        )

    later = find_later_window(windows, requested.value)
    if later is not None:
        return SlotResolution(
            status=SlotStatus.NEAREST_LATER, weekday=weekday, windows=windows, window=later
        )

    return SlotResolution(status=SlotStatus.NO_LATER_SLOT, weekday=weekday, windows=windows)
