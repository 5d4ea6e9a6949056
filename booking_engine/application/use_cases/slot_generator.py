from __future__ import annotations

from typing import Callable, Iterator

from booking_engine.application.exceptions import ValidationError
from booking_engine.domain.entities.schedule import Window
from booking_engine.domain.entities.time_slot import TimeSlot

DEFAULT_STEP_MINUTES = 30


def candidate_starts(window: Window, duration_minutes: int, step: int = DEFAULT_STEP_MINUTES) -> Iterator[int]:
    """Start minutes on the step grid whose full span fits inside the window."""
    if duration_minutes <= 0:
        raise ValidationError(f"Duration must be positive, got {duration_minutes}")
    if step <= 0:
        raise ValidationError(f"Slot step must be positive, got {step}")

    start = window.start_minute
    while start + duration_minutes <= window.end_minute:
        yield start
        start += step


def generate_slots(
    window: Window | None,
    duration_minutes: int,
    is_free: Callable[[int, int], bool],
    step: int = DEFAULT_STEP_MINUTES,
) -> list[TimeSlot]:
    """
    Enumerate bookable slots.

    The grid is fixed by ``step`` while the conflict span uses the real
    ``duration_minutes``, so a short service may find no slot in a gap that is
    not aligned to the grid.
    """
    if window is None:
        return []
    return [
        TimeSlot.from_minute(start)
        for start in candidate_starts(window, duration_minutes, step)
        if is_free(start, duration_minutes)
    ]
