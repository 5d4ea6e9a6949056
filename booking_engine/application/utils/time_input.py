from __future__ import annotations

from datetime import date
from typing import Any

from booking_engine.application.exceptions import ValidationError
from booking_engine.domain.entities.time_slot import TimeSlot


def parse_booking_date(text: str | date) -> date:
    """Parse a calendar date given as ``YYYY-MM-DD``."""
    if isinstance(text, date):
        return text
    try:
        return date.fromisoformat(str(text).strip())
    except ValueError as e:
        raise ValidationError(f"Invalid date {text!r}; expected YYYY-MM-DD") from e


def parse_time_slot(value: Any) -> TimeSlot:
    """Accept ``"HH:MM"`` or ``{"hour": h, "minute": m}``."""
    if isinstance(value, TimeSlot):
        return value
    try:
        if isinstance(value, str):
            return TimeSlot.parse(value)
        if isinstance(value, dict):
            hour, minute = value.get("hour"), value.get("minute")
            if not _is_int(hour) or not _is_int(minute):
                raise ValueError("hour and minute must be integers")
            return TimeSlot(hour=hour, minute=minute)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    raise ValidationError(f"Invalid time {value!r}; expected HH:MM or {{hour, minute}}")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
