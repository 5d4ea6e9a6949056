from __future__ import annotations

import re
from dataclasses import dataclass

_CLOCK_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

MINUTES_PER_DAY = 24 * 60


def parse_clock(text: str) -> int:
    """Parse a 24-hour ``HH:MM`` string into minutes since midnight.

    Raises ValueError for anything else ("9:00", "24:00", "12:60", " 09:00").
    """
    match = _CLOCK_RE.match(text or "")
    if not match:
        raise ValueError(f"Invalid time {text!r}; expected 24-hour HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


@dataclass(frozen=True, order=True)
class TimeSlot:
    hour: int
    minute: int

    def __post_init__(self) -> None:
        if not (0 <= self.hour <= 23 and 0 <= self.minute <= 59):
            raise ValueError(
                f"Invalid time {self.hour}:{self.minute}; hours must be 0-23, minutes must be 0-59"
            )

    @classmethod
    def parse(cls, text: str) -> "TimeSlot":
        return cls.from_minute(parse_clock(text))

    @classmethod
    def from_minute(cls, minute_of_day: int) -> "TimeSlot":
        return cls(hour=minute_of_day // 60, minute=minute_of_day % 60)

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"
