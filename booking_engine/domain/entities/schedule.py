from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Weekday(str, Enum):
    """Day names in Monday-first order; index matches ``date.weekday()``."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        return WEEK[day.weekday()]

    @classmethod
    def parse(cls, name: str) -> "Weekday":
        return cls(name.strip().lower())


WEEK: tuple[Weekday, ...] = tuple(Weekday)


@dataclass(frozen=True)
class Window:
    """Open interval of a day, in minutes since midnight."""

    start_minute: int
    end_minute: int

    @property
    def length(self) -> int:
        return self.end_minute - self.start_minute

    def contains_span(self, start_minute: int, duration_minutes: int) -> bool:
        return start_minute >= self.start_minute and start_minute + duration_minutes <= self.end_minute


@dataclass(frozen=True)
class DaySchedule:
    from_time: str = ""
    to_time: str = ""
    status: str = "unavailable"

    @property
    def is_available(self) -> bool:
        return self.status == "available"


@dataclass(frozen=True)
class PersonalSchedule:
    days: dict[Weekday, DaySchedule] = field(default_factory=dict)

    def for_day(self, day: Weekday) -> DaySchedule | None:
        return self.days.get(day)


@dataclass(frozen=True)
class OpeningHours:
    day: Weekday
    is_open: bool = False
    open_time: str = ""
    close_time: str = ""
