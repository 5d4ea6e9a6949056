from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Callable

from booking_engine.domain.entities.schedule import (
    OpeningHours,
    PersonalSchedule,
    Weekday,
    Window,
)
from booking_engine.domain.entities.time_slot import parse_clock


class ProviderKind(str, Enum):
    EMPLOYED_BARBER = "employedBarber"
    FREELANCE_BARBER = "freelanceBarber"
    FREELANCER = "freelancer"
    SHOP_OWNER = "shopOwner"


@dataclass(frozen=True)
class Shop:
    id: str
    owner_id: str
    name: str = ""
    opening_hours: tuple[OpeningHours, ...] = ()

    def hours_for(self, day: Weekday) -> OpeningHours | None:
        for entry in self.opening_hours:
            if entry.day == day:
                return entry
        return None


ShopLookup = Callable[[str], Shop]


def _window(start_text: str, end_text: str) -> Window | None:
    # Empty bounds close the day; malformed bounds raise ValueError.
    if not start_text or not end_text:
        return None
    start = parse_clock(start_text)
    end = parse_clock(end_text)
    if start >= end:
        return None
    return Window(start_minute=start, end_minute=end)


@dataclass(frozen=True)
class Provider(ABC):
    id: str
    name: str = ""
    shop_id: str | None = None
    active: bool = True

    kind: ProviderKind = field(init=False)

    @abstractmethod
    def schedule_for_date(self, day: date, get_shop: ShopLookup) -> Window | None:
        """Return the bookable window on ``day``, or None when closed."""
        raise NotImplementedError


@dataclass(frozen=True)
class _PersonalScheduleProvider(Provider):
    schedule: PersonalSchedule = field(default_factory=PersonalSchedule)

    def schedule_for_date(self, day: date, get_shop: ShopLookup) -> Window | None:
        entry = self.schedule.for_day(Weekday.from_date(day))
        if entry is None or not entry.is_available:
            return None
        return _window(entry.from_time, entry.to_time)


@dataclass(frozen=True)
class EmployedBarber(_PersonalScheduleProvider):
    kind: ProviderKind = field(default=ProviderKind.EMPLOYED_BARBER, init=False)


@dataclass(frozen=True)
class FreelanceBarber(_PersonalScheduleProvider):
    kind: ProviderKind = field(default=ProviderKind.FREELANCE_BARBER, init=False)


@dataclass(frozen=True)
class Freelancer(_PersonalScheduleProvider):
    kind: ProviderKind = field(default=ProviderKind.FREELANCER, init=False)


@dataclass(frozen=True)
class ShopOwner(Provider):
    kind: ProviderKind = field(default=ProviderKind.SHOP_OWNER, init=False)

    def schedule_for_date(self, day: date, get_shop: ShopLookup) -> Window | None:
        if not self.shop_id:
            return None
        hours = get_shop(self.shop_id).hours_for(Weekday.from_date(day))
        if hours is None or not hours.is_open:
            return None
        return _window(hours.open_time, hours.close_time)
