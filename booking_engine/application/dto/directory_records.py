from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from booking_engine.domain.entities.booking import ServiceType
from booking_engine.domain.entities.provider import (
    EmployedBarber,
    FreelanceBarber,
    Freelancer,
    Provider,
    ProviderKind,
    Shop,
    ShopOwner,
)
from booking_engine.domain.entities.schedule import (
    WEEK,
    DaySchedule,
    OpeningHours,
    PersonalSchedule,
    Weekday,
)
from booking_engine.domain.entities.service_catalog import ServiceEntry


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DayScheduleRecord(_Record):
    from_time: str = Field("", alias="from")
    to_time: str = Field("", alias="to")
    status: str = "unavailable"


class OpeningHoursRecord(_Record):
    day: str
    is_open: bool = Field(False, alias="isOpen")
    open_time: str = Field("", alias="openTime")
    close_time: str = Field("", alias="closeTime")


class ShopRecord(_Record):
    id: str
    owner_id: str = Field(alias="ownerId")
    name: str = ""
    opening_hours: list[OpeningHoursRecord] = Field(default_factory=list, alias="openingHours")

    def to_entity(self) -> Shop:
        return Shop(
            id=self.id,
            owner_id=self.owner_id,
            name=self.name,
            opening_hours=tuple(
                OpeningHours(
                    day=Weekday.parse(h.day),
                    is_open=h.is_open,
                    open_time=h.open_time,
                    close_time=h.close_time,
                )
                for h in self.opening_hours
            ),
        )


class ProviderRecord(_Record):
    id: str
    kind: ProviderKind
    name: str = ""
    shop_id: str | None = Field(None, alias="shopId")
    active: bool = True
    # Either keyed by day name or a Monday-first list of seven entries.
    schedule: dict[str, DayScheduleRecord | None] | list[DayScheduleRecord | None] = Field(
        default_factory=dict
    )

    def personal_schedule(self) -> PersonalSchedule:
        if isinstance(self.schedule, list):
            pairs = zip(WEEK, self.schedule)
        else:
            pairs = ((Weekday.parse(name), entry) for name, entry in self.schedule.items())
        return PersonalSchedule(
            days={
                day: DaySchedule(from_time=entry.from_time, to_time=entry.to_time, status=entry.status)
                for day, entry in pairs
                if entry is not None
            }
        )

    def to_entity(self) -> Provider:
        common = {"id": self.id, "name": self.name, "shop_id": self.shop_id, "active": self.active}
        if self.kind == ProviderKind.SHOP_OWNER:
            return ShopOwner(**common)
        variant = {
            ProviderKind.EMPLOYED_BARBER: EmployedBarber,
            ProviderKind.FREELANCE_BARBER: FreelanceBarber,
            ProviderKind.FREELANCER: Freelancer,
        }[self.kind]
        return variant(schedule=self.personal_schedule(), **common)


class ServiceRecord(_Record):
    id: str
    name: str
    type: ServiceType
    price: float = 0
    duration: int | None = None
    shop_id: str | None = Field(None, alias="shopId")
    active: bool = True

    def to_entity(self, default_duration: int = 30) -> ServiceEntry:
        return ServiceEntry(
            id=self.id,
            name=self.name,
            service_type=self.type,
            price=self.price,
            duration_minutes=self.duration or default_duration,
            shop_id=self.shop_id,
            active=self.active,
        )
