from __future__ import annotations

from datetime import date

import pytest

from booking_engine.application.dto.directory_records import ProviderRecord
from booking_engine.application.exceptions import NotFound, ValidationError
from booking_engine.application.use_cases.schedule_resolver import ScheduleResolver
from booking_engine.domain.entities.schedule import Weekday, Window
from booking_engine.domain.entities.time_slot import TimeSlot, parse_clock
from booking_engine.infrastructure.directory.static_directory import StaticDirectory

from tests.conftest import MONDAY, SUNDAY, WEDNESDAY


def _freelancer(schedule) -> ProviderRecord:
    return ProviderRecord.model_validate(
        {"id": "free-1", "kind": "freelancer", "schedule": schedule}
    ).to_entity()


def test_weekday_is_monday_first():
    assert Weekday.from_date(MONDAY) == Weekday.MONDAY
    assert Weekday.from_date(SUNDAY) == Weekday.SUNDAY
    assert Weekday.from_date(date(2030, 1, 1)) == Weekday.TUESDAY


def test_personal_schedule_window(resolver):
    assert resolver.resolve_for("barber-marco", MONDAY) == Window(9 * 60, 17 * 60)


def test_personal_schedule_missing_day_is_closed(resolver):
    assert resolver.resolve_for("barber-marco", SUNDAY) is None
    assert resolver.resolve_for("barber-sam", MONDAY) is None


def test_shop_owner_uses_shop_hours(resolver):
    assert resolver.resolve_for("owner-lena", MONDAY) == Window(9 * 60, 18 * 60)
    assert resolver.resolve_for("owner-lena", SUNDAY) is None


def test_unavailable_status_is_closed():
    provider = _freelancer({"monday": {"from": "09:00", "to": "17:00", "status": "unavailable"}})
    resolver = ScheduleResolver(StaticDirectory([provider]))
    assert resolver.resolve(provider, MONDAY) is None


def test_empty_time_is_closed():
    provider = _freelancer({"monday": {"from": "", "to": "17:00", "status": "available"}})
    resolver = ScheduleResolver(StaticDirectory([provider]))
    assert resolver.resolve(provider, MONDAY) is None


def test_inverted_window_is_closed():
    provider = _freelancer({"monday": {"from": "17:00", "to": "09:00", "status": "available"}})
    resolver = ScheduleResolver(StaticDirectory([provider]))
    assert resolver.resolve(provider, MONDAY) is None


@pytest.mark.parametrize("bad", ["9:00", "24:00", "12:60", "noon"])
def test_malformed_time_raises(bad):
    provider = _freelancer({"monday": {"from": bad, "to": "17:00", "status": "available"}})
    resolver = ScheduleResolver(StaticDirectory([provider]))
    with pytest.raises(ValidationError):
        resolver.resolve(provider, MONDAY)


def test_list_schedule_is_monday_first():
    days = [{"from": "", "to": "", "status": "unavailable"}] * 7
    days = list(days)
    days[2] = {"from": "10:00", "to": "12:00", "status": "available"}
    provider = _freelancer(days)
    resolver = ScheduleResolver(StaticDirectory([provider]))
    assert resolver.resolve(provider, WEDNESDAY) == Window(600, 720)
    assert resolver.resolve(provider, MONDAY) is None


def test_unknown_provider_raises(resolver):
    with pytest.raises(NotFound):
        resolver.resolve_for("nobody", MONDAY)


def test_shop_owner_without_shop_record_raises():
    owner = ProviderRecord.model_validate(
        {"id": "owner-x", "kind": "shopOwner", "shopId": "shop-gone"}
    ).to_entity()
    resolver = ScheduleResolver(StaticDirectory([owner]))
    with pytest.raises(NotFound):
        resolver.resolve(owner, MONDAY)


def test_parse_clock():
    assert parse_clock("00:00") == 0
    assert parse_clock("23:59") == 23 * 60 + 59
    assert str(TimeSlot.parse("09:05")) == "09:05"
