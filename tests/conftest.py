from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from booking_engine.application.use_cases.availability import AvailabilityUseCase
from booking_engine.application.use_cases.booking_state_machine import BookingStateMachine, NewBooking
from booking_engine.application.use_cases.conflict_checker import ConflictChecker
from booking_engine.application.use_cases.reassignment import ReassignmentCoordinator
from booking_engine.application.use_cases.schedule_resolver import ScheduleResolver
from booking_engine.domain.entities.actor import Actor, ActorRole
from booking_engine.domain.entities.time_slot import TimeSlot
from booking_engine.infrastructure.directory.demo_data import DEMO_DIRECTORY, DEMO_SERVICES
from booking_engine.infrastructure.directory.static_directory import StaticDirectory, StaticServiceCatalog
from booking_engine.infrastructure.notifications.mock_notifier import LoggingNotifier
from booking_engine.infrastructure.store.memory_store import MemoryBookingRepository

# 2030-01-01 is a Tuesday; the fixed clock sits well before every test booking.
NOW = datetime(2030, 1, 1, 8, 0, tzinfo=timezone.utc)
MONDAY = date(2030, 1, 7)
WEDNESDAY = date(2030, 1, 9)
SUNDAY = date(2030, 1, 13)

CUSTOMER = Actor("cust-1", ActorRole.CUSTOMER)
OTHER_CUSTOMER = Actor("cust-2", ActorRole.CUSTOMER)
MARCO = Actor("barber-marco", ActorRole.BARBER)
SAM = Actor("barber-sam", ActorRole.BARBER)
OWNER = Actor("owner-lena", ActorRole.SHOP_OWNER)
ANA = Actor("freelance-ana", ActorRole.BARBER)
ADMIN = Actor("admin-1", ActorRole.ADMIN)
STRANGER = Actor("someone-else", ActorRole.CUSTOMER)


def new_booking(
    provider_id: str = "barber-marco",
    service_id: str = "svc-haircut",
    day: date = MONDAY,
    time: str = "10:00",
) -> NewBooking:
    return NewBooking(provider_id=provider_id, service_id=service_id, booking_date=day, time=TimeSlot.parse(time))


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def directory() -> StaticDirectory:
    return StaticDirectory.from_records(DEMO_DIRECTORY)


@pytest.fixture
def catalog() -> StaticServiceCatalog:
    return StaticServiceCatalog.from_records(DEMO_SERVICES)


@pytest.fixture
def repository() -> MemoryBookingRepository:
    return MemoryBookingRepository()


@pytest.fixture
def notifier() -> LoggingNotifier:
    return LoggingNotifier()


@pytest.fixture
def resolver(directory) -> ScheduleResolver:
    return ScheduleResolver(directory)


@pytest.fixture
def machine(repository, directory, catalog, notifier, resolver, clock) -> BookingStateMachine:
    return BookingStateMachine(
        repository=repository,
        directory=directory,
        catalog=catalog,
        notifier=notifier,
        resolver=resolver,
        timezone=ZoneInfo("UTC"),
        min_advance_minutes=60,
        clock=clock,
    )


@pytest.fixture
def coordinator(repository, machine, resolver, notifier, clock) -> ReassignmentCoordinator:
    return ReassignmentCoordinator(
        repository=repository,
        machine=machine,
        resolver=resolver,
        notifier=notifier,
        clock=clock,
    )


@pytest.fixture
def availability(repository, resolver, catalog) -> AvailabilityUseCase:
    return AvailabilityUseCase(resolver=resolver, checker=ConflictChecker(repository), catalog=catalog)
