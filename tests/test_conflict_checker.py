from __future__ import annotations

from dataclasses import replace

import pytest

from booking_engine.application.exceptions import SlotUnavailable
from booking_engine.application.use_cases.conflict_checker import ConflictChecker, scope_for
from booking_engine.domain.entities.booking import Booking, BookingStatus, ServiceType
from booking_engine.domain.entities.conflict import ConflictScope, find_conflicts, spans_overlap
from booking_engine.domain.entities.time_slot import TimeSlot

from tests.conftest import MONDAY


def _booking(
    booking_id: str,
    time: str,
    duration: int = 30,
    provider_id: str = "barber-marco",
    customer_id: str = "cust-1",
    status: BookingStatus = BookingStatus.PENDING,
    shop_id: str | None = "shop-downtown",
) -> Booking:
    return Booking(
        id=booking_id,
        uid=f"BKAA{booking_id[-8:]:0>8}",
        customer_id=customer_id,
        provider_id=provider_id,
        shop_id=shop_id,
        service_id="svc-haircut",
        service_name="Classic haircut",
        service_type=ServiceType.SHOP_BASED,
        price=25,
        duration_minutes=duration,
        booking_date=MONDAY,
        time=TimeSlot.parse(time),
        status=status,
    )


def test_half_open_overlap():
    assert not spans_overlap(570, 600, 600, 630)
    assert spans_overlap(570, 601, 600, 630)
    assert spans_overlap(600, 630, 610, 620)


def test_inactive_bookings_never_conflict():
    existing = [
        _booking("b1", "10:00", status=BookingStatus.CANCELLED),
        _booking("b2", "10:00", status=BookingStatus.REJECTED),
        _booking("b3", "10:00", status=BookingStatus.COMPLETED),
    ]
    assert find_conflicts(existing, 600, 30) == []


def test_reassigned_booking_still_occupies():
    existing = [_booking("b1", "10:00", status=BookingStatus.REASSIGNED)]
    assert find_conflicts(existing, 600, 30)


def test_exclude_self():
    existing = [_booking("b1", "10:00")]
    assert find_conflicts(existing, 615, 30, exclude_id="b1") == []


def test_scope_matches_assigned_provider():
    moved = replace(_booking("b1", "10:00"), reassigned_provider_id="barber-sam")
    assert ConflictScope("barber-sam").covers(moved)
    assert not ConflictScope("barber-marco").covers(moved)


def test_shop_owner_scope_spans_shop(directory):
    owner = directory.get_provider("owner-lena")
    barber = directory.get_provider("barber-marco")
    assert scope_for(owner).shop_id == "shop-downtown"
    assert scope_for(barber).shop_id is None
    assert scope_for(owner).covers(_booking("b1", "10:00"))


def test_customer_scope():
    scope = ConflictScope("freelance-ana", customer_id="cust-1")
    assert scope.covers(_booking("b1", "10:00"))
    assert not scope.covers(_booking("b2", "10:00", customer_id="cust-9"))


class TestRepositoryReservation:
    def test_insert_if_free_rejects_overlap(self, repository):
        scope = ConflictScope("barber-marco")
        repository.insert_if_free(_booking("b1", "10:00"), scope)
        with pytest.raises(SlotUnavailable):
            repository.insert_if_free(_booking("b2", "10:15", customer_id="cust-2"), scope)

    def test_adjacent_spans_allowed(self, repository):
        scope = ConflictScope("barber-marco")
        repository.insert_if_free(_booking("b1", "10:00"), scope)
        repository.insert_if_free(_booking("b2", "10:30", customer_id="cust-2"), scope)
        assert len(repository.list(provider_id="barber-marco")) == 2

    def test_checker_reads_repository(self, repository):
        repository.insert_if_free(_booking("b1", "10:00"), ConflictScope("barber-marco"))
        checker = ConflictChecker(repository)
        scope = ConflictScope("barber-marco")
        assert not checker.is_free(scope, MONDAY, 600, 30)
        assert checker.is_free(scope, MONDAY, 630, 30)
        assert checker.is_free(scope, MONDAY, 600, 30, exclude_id="b1")
