from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Iterable

from booking_engine.application.exceptions import DuplicateBooking, InvalidTransition, NotFound, SlotUnavailable
from booking_engine.application.ports.booking_repository import BookingRepositoryPort
from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.conflict import ConflictScope, find_conflicts


def select(
    bookings: Iterable[Booking],
    customer_id: str | None = None,
    provider_id: str | None = None,
    shop_id: str | None = None,
    booking_date: date | None = None,
    statuses: Iterable[BookingStatus] | None = None,
    booked_provider_id: str | None = None,
) -> list[Booking]:
    wanted = set(statuses) if statuses is not None else None
    result = []
    for booking in bookings:
        if customer_id is not None and booking.customer_id != customer_id:
            continue
        if provider_id is not None and booking.assigned_provider_id != provider_id:
            continue
        if booked_provider_id is not None and booking.provider_id != booked_provider_id:
            continue
        if shop_id is not None and booking.shop_id != shop_id:
            continue
        if booking_date is not None and booking.booking_date != booking_date:
            continue
        if wanted is not None and booking.status not in wanted:
            continue
        result.append(booking)
    return result


def competing(bookings: Iterable[Booking], booking_date: date, scope: ConflictScope) -> list[Booking]:
    return [b for b in bookings if b.is_active and b.booking_date == booking_date and scope.covers(b)]


def ensure_free(bookings: Iterable[Booking], booking: Booking, scope: ConflictScope) -> None:
    rivals = competing(bookings, booking.booking_date, scope)
    conflicts = find_conflicts(rivals, booking.start_minute, booking.duration_minutes, exclude_id=booking.id)
    if conflicts:
        raise SlotUnavailable(
            f"Time slot {booking.time} on {booking.booking_date.isoformat()} is not available"
        )


def ensure_unchanged(current: Booking | None, expected: Booking) -> None:
    if current is None:
        raise NotFound(f"Booking {expected.id} not found")
    if current != expected:
        raise InvalidTransition(
            f"Booking {expected.id} was modified concurrently (now {current.status.value}); reload and retry"
        )


class MemoryBookingRepository(BookingRepositoryPort):
    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._uids: dict[str, str] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def get(self, booking_id: str) -> Booking | None:
        return self._bookings.get(booking_id)

    def get_by_uid(self, uid: str) -> Booking | None:
        booking_id = self._uids.get(uid)
        return self._bookings.get(booking_id) if booking_id else None

    def list(
        self,
        customer_id: str | None = None,
        provider_id: str | None = None,
        shop_id: str | None = None,
        booking_date: date | None = None,
        statuses: Iterable[BookingStatus] | None = None,
        booked_provider_id: str | None = None,
    ) -> list[Booking]:
        with self._lock:
            snapshot = list(self._bookings.values())
        return select(snapshot, customer_id, provider_id, shop_id, booking_date, statuses, booked_provider_id)

    def active_on(self, booking_date: date, scope: ConflictScope) -> list[Booking]:
        with self._lock:
            snapshot = list(self._bookings.values())
        return competing(snapshot, booking_date, scope)

    def insert_if_free(self, booking: Booking, scope: ConflictScope) -> Booking:
        with self._lock:
            if booking.id in self._bookings or booking.uid in self._uids:
                raise DuplicateBooking(f"Booking {booking.id} ({booking.uid}) already exists")
            ensure_free(self._bookings.values(), booking, scope)
            self._bookings[booking.id] = booking
            self._uids[booking.uid] = booking.id
        self._logger.info("Booking reserved", extra={"booking_id": booking.id, "uid": booking.uid})
        return booking

    def replace_if_unchanged(self, booking: Booking, expected: Booking) -> Booking:
        with self._lock:
            ensure_unchanged(self._bookings.get(booking.id), expected)
            self._bookings[booking.id] = booking
        return booking

    def replace_if_free(self, booking: Booking, expected: Booking, scope: ConflictScope) -> Booking:
        with self._lock:
            ensure_unchanged(self._bookings.get(booking.id), expected)
            ensure_free(self._bookings.values(), booking, scope)
            self._bookings[booking.id] = booking
        return booking
