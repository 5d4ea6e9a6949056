from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable

from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.conflict import ConflictScope


class BookingRepositoryPort(ABC):
    """Single writer of booking state.

    The three write methods are atomic: the check and the write happen under
    one critical section (or one serializable transaction), so two callers can
    never both win the same provider-time window.
    """

    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def get_by_uid(self, uid: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def list(
        self,
        customer_id: str | None = None,
        provider_id: str | None = None,
        shop_id: str | None = None,
        booking_date: date | None = None,
        statuses: Iterable[BookingStatus] | None = None,
        booked_provider_id: str | None = None,
    ) -> list[Booking]:
        """
        Filter bookings; ``provider_id`` matches the assigned provider,
        ``booked_provider_id`` the provider the customer originally booked.
        """
        raise NotImplementedError

    @abstractmethod
    def active_on(self, booking_date: date, scope: ConflictScope) -> list[Booking]:
        """Active bookings on ``booking_date`` that compete within ``scope``."""
        raise NotImplementedError

    @abstractmethod
    def insert_if_free(self, booking: Booking, scope: ConflictScope) -> Booking:
        """
        Insert ``booking`` unless an active booking in ``scope`` overlaps it.
        Raises SlotUnavailable on conflict.
        """
        raise NotImplementedError

    @abstractmethod
    def replace_if_unchanged(self, booking: Booking, expected: Booking) -> Booking:
        """
        Store ``booking`` only if the stored record still equals ``expected``
        (the snapshot the caller read). Raises NotFound if missing,
        InvalidTransition if another writer got there first.
        """
        raise NotImplementedError

    @abstractmethod
    def replace_if_free(self, booking: Booking, expected: Booking, scope: ConflictScope) -> Booking:
        """
        Compare-and-set as ``replace_if_unchanged`` plus a conflict check of the
        new span, ignoring the booking itself. Raises InvalidTransition or
        SlotUnavailable; nothing is written on failure.
        """
        raise NotImplementedError
