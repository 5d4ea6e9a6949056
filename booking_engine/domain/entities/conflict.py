from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from booking_engine.domain.entities.booking import Booking


def spans_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open overlap: [09:30, 10:00) does not touch [10:00, 10:30)."""
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True)
class ConflictScope:
    """Selects which existing bookings compete with a candidate span.

    A booking competes when it is assigned to ``provider_id``, when it belongs to
    ``shop_id`` (set only when the provider is the shop itself), or when it was
    made by ``customer_id``.
    """

    provider_id: str
    shop_id: str | None = None
    customer_id: str | None = None

    def covers(self, booking: Booking) -> bool:
        if booking.assigned_provider_id == self.provider_id:
            return True
        if self.shop_id is not None and booking.shop_id == self.shop_id:
            return True
        return self.customer_id is not None and booking.customer_id == self.customer_id


def find_conflicts(
    bookings: Iterable[Booking],
    start_minute: int,
    duration_minutes: int,
    exclude_id: str | None = None,
) -> list[Booking]:
    end_minute = start_minute + duration_minutes
    return [
        b
        for b in bookings
        if b.is_active
        and b.id != exclude_id
        and spans_overlap(start_minute, end_minute, b.start_minute, b.end_minute)
    ]
