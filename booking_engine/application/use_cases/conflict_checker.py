from __future__ import annotations

from datetime import date
from typing import Callable

from booking_engine.application.ports.booking_repository import BookingRepositoryPort
from booking_engine.domain.entities.booking import Booking
from booking_engine.domain.entities.conflict import ConflictScope, find_conflicts
from booking_engine.domain.entities.provider import Provider, ShopOwner


def scope_for(provider: Provider, customer_id: str | None = None) -> ConflictScope:
    """A shop owner books as the shop, so every booking of that shop competes."""
    shop_id = provider.shop_id if isinstance(provider, ShopOwner) else None
    return ConflictScope(provider_id=provider.id, shop_id=shop_id, customer_id=customer_id)


class ConflictChecker:
    """Query-time conflict detection. Advisory only: commits re-check in the repository."""

    def __init__(self, repository: BookingRepositoryPort) -> None:
        self._repository = repository

    def day_bookings(self, scope: ConflictScope, day: date) -> list[Booking]:
        return self._repository.active_on(day, scope)

    def is_free(
        self,
        scope: ConflictScope,
        day: date,
        start_minute: int,
        duration_minutes: int,
        exclude_id: str | None = None,
    ) -> bool:
        existing = self.day_bookings(scope, day)
        return not find_conflicts(existing, start_minute, duration_minutes, exclude_id)

    def free_predicate(
        self,
        scope: ConflictScope,
        day: date,
        exclude_id: str | None = None,
    ) -> Callable[[int, int], bool]:
        """Snapshot the day's bookings once and test many candidates against it."""
        existing = self.day_bookings(scope, day)

        def is_free(start_minute: int, duration_minutes: int) -> bool:
            return not find_conflicts(existing, start_minute, duration_minutes, exclude_id)

        return is_free
