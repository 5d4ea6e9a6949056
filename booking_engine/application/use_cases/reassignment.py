from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from booking_engine.application.exceptions import Forbidden, SlotUnavailable, ValidationError
from booking_engine.application.ports.booking_repository import BookingRepositoryPort
from booking_engine.application.ports.notifier import NotificationEvent, NotificationPort
from booking_engine.application.use_cases.booking_state_machine import BookingStateMachine
from booking_engine.application.use_cases.conflict_checker import scope_for
from booking_engine.application.use_cases.schedule_resolver import ScheduleResolver
from booking_engine.application.utils.time_input import parse_time_slot
from booking_engine.domain.entities.actor import Actor
from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.schedule import Weekday
from booking_engine.domain.entities.time_slot import TimeSlot


class ReassignmentCoordinator:
    """Hands a pending shop booking to another provider of the same shop.

    All checks run before the single atomic ``replace_if_free`` write, so a
    failed reassignment leaves the booking exactly as it was.
    """

    def __init__(
        self,
        repository: BookingRepositoryPort,
        machine: BookingStateMachine,
        resolver: ScheduleResolver,
        notifier: NotificationPort,
        timezone: ZoneInfo = ZoneInfo("UTC"),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._repository = repository
        self._machine = machine
        self._resolver = resolver
        self._notifier = notifier
        self._clock = clock or (lambda: datetime.now(timezone))
        self._logger = logging.getLogger(__name__)

    def reassign(
        self,
        actor: Actor,
        booking_id: str,
        new_provider_id: str,
        time: str | dict | TimeSlot,
        new_date: date | None = None,
    ) -> Booking:
        slot = parse_time_slot(time)
        booking = self._machine.load(booking_id)

        owner_id = self._machine.shop_owner_id(booking)
        if owner_id is None or owner_id != actor.actor_id:
            raise Forbidden("Only the shop owner can reassign this booking")
        self._machine.authorize(actor, booking, BookingStatus.REASSIGNED)

        provider = self._resolver.load_provider(new_provider_id)
        if not provider.active:
            raise ValidationError(f"Provider {provider.id} is not accepting bookings")
        if provider.shop_id != booking.shop_id:
            raise ValidationError(f"Provider {provider.id} does not work at shop {booking.shop_id}")

        day = new_date or booking.booking_date
        window = self._resolver.resolve(provider, day)
        if window is None:
            raise SlotUnavailable(
                f"{provider.kind.value} is not available on {Weekday.from_date(day).value}"
            )
        if not window.contains_span(slot.minute_of_day, booking.duration_minutes):
            raise SlotUnavailable(
                f"Booking time {slot} is outside available hours "
                f"({TimeSlot.from_minute(window.start_minute)} - {TimeSlot.from_minute(window.end_minute)})"
            )

        moved = replace(
            booking,
            reassigned_provider_id=provider.id,
            booking_date=day,
            time=slot,
            status=BookingStatus.REASSIGNED,
            updated_at=self._clock(),
        )
        updated = self._repository.replace_if_free(
            moved,
            booking,
            scope_for(provider, customer_id=booking.customer_id),
        )

        self._logger.info(
            "Booking reassigned",
            extra={
                "booking_id": booking.id,
                "actor_id": actor.actor_id,
                "provider_id": provider.id,
                "status": updated.status.value,
            },
        )
        try:
            self._notifier.notify(provider.id, updated, NotificationEvent.REASSIGNED)
        except Exception as e:
            self._logger.warning(
                "Failed to send notification",
                extra={"booking_id": booking.id, "event": NotificationEvent.REASSIGNED.value, "error": str(e)},
            )
        return updated
