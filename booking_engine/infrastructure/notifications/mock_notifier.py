from __future__ import annotations

import logging

from booking_engine.application.ports.notifier import NotificationEvent, NotificationPort
from booking_engine.domain.entities.booking import Booking


class LoggingNotifier(NotificationPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.sent: list[tuple[str, str, NotificationEvent]] = []

    def notify(self, user_id: str, booking: Booking, event: NotificationEvent) -> None:
        self.sent.append((user_id, booking.id, event))
        self._logger.info(
            "Mock notification",
            extra={"user_id": user_id, "booking_id": booking.id, "event": event.value},
        )
