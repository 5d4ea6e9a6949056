from __future__ import annotations

import logging

import httpx

from booking_engine.application.ports.notifier import NotificationEvent, NotificationPort
from booking_engine.domain.entities.booking import Booking

_TITLES = {
    NotificationEvent.REQUESTED: "New Booking Request",
    NotificationEvent.CONFIRMED: "Booking Confirmed",
    NotificationEvent.COMPLETED: "Booking Completed",
    NotificationEvent.CANCELLED: "Booking Cancelled",
    NotificationEvent.REJECTED: "Booking Rejected",
    NotificationEvent.REASSIGNED: "Booking Reassigned",
    NotificationEvent.REVIEWED: "New Review",
}


class WebhookNotifier(NotificationPort):
    def __init__(self, endpoint: str, timeout: float = 10.0, client: httpx.Client | None = None) -> None:
        self._endpoint = endpoint
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def notify(self, user_id: str, booking: Booking, event: NotificationEvent) -> None:
        payload = {
            "userId": user_id,
            "event": event.value,
            "title": _TITLES[event],
            "message": (
                f"Booking #{booking.uid} for {booking.service_name} on "
                f"{booking.booking_date.isoformat()} at {booking.time}: {event.value}."
            ),
            "bookingId": booking.id,
            "status": booking.status.value,
        }
        resp = self._client.post(self._endpoint, json=payload)
        if resp.status_code >= 400:
            self._logger.error(
                "Notification send failed",
                extra={"status": resp.status_code, "user_id": user_id, "booking_id": booking.id},
            )
            resp.raise_for_status()
