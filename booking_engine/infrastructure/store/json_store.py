from __future__ import annotations

import json
import logging
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable

from booking_engine.application.exceptions import DuplicateBooking, UpstreamFailure
from booking_engine.application.ports.booking_repository import BookingRepositoryPort
from booking_engine.domain.entities.booking import (
    Booking,
    BookingStatus,
    PaymentStatus,
    Review,
    ServiceType,
)
from booking_engine.domain.entities.conflict import ConflictScope
from booking_engine.domain.entities.time_slot import TimeSlot
from booking_engine.infrastructure.store.memory_store import (
    competing,
    ensure_free,
    ensure_unchanged,
    select,
)


class JsonBookingRepository(BookingRepositoryPort):
    """Bookings kept in one JSON document, rewritten atomically on every change.

    The lock makes check-then-write atomic for every request thread of this
    process; run a single worker process per data file.
    """

    def __init__(self, data_path: str = "./data/bookings.json") -> None:
        self._path = Path(data_path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def get(self, booking_id: str) -> Booking | None:
        with self._lock:
            return self._load().get(booking_id)

    def get_by_uid(self, uid: str) -> Booking | None:
        with self._lock:
            bookings = self._load()
        for booking in bookings.values():
            if booking.uid == uid:
                return booking
        return None

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
            bookings = self._load()
        return select(
            bookings.values(), customer_id, provider_id, shop_id, booking_date, statuses, booked_provider_id
        )

    def active_on(self, booking_date: date, scope: ConflictScope) -> list[Booking]:
        with self._lock:
            bookings = self._load()
        return competing(bookings.values(), booking_date, scope)

    def insert_if_free(self, booking: Booking, scope: ConflictScope) -> Booking:
        with self._lock:
            bookings = self._load()
            if booking.id in bookings or any(b.uid == booking.uid for b in bookings.values()):
                raise DuplicateBooking(f"Booking {booking.id} ({booking.uid}) already exists")
            ensure_free(bookings.values(), booking, scope)
            bookings[booking.id] = booking
            self._save(bookings)
        self._logger.info("Booking reserved", extra={"booking_id": booking.id, "uid": booking.uid})
        return booking

    def replace_if_unchanged(self, booking: Booking, expected: Booking) -> Booking:
        with self._lock:
            bookings = self._load()
            ensure_unchanged(bookings.get(booking.id), expected)
            bookings[booking.id] = booking
            self._save(bookings)
        return booking

    def replace_if_free(self, booking: Booking, expected: Booking, scope: ConflictScope) -> Booking:
        with self._lock:
            bookings = self._load()
            ensure_unchanged(bookings.get(booking.id), expected)
            ensure_free(bookings.values(), booking, scope)
            bookings[booking.id] = booking
            self._save(bookings)
        return booking

    def _load(self) -> dict[str, Booking]:
        """Load all bookings; a missing file is an empty store."""
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            self._logger.error("Booking store unreadable", extra={"error": str(e)})
            raise UpstreamFailure(f"Booking store unreadable: {e}") from e
        return {item["id"]: _deserialize(item) for item in data.get("bookings", [])}

    def _save(self, bookings: dict[str, Booking]) -> None:
        """Write to a temp file and rename it over the store."""
        temp_path = self._path.with_suffix(".json.tmp")
        payload = {"version": 1, "bookings": [_serialize(b) for b in bookings.values()]}
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            self._logger.error("Booking store write failed", extra={"error": str(e)})
            raise UpstreamFailure(f"Booking store write failed: {e}") from e


def _serialize(booking: Booking) -> dict[str, Any]:
    return {
        "id": booking.id,
        "uid": booking.uid,
        "customer_id": booking.customer_id,
        "provider_id": booking.provider_id,
        "shop_id": booking.shop_id,
        "reassigned_provider_id": booking.reassigned_provider_id,
        "service_id": booking.service_id,
        "service_name": booking.service_name,
        "service_type": booking.service_type.value,
        "price": booking.price,
        "duration_minutes": booking.duration_minutes,
        "booking_date": booking.booking_date.isoformat(),
        "time": {"hour": booking.time.hour, "minute": booking.time.minute},
        "status": booking.status.value,
        "cancellation_reason": booking.cancellation_reason,
        "rejection_reason": booking.rejection_reason,
        "review": (
            {"rating": booking.review.rating, "comment": booking.review.comment}
            if booking.review
            else None
        ),
        "payment_status": booking.payment_status.value,
        "payment_id": booking.payment_id,
        "notes": booking.notes,
        "created_at": booking.created_at.isoformat() if booking.created_at else None,
        "updated_at": booking.updated_at.isoformat() if booking.updated_at else None,
    }


def _deserialize(data: dict[str, Any]) -> Booking:
    review = data.get("review")
    return Booking(
        id=data["id"],
        uid=data["uid"],
        customer_id=data["customer_id"],
        provider_id=data["provider_id"],
        shop_id=data.get("shop_id"),
        reassigned_provider_id=data.get("reassigned_provider_id"),
        service_id=data["service_id"],
        service_name=data.get("service_name", ""),
        service_type=ServiceType(data["service_type"]),
        price=data.get("price", 0),
        duration_minutes=data["duration_minutes"],
        booking_date=date.fromisoformat(data["booking_date"]),
        time=TimeSlot(hour=data["time"]["hour"], minute=data["time"]["minute"]),
        status=BookingStatus(data["status"]),
        cancellation_reason=data.get("cancellation_reason"),
        rejection_reason=data.get("rejection_reason"),
        review=Review(rating=review["rating"], comment=review.get("comment", "")) if review else None,
        payment_status=PaymentStatus(data.get("payment_status", "pending")),
        payment_id=data.get("payment_id"),
        notes=data.get("notes", ""),
        created_at=_parse_datetime(data.get("created_at")),
        updated_at=_parse_datetime(data.get("updated_at")),
    )


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
