from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from booking_engine.domain.entities.time_slot import TimeSlot


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "noShow"
    REJECTED = "rejected"
    REASSIGNED = "reassigned"


# Statuses whose span occupies the assigned provider's time.
ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.REASSIGNED})

TERMINAL_STATUSES = frozenset(
    {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW, BookingStatus.REJECTED}
)


class ServiceType(str, Enum):
    SHOP_BASED = "shopBased"
    HOME_BASED = "homeBased"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


@dataclass(frozen=True)
class Review:
    rating: int
    comment: str = ""


@dataclass(frozen=True)
class Booking:
    id: str
    uid: str
    customer_id: str
    provider_id: str
    service_id: str
    service_name: str
    service_type: ServiceType
    price: float
    duration_minutes: int
    booking_date: date
    time: TimeSlot
    status: BookingStatus = BookingStatus.PENDING
    shop_id: str | None = None
    reassigned_provider_id: str | None = None
    cancellation_reason: str | None = None
    rejection_reason: str | None = None
    review: Review | None = None
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_id: str | None = None
    notes: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def assigned_provider_id(self) -> str:
        """The provider currently accountable for the booking."""
        return self.reassigned_provider_id or self.provider_id

    @property
    def start_minute(self) -> int:
        return self.time.minute_of_day

    @property
    def end_minute(self) -> int:
        return self.time.minute_of_day + self.duration_minutes

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
