from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from booking_engine.application.use_cases.booking_state_machine import Page, ViewedBooking
from booking_engine.application.utils.status_view import visible_rejection_reason


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CreateBookingSchema(_CamelModel):
    provider_id: str = Field(alias="providerId")
    service_id: str = Field(alias="serviceId")
    date: str
    time: str | dict[str, Any]
    notes: str = ""


class StatusChangeSchema(_CamelModel):
    status: str
    reason: str | None = None


class ReasonSchema(_CamelModel):
    reason: str | None = None


class ReassignSchema(_CamelModel):
    new_provider_id: str = Field(alias="newProviderId")
    time: str | dict[str, Any]
    date: str | None = None


class ReviewSchema(_CamelModel):
    # Left loose so out-of-range or non-integer ratings reach the 400 path.
    rating: Any
    comment: str = ""


class TimeSchema(_CamelModel):
    hour: int
    minute: int


class ReviewViewSchema(_CamelModel):
    rating: int
    comment: str


class BookingViewSchema(_CamelModel):
    id: str
    uid: str
    customer_id: str = Field(alias="customerId")
    provider_id: str = Field(alias="providerId")
    reassigned_provider_id: str | None = Field(default=None, alias="reassignedProviderId")
    shop_id: str | None = Field(default=None, alias="shopId")
    service_id: str = Field(alias="serviceId")
    service_name: str = Field(alias="serviceName")
    service_type: str = Field(alias="serviceType")
    price: float
    duration: int
    booking_date: str = Field(alias="bookingDate")
    time: TimeSchema
    status: str
    cancellation_reason: str | None = Field(default=None, alias="cancellationReason")
    rejection_reason: str | None = Field(default=None, alias="rejectionReason")
    review: ReviewViewSchema | None = None
    payment_status: str = Field(alias="paymentStatus")
    notes: str = ""
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")

    @classmethod
    def from_view(cls, view: ViewedBooking) -> "BookingViewSchema":
        b = view.booking
        return cls(
            id=b.id,
            uid=b.uid,
            customer_id=b.customer_id,
            provider_id=b.provider_id,
            reassigned_provider_id=b.reassigned_provider_id,
            shop_id=b.shop_id,
            service_id=b.service_id,
            service_name=b.service_name,
            service_type=b.service_type.value,
            price=b.price,
            duration=b.duration_minutes,
            booking_date=b.booking_date.isoformat(),
            time=TimeSchema(hour=b.time.hour, minute=b.time.minute),
            status=view.status,
            cancellation_reason=b.cancellation_reason,
            rejection_reason=visible_rejection_reason(b, view.viewer_role),
            review=ReviewViewSchema(rating=b.review.rating, comment=b.review.comment) if b.review else None,
            payment_status=b.payment_status.value,
            notes=b.notes,
            created_at=b.created_at.isoformat() if b.created_at else None,
            updated_at=b.updated_at.isoformat() if b.updated_at else None,
        )


class BookingPageSchema(_CamelModel):
    bookings: list[BookingViewSchema]
    total: int
    page: int
    limit: int

    @classmethod
    def from_page(cls, page: Page) -> "BookingPageSchema":
        return cls(
            bookings=[BookingViewSchema.from_view(v) for v in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
        )


class SlotsResponseSchema(BaseModel):
    slots: list[str]
