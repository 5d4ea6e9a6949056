from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

PAYMENT_COMPLETED = "payment.completed"


class PaymentEventDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str
    booking_id: str | None = Field(default=None, alias="bookingId")
    payment_id: str | None = Field(default=None, alias="paymentId")

    @property
    def is_completed_payment(self) -> bool:
        return self.type == PAYMENT_COMPLETED and bool(self.booking_id) and bool(self.payment_id)
