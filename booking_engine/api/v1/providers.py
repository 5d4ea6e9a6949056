from fastapi import APIRouter, Depends, Query

from booking_engine.api.v1.schemas import SlotsResponseSchema
from booking_engine.application.use_cases.availability import AvailabilityUseCase
from booking_engine.application.utils.time_input import parse_booking_date
from booking_engine.wiring.dependencies import get_availability_use_case

router = APIRouter(prefix="/providers")


@router.get("/{provider_id}/available-slots", response_model=SlotsResponseSchema)
def available_slots(
    provider_id: str,
    date: str = Query(...),
    service_id: str | None = Query(None, alias="serviceId"),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    slots = uc.available_slots(provider_id, parse_booking_date(date), service_id)
    return SlotsResponseSchema(slots=[str(s) for s in slots])
