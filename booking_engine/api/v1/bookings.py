from fastapi import APIRouter, Depends, Query

from booking_engine.api.auth import get_actor
from booking_engine.api.v1.schemas import (
    BookingPageSchema,
    BookingViewSchema,
    CreateBookingSchema,
    ReasonSchema,
    ReassignSchema,
    ReviewSchema,
    StatusChangeSchema,
)
from booking_engine.application.exceptions import ValidationError
from booking_engine.application.use_cases.booking_state_machine import BookingStateMachine, NewBooking
from booking_engine.application.use_cases.reassignment import ReassignmentCoordinator
from booking_engine.application.utils.time_input import parse_booking_date, parse_time_slot
from booking_engine.domain.entities.actor import Actor
from booking_engine.domain.entities.booking import BookingStatus
from booking_engine.wiring.dependencies import get_reassignment_coordinator, get_state_machine

router = APIRouter(prefix="/bookings")


@router.post("", response_model=BookingViewSchema, status_code=201)
def create_booking(
    req: CreateBookingSchema,
    actor: Actor = Depends(get_actor),
    machine: BookingStateMachine = Depends(get_state_machine),
):
    booking = machine.create(
        actor,
        NewBooking(
            provider_id=req.provider_id,
            service_id=req.service_id,
            booking_date=parse_booking_date(req.date),
            time=parse_time_slot(req.time),
            notes=req.notes,
        ),
    )
    return BookingViewSchema.from_view(machine.view(actor, booking))


@router.get("", response_model=BookingPageSchema)
def list_bookings(
    status: str | None = None,
    date: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    actor: Actor = Depends(get_actor),
    machine: BookingStateMachine = Depends(get_state_machine),
):
    day = parse_booking_date(date) if date else None
    return BookingPageSchema.from_page(machine.list_for(actor, status=status, day=day, page=page, limit=limit))


@router.get("/requests/pending", response_model=list[BookingViewSchema])
def pending_requests(
    actor: Actor = Depends(get_actor),
    machine: BookingStateMachine = Depends(get_state_machine),
):
    return [BookingViewSchema.from_view(v) for v in machine.pending_requests(actor)]


@router.get("/uid/{uid}", response_model=BookingViewSchema)
def get_booking_by_uid(
    uid: str,
    actor: Actor = Depends(get_actor),
    machine: BookingStateMachine = Depends(get_state_machine),
):
    return BookingViewSchema.from_view(machine.get_by_uid(actor, uid))


@router.get("/{booking_id}", response_model=BookingViewSchema)
def get_booking(
    booking_id: str,
    actor: Actor = Depends(get_actor),
    machine: BookingStateMachine = Depends(get_state_machine),
):
    return BookingViewSchema.from_view(machine.get(actor, booking_id))


@router.patch("/{booking_id}/status", response_model=BookingViewSchema)
def change_status(
    booking_id: str,
    req: StatusChangeSchema,
    actor: Actor = Depends(get_actor),
    machine: BookingStateMachine = Depends(get_state_machine),
):
    try:
        target = BookingStatus(req.status)
    except ValueError as e:
        raise ValidationError(f"Unknown booking status {req.status!r}") from e
    booking = machine.transition(actor, booking_id, target, req.reason)
    return BookingViewSchema.from_view(machine.view(actor, booking))


@router.post("/{booking_id}/accept", response_model=BookingViewSchema)
def accept_booking(
    booking_id: str,
    req: ReasonSchema | None = None,
    actor: Actor = Depends(get_actor),
    machine: BookingStateMachine = Depends(get_state_machine),
):
    booking = machine.accept(actor, booking_id, req.reason if req else None)
    return BookingViewSchema.from_view(machine.view(actor, booking))


@router.post("/{booking_id}/reject", response_model=BookingViewSchema)
def reject_booking(
    booking_id: str,
    req: ReasonSchema | None = None,
    actor: Actor = Depends(get_actor),
    machine: BookingStateMachine = Depends(get_state_machine),
):
    booking = machine.reject(actor, booking_id, req.reason if req else None)
    return BookingViewSchema.from_view(machine.view(actor, booking))


@router.post("/{booking_id}/reassign", response_model=BookingViewSchema)
def reassign_booking(
    booking_id: str,
    req: ReassignSchema,
    actor: Actor = Depends(get_actor),
    machine: BookingStateMachine = Depends(get_state_machine),
    coordinator: ReassignmentCoordinator = Depends(get_reassignment_coordinator),
):
    booking = coordinator.reassign(
        actor,
        booking_id,
        req.new_provider_id,
        req.time,
        parse_booking_date(req.date) if req.date else None,
    )
    return BookingViewSchema.from_view(machine.view(actor, booking))


@router.post("/{booking_id}/review", response_model=BookingViewSchema)
def review_booking(
    booking_id: str,
    req: ReviewSchema,
    actor: Actor = Depends(get_actor),
    machine: BookingStateMachine = Depends(get_state_machine),
):
    booking = machine.rate(actor, booking_id, req.rating, req.comment)
    return BookingViewSchema.from_view(machine.view(actor, booking))
