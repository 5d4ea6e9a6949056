"""
Role-gated state machine owning the authoritative status of every booking.

Every status change is an explicit row of ``TRANSITIONS``. A request whose
``(current, target)`` pair has no row fails with ``InvalidTransition``; a row
that exists but does not list any of the actor's relations to the booking
fails with ``Forbidden``.

Usage:
    machine = BookingStateMachine(repository, directory, catalog, notifier, resolver)
    booking = machine.create(customer, NewBooking(...))
    machine.accept(barber, booking.id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Callable
from zoneinfo import ZoneInfo

from booking_engine.application.exceptions import (
    DuplicateBooking,
    Forbidden,
    InvalidTransition,
    NotFound,
    SlotUnavailable,
    ValidationError,
)
from booking_engine.application.ports.booking_repository import BookingRepositoryPort
from booking_engine.application.ports.directory import DirectoryPort
from booking_engine.application.ports.notifier import NotificationEvent, NotificationPort
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.application.use_cases.conflict_checker import scope_for
from booking_engine.application.use_cases.schedule_resolver import ScheduleResolver
from booking_engine.application.utils.identifiers import generate_id, generate_uid
from booking_engine.application.utils.status_view import display_status, viewer_role_for, ViewerRole
from booking_engine.domain.entities.actor import SYSTEM_ACTOR, Actor, ActorRole
from booking_engine.domain.entities.booking import (
    Booking,
    BookingStatus,
    PaymentStatus,
    Review,
    ServiceType,
)
from booking_engine.domain.entities.conflict import ConflictScope
from booking_engine.domain.entities.schedule import Weekday
from booking_engine.domain.entities.time_slot import TimeSlot


class Relation(str, Enum):
    """How an actor stands to one particular booking."""

    CUSTOMER = "customer"
    PROVIDER = "provider"
    SHOP_OWNER = "shop_owner"
    ADMIN = "admin"
    SYSTEM = "system"


@dataclass(frozen=True)
class Transition:
    from_status: BookingStatus | None
    to_status: BookingStatus
    actors: frozenset[Relation]


def _rel(*relations: Relation) -> frozenset[Relation]:
    return frozenset(relations)


_STAFF = (Relation.PROVIDER, Relation.SHOP_OWNER, Relation.ADMIN)

# Fresh id/uid draws per create before a collision is reported.
ID_ATTEMPTS = 3

TRANSITIONS: list[Transition] = [
    # --- Creation ---
    Transition(None, BookingStatus.PENDING, _rel(Relation.CUSTOMER)),

    # --- Provider decision ---
    Transition(BookingStatus.PENDING, BookingStatus.CONFIRMED, _rel(*_STAFF, Relation.SYSTEM)),
    Transition(BookingStatus.PENDING, BookingStatus.REJECTED, _rel(*_STAFF)),
    Transition(BookingStatus.PENDING, BookingStatus.CANCELLED, _rel(Relation.CUSTOMER, *_STAFF)),

    # --- Reassignment hand-off (PROVIDER is the newly assigned provider) ---
    Transition(BookingStatus.PENDING, BookingStatus.REASSIGNED, _rel(Relation.SHOP_OWNER)),
    Transition(BookingStatus.REASSIGNED, BookingStatus.CONFIRMED, _rel(Relation.PROVIDER)),

    # --- Service outcome ---
    Transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED, _rel(*_STAFF)),
    Transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED, _rel(Relation.CUSTOMER, *_STAFF)),
    Transition(BookingStatus.CONFIRMED, BookingStatus.NO_SHOW, _rel(*_STAFF)),
]


def find_transition(from_status: BookingStatus | None, to_status: BookingStatus) -> Transition | None:
    for t in TRANSITIONS:
        if t.from_status == from_status and t.to_status == to_status:
            return t
    return None


def allowed_targets(from_status: BookingStatus | None) -> list[BookingStatus]:
    return [t.to_status for t in TRANSITIONS if t.from_status == from_status]


@dataclass(frozen=True)
class NewBooking:
    provider_id: str
    service_id: str
    booking_date: date
    time: TimeSlot
    notes: str = ""


@dataclass(frozen=True)
class ViewedBooking:
    booking: Booking
    status: str
    viewer_role: ViewerRole


@dataclass(frozen=True)
class Page:
    items: list[ViewedBooking]
    total: int
    page: int
    limit: int


class BookingStateMachine:
    def __init__(
        self,
        repository: BookingRepositoryPort,
        directory: DirectoryPort,
        catalog: ServiceCatalogPort,
        notifier: NotificationPort,
        resolver: ScheduleResolver,
        timezone: ZoneInfo = ZoneInfo("UTC"),
        min_advance_minutes: int = 60,
        rating_requires_completed: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._repository = repository
        self._directory = directory
        self._catalog = catalog
        self._notifier = notifier
        self._resolver = resolver
        self._timezone = timezone
        self._min_advance = timedelta(minutes=min_advance_minutes)
        self._rating_requires_completed = rating_requires_completed
        self._clock = clock or (lambda: datetime.now(self._timezone))
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(self, actor: Actor, request: NewBooking) -> Booking:
        """
        Create a pending booking for a customer.

        The availability list a client saw is advisory; the span is re-checked
        and inserted in one atomic repository call.

        Raises:
            Forbidden: actor is not a customer.
            NotFound: service or provider missing.
            ValidationError: self-booking, shop mismatch, too little notice.
            SlotUnavailable: provider closed, span outside hours, or taken.
            DuplicateBooking: fresh ids kept colliding with stored bookings.
        """
        if actor.role != ActorRole.CUSTOMER:
            raise Forbidden("Only customers can create bookings")

        service = self._catalog.get_service(request.service_id)
        if service is None:
            raise NotFound(f"Service {request.service_id} not found")
        if not service.active:
            raise ValidationError(f"Service {service.id} is no longer offered")

        provider = self._resolver.load_provider(request.provider_id)
        if not provider.active:
            raise ValidationError(f"Provider {provider.id} is not accepting bookings")
        if provider.id == actor.actor_id:
            raise ValidationError("You cannot book an appointment with yourself")

        shop_id = None
        if service.service_type == ServiceType.SHOP_BASED:
            if not provider.shop_id:
                raise ValidationError(
                    f"{provider.kind.value} does not have an associated shop for shop-based services"
                )
            if service.shop_id and service.shop_id != provider.shop_id:
                raise ValidationError(f"Service {service.id} is not offered at this provider's shop")
            shop_id = provider.shop_id

        self._check_advance_notice(request.booking_date, request.time)

        window = self._resolver.resolve(provider, request.booking_date)
        weekday = Weekday.from_date(request.booking_date).value
        if window is None:
            raise SlotUnavailable(f"{provider.kind.value} is not available on {weekday}")
        start = request.time.minute_of_day
        if not window.contains_span(start, service.duration_minutes):
            raise SlotUnavailable(
                f"Booking time {request.time} - {TimeSlot.from_minute(start + service.duration_minutes)} "
                f"is outside available hours ({TimeSlot.from_minute(window.start_minute)} - "
                f"{TimeSlot.from_minute(window.end_minute)}) on {weekday}"
            )

        now = self._clock()
        booking = Booking(
            id=generate_id(),
            uid=generate_uid(),
            customer_id=actor.actor_id,
            provider_id=provider.id,
            shop_id=shop_id,
            service_id=service.id,
            service_name=service.name,
            service_type=service.service_type,
            price=service.price,
            duration_minutes=service.duration_minutes,
            booking_date=request.booking_date,
            time=request.time,
            status=BookingStatus.PENDING,
            notes=request.notes,
            created_at=now,
            updated_at=now,
        )
        booking = self._insert_with_fresh_ids(booking, scope_for(provider, customer_id=actor.actor_id))

        self._logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "uid": booking.uid,
                "actor_id": actor.actor_id,
                "provider_id": provider.id,
                "status": booking.status.value,
            },
        )
        self._notify(provider.id, booking, NotificationEvent.REQUESTED)
        return booking

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def relations(self, actor: Actor, booking: Booking) -> set[Relation]:
        relations: set[Relation] = set()
        if actor.role == ActorRole.SYSTEM:
            relations.add(Relation.SYSTEM)
        if actor.is_admin:
            relations.add(Relation.ADMIN)
        if actor.actor_id == booking.customer_id:
            relations.add(Relation.CUSTOMER)
        if actor.actor_id == booking.assigned_provider_id:
            relations.add(Relation.PROVIDER)
        owner_id = self.shop_owner_id(booking)
        if owner_id is not None and actor.actor_id == owner_id:
            relations.add(Relation.SHOP_OWNER)
        return relations

    def shop_owner_id(self, booking: Booking) -> str | None:
        if not booking.shop_id:
            return None
        shop = self._directory.get_shop(booking.shop_id)
        return shop.owner_id if shop else None

    def authorize(self, actor: Actor, booking: Booking, target: BookingStatus) -> Transition:
        relations = self.relations(actor, booking)
        if not relations:
            raise Forbidden(f"You are not authorized to act on booking {booking.id}")

        transition = find_transition(booking.status, target)
        if transition is None:
            valid = [s.value for s in allowed_targets(booking.status)]
            raise InvalidTransition(
                f"Cannot change booking status from {booking.status.value} to {target.value}. "
                f"Valid targets: {valid}"
            )

        if not relations & transition.actors:
            raise Forbidden(
                f"You are not authorized to move booking {booking.id} to {target.value}"
            )
        return transition

    def transition(
        self,
        actor: Actor,
        booking_id: str,
        target: BookingStatus,
        reason: str | None = None,
    ) -> Booking:
        if target == BookingStatus.REASSIGNED:
            raise InvalidTransition("Use reassignment to hand a booking to another provider")

        booking = self.load(booking_id)
        self.authorize(actor, booking, target)

        changes: dict = {"status": target, "updated_at": self._clock()}
        if target == BookingStatus.REJECTED:
            changes["rejection_reason"] = reason or None
        elif target in (BookingStatus.CANCELLED, BookingStatus.NO_SHOW) and reason:
            changes["cancellation_reason"] = reason
        elif target == BookingStatus.CONFIRMED and reason:
            changes["notes"] = _append_note(booking.notes, f"Accepted: {reason}")

        updated = self._repository.replace_if_unchanged(replace(booking, **changes), booking)

        self._logger.info(
            "Booking status changed",
            extra={
                "booking_id": booking.id,
                "actor_id": actor.actor_id,
                "status": f"{booking.status.value}->{target.value}",
                "reason": reason,
            },
        )
        self._notify_transition(actor, updated)
        return updated

    def accept(self, actor: Actor, booking_id: str, reason: str | None = None) -> Booking:
        return self.transition(actor, booking_id, BookingStatus.CONFIRMED, reason)

    def reject(self, actor: Actor, booking_id: str, reason: str | None = None) -> Booking:
        return self.transition(actor, booking_id, BookingStatus.REJECTED, reason)

    def cancel(self, actor: Actor, booking_id: str, reason: str | None = None) -> Booking:
        return self.transition(actor, booking_id, BookingStatus.CANCELLED, reason)

    def complete(self, actor: Actor, booking_id: str) -> Booking:
        return self.transition(actor, booking_id, BookingStatus.COMPLETED)

    def mark_no_show(self, actor: Actor, booking_id: str, reason: str | None = None) -> Booking:
        return self.transition(actor, booking_id, BookingStatus.NO_SHOW, reason)

    # ------------------------------------------------------------------
    # Review and payment
    # ------------------------------------------------------------------

    def rate(self, actor: Actor, booking_id: str, rating: int, comment: str = "") -> Booking:
        booking = self.load(booking_id)
        if actor.actor_id != booking.customer_id:
            raise Forbidden("Only the customer who made the booking can rate it")
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError(f"Rating must be an integer from 1 to 5, got {rating!r}")
        if self._rating_requires_completed and booking.status != BookingStatus.COMPLETED:
            raise InvalidTransition("Only completed bookings can be rated")
        if booking.review is not None:
            raise InvalidTransition("Booking has already been rated")

        updated = self._repository.replace_if_unchanged(
            replace(booking, review=Review(rating=rating, comment=comment or ""), updated_at=self._clock()),
            booking,
        )
        self._logger.info("Booking rated", extra={"booking_id": booking.id, "actor_id": actor.actor_id})
        self._notify(updated.assigned_provider_id, updated, NotificationEvent.REVIEWED)
        return updated

    def handle_payment_completed(self, booking_id: str, payment_id: str) -> Booking:
        """Record a completed payment; a still-pending booking is confirmed by it."""
        booking = self.load(booking_id)
        if booking.payment_id == payment_id:
            self._logger.info("Duplicate payment event ignored", extra={"booking_id": booking.id})
            return booking

        paid = replace(
            booking,
            payment_status=PaymentStatus.PAID,
            payment_id=payment_id,
            updated_at=self._clock(),
        )
        if booking.status != BookingStatus.PENDING:
            if not booking.is_active:
                self._logger.warning(
                    "Payment for inactive booking",
                    extra={"booking_id": booking.id, "status": booking.status.value},
                )
            return self._repository.replace_if_unchanged(paid, booking)

        self.authorize(SYSTEM_ACTOR, booking, BookingStatus.CONFIRMED)
        updated = self._repository.replace_if_unchanged(replace(paid, status=BookingStatus.CONFIRMED), booking)
        self._logger.info(
            "Booking confirmed by payment",
            extra={"booking_id": booking.id, "status": updated.status.value},
        )
        self._notify(updated.customer_id, updated, NotificationEvent.CONFIRMED)
        return updated

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def load(self, booking_id: str) -> Booking:
        booking = self._repository.get(booking_id)
        if booking is None:
            raise NotFound(f"Booking {booking_id} not found")
        return booking

    def view(self, actor: Actor, booking: Booking) -> ViewedBooking:
        role = viewer_role_for(actor, booking, self.shop_owner_id(booking))
        return ViewedBooking(booking=booking, status=display_status(booking.status, role), viewer_role=role)

    def get(self, actor: Actor, booking_id: str) -> ViewedBooking:
        return self._authorized_view(actor, self.load(booking_id))

    def get_by_uid(self, actor: Actor, uid: str) -> ViewedBooking:
        booking = self._repository.get_by_uid(uid)
        if booking is None:
            raise NotFound(f"Booking {uid} not found")
        return self._authorized_view(actor, booking)

    def list_for(
        self,
        actor: Actor,
        status: str | None = None,
        day: date | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page:
        """
        Bookings visible to the actor, newest appointment last.

        ``status`` filters on the status the actor sees, so a customer asking
        for ``pending`` also gets bookings a provider rejected.
        """
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")

        if actor.is_admin:
            bookings = self._repository.list(booking_date=day)
        elif actor.role == ActorRole.CUSTOMER:
            bookings = self._repository.list(customer_id=actor.actor_id, booking_date=day)
        else:
            seen: dict[str, Booking] = {
                b.id: b for b in self._repository.list(provider_id=actor.actor_id, booking_date=day)
            }
            for b in self._repository.list(booked_provider_id=actor.actor_id, booking_date=day):
                seen.setdefault(b.id, b)
            if actor.role == ActorRole.SHOP_OWNER:
                provider = self._directory.get_provider(actor.actor_id)
                if provider is not None and provider.shop_id:
                    for b in self._repository.list(shop_id=provider.shop_id, booking_date=day):
                        seen.setdefault(b.id, b)
            bookings = list(seen.values())

        views = [self.view(actor, b) for b in bookings]
        if status:
            views = [v for v in views if v.status == status]
        views.sort(key=lambda v: (v.booking.booking_date, v.booking.time))

        offset = (page - 1) * limit
        return Page(items=views[offset : offset + limit], total=len(views), page=page, limit=limit)

    def pending_requests(self, actor: Actor) -> list[ViewedBooking]:
        """Bookings waiting for this provider's accept or reject."""
        waiting = {
            b.id: b
            for b in self._repository.list(
                provider_id=actor.actor_id,
                statuses=(BookingStatus.PENDING, BookingStatus.REASSIGNED),
            )
        }
        if actor.role == ActorRole.SHOP_OWNER:
            provider = self._directory.get_provider(actor.actor_id)
            if provider is not None and provider.shop_id:
                for b in self._repository.list(shop_id=provider.shop_id, statuses=(BookingStatus.PENDING,)):
                    waiting.setdefault(b.id, b)
        views = [self.view(actor, b) for b in waiting.values()]
        views.sort(key=lambda v: (v.booking.booking_date, v.booking.time))
        return views

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _insert_with_fresh_ids(self, booking: Booking, scope: ConflictScope) -> Booking:
        attempts = 1
        while True:
            try:
                return self._repository.insert_if_free(booking, scope)
            except DuplicateBooking:
                if attempts >= ID_ATTEMPTS:
                    raise
                attempts += 1
                self._logger.warning(
                    "Booking identifier collision, drawing new ids",
                    extra={"booking_id": booking.id, "uid": booking.uid},
                )
                booking = replace(booking, id=generate_id(), uid=generate_uid())

    def _authorized_view(self, actor: Actor, booking: Booking) -> ViewedBooking:
        # The originally booked provider keeps read access after a reassignment.
        if not self.relations(actor, booking) and actor.actor_id != booking.provider_id:
            raise Forbidden(f"You are not authorized to view booking {booking.id}")
        return self.view(actor, booking)

    def _check_advance_notice(self, booking_date: date, slot: TimeSlot) -> None:
        starts_at = datetime.combine(booking_date, time(slot.hour, slot.minute), tzinfo=self._timezone)
        earliest = self._clock() + self._min_advance
        if starts_at < earliest:
            minutes = int(self._min_advance.total_seconds() // 60)
            raise ValidationError(f"Bookings must be made at least {minutes} minutes in advance")

    def _notify_transition(self, actor: Actor, booking: Booking) -> None:
        if booking.status in (BookingStatus.CONFIRMED, BookingStatus.COMPLETED):
            self._notify(booking.customer_id, booking, NotificationEvent(booking.status.value))
        elif booking.status == BookingStatus.CANCELLED:
            if actor.actor_id == booking.customer_id:
                self._notify(booking.assigned_provider_id, booking, NotificationEvent.CANCELLED)
            else:
                self._notify(booking.customer_id, booking, NotificationEvent.CANCELLED)
        elif booking.status == BookingStatus.REJECTED:
            owner_id = self.shop_owner_id(booking)
            if owner_id is not None and owner_id != actor.actor_id:
                self._notify(owner_id, booking, NotificationEvent.REJECTED)

    def _notify(self, user_id: str, booking: Booking, event: NotificationEvent) -> None:
        try:
            self._notifier.notify(user_id, booking, event)
        except Exception as e:
            self._logger.warning(
                "Failed to send notification",
                extra={"booking_id": booking.id, "event": event.value, "error": str(e)},
            )


def _append_note(notes: str, line: str) -> str:
    return f"{notes}\n{line}" if notes else line
