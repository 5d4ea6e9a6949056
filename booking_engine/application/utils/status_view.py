from __future__ import annotations

from enum import Enum

from booking_engine.domain.entities.actor import Actor
from booking_engine.domain.entities.booking import Booking, BookingStatus


class ViewerRole(str, Enum):
    CUSTOMER = "customer"
    PROVIDER = "provider"
    SHOP_OWNER = "shop_owner"
    ADMIN = "admin"


def display_status(status: BookingStatus, viewer_role: ViewerRole) -> str:
    """Status as shown to a viewer; the stored status is never changed.

    A rejected booking still awaits reassignment from the customer's point of
    view, so customers see it as pending.
    """
    if status == BookingStatus.REJECTED and viewer_role == ViewerRole.CUSTOMER:
        return BookingStatus.PENDING.value
    return status.value


def viewer_role_for(actor: Actor, booking: Booking, shop_owner_id: str | None = None) -> ViewerRole:
    if actor.is_admin:
        return ViewerRole.ADMIN
    if actor.actor_id == booking.customer_id:
        return ViewerRole.CUSTOMER
    if shop_owner_id is not None and actor.actor_id == shop_owner_id:
        return ViewerRole.SHOP_OWNER
    return ViewerRole.PROVIDER


def visible_rejection_reason(booking: Booking, viewer_role: ViewerRole) -> str | None:
    """Customers never see why a provider turned the booking down."""
    if viewer_role == ViewerRole.CUSTOMER:
        return None
    return booking.rejection_reason
