from abc import ABC, abstractmethod
from enum import Enum

from booking_engine.domain.entities.booking import Booking


class NotificationEvent(str, Enum):
    REQUESTED = "requested"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    REASSIGNED = "reassigned"
    REVIEWED = "reviewed"


class NotificationPort(ABC):
    @abstractmethod
    def notify(self, user_id: str, booking: Booking, event: NotificationEvent) -> None:
        """Fire-and-forget delivery. May raise; callers log and continue."""
        raise NotImplementedError
