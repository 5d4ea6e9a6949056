class BookingEngineError(RuntimeError):
    """Base for every error the engine reports to a caller."""

    kind = "booking_error"
    status_code = 400
    retryable = False


class ValidationError(BookingEngineError):
    """Raised for malformed date, time, duration or rating input."""

    kind = "validation_error"
    status_code = 400


class NotFound(BookingEngineError):
    """Raised when a booking, provider, shop or service does not exist."""

    kind = "not_found"
    status_code = 404


class Forbidden(BookingEngineError):
    """Raised when the actor lacks the role or ownership for an action."""

    kind = "forbidden"
    status_code = 403


class InvalidTransition(BookingEngineError):
    """Raised when a status change is not an edge of the transition table."""

    kind = "invalid_transition"
    status_code = 409


class SlotUnavailable(BookingEngineError):
    """Raised when the requested span is closed or already taken."""

    kind = "slot_unavailable"
    status_code = 409


class UpstreamFailure(BookingEngineError):
    """Raised when a collaborator or the store fails (timeouts, I/O, 5xx)."""

    kind = "upstream_failure"
    status_code = 503
    retryable = True


class DuplicateBooking(BookingEngineError):
    """Raised when a new booking's id or uid is already taken."""

    kind = "duplicate_booking"
    status_code = 409
    retryable = True
