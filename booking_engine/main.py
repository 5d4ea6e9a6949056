import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from booking_engine.api.v1.bookings import router as bookings_router
from booking_engine.api.v1.providers import router as providers_router
from booking_engine.api.webhooks import router as webhooks_router
from booking_engine.application.exceptions import BookingEngineError
from booking_engine.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in (
            "booking_id", "uid", "status", "actor_id", "provider_id", "user_id", "event", "reason", "error",
        ):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

logger = logging.getLogger(__name__)

app = FastAPI(title="Booking Engine", version="1.0.0")

app.include_router(bookings_router, tags=["bookings"])
app.include_router(providers_router, tags=["providers"])
app.include_router(webhooks_router, tags=["webhooks"])


@app.exception_handler(BookingEngineError)
def booking_error_handler(request: Request, exc: BookingEngineError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", extra={"error": str(exc)})
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "message": str(exc), "retryable": exc.retryable},
    )


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "validation_error", "message": str(exc.errors()), "retryable": False},
    )


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
