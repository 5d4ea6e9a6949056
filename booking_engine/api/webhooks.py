from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as PayloadError

from booking_engine.application.dto.payment_event import PaymentEventDTO
from booking_engine.application.use_cases.booking_state_machine import BookingStateMachine
from booking_engine.core.config import settings
from booking_engine.infrastructure.payments.webhook_verify import verify_post_signature
from booking_engine.wiring.dependencies import get_state_machine


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhooks/payments")
async def payment_webhook(
    request: Request,
    machine: BookingStateMachine = Depends(get_state_machine),
) -> Response:
    body = await request.body()
    signature = request.headers.get("X-Payment-Signature")
    if not verify_post_signature(body, signature, settings.PAYMENT_WEBHOOK_SECRET, settings.ENV):
        logger.warning("Payment webhook signature rejected")
        return Response(status_code=403)

    try:
        payload = json.loads(body.decode("utf-8")) if body else {}
        event = PaymentEventDTO.model_validate(payload)
    except (ValueError, PayloadError):
        logger.exception("Failed to parse payment webhook body")
        return Response(status_code=400)

    if not event.is_completed_payment:
        logger.info("Payment event ignored", extra={"event": event.type, "booking_id": event.booking_id})
        return Response(status_code=200)

    await run_in_threadpool(machine.handle_payment_completed, event.booking_id, event.payment_id)
    return Response(status_code=200)
