#!/usr/bin/env python3
from __future__ import annotations

import argparse
import hashlib
import hmac
import json
import time
from typing import Any

import httpx
from httpx import ConnectError


def build_payload(booking_id: str, payment_id: str | None) -> dict[str, Any]:
    return {
        "type": "payment.completed",
        "bookingId": booking_id,
        "paymentId": payment_id or f"pay_{int(time.time() * 1000)}",
    }


def sign_body(secret: str, body: bytes) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a test payment.completed webhook POST")
    parser.add_argument("booking_id")
    parser.add_argument("--url", default="http://127.0.0.1:8001/webhooks/payments")
    parser.add_argument("--payment-id", default=None)
    parser.add_argument("--secret", default="", help="PAYMENT_WEBHOOK_SECRET for the signature")
    args = parser.parse_args()

    body = json.dumps(build_payload(args.booking_id, args.payment_id)).encode("utf-8")

    headers = {"Content-Type": "application/json"}
    if args.secret:
        headers["X-Payment-Signature"] = sign_body(args.secret, body)

    try:
        resp = httpx.post(args.url, content=body, headers=headers, timeout=10.0)
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn booking_engine.main:app --reload --port 8001")
        return

    print(resp.status_code)
    if resp.text:
        print(resp.text)


if __name__ == "__main__":
    main()
