from __future__ import annotations

import secrets
import string
import uuid

BOOKING_PREFIX = "BK"


def generate_uid(prefix: str = BOOKING_PREFIX) -> str:
    """Human-shareable id: two-letter prefix, two letters, eight digits (``BKQZ01234567``)."""
    head = prefix.upper().ljust(2, "X")[:2]
    letters = "".join(secrets.choice(string.ascii_uppercase) for _ in range(2))
    digits = "".join(secrets.choice(string.digits) for _ in range(8))
    return f"{head}{letters}{digits}"


def generate_id() -> str:
    return uuid.uuid4().hex
