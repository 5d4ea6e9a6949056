from __future__ import annotations

import hashlib
import hmac
import logging


logger = logging.getLogger(__name__)

SIGNATURE_SCHEME = "sha256"


def sign_body(secret: str, body: bytes) -> str:
    """Header value for ``X-Payment-Signature``: ``sha256=<hex hmac of the raw body>``."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_SCHEME}={digest}"


def _digest_from_header(signature_header: str) -> str | None:
    scheme, sep, digest = signature_header.strip().partition("=")
    if not sep or scheme.lower() != SIGNATURE_SCHEME or not digest:
        return None
    return digest.lower()


def verify_post_signature(body: bytes, signature_header: str | None, secret: str | None, env: str) -> bool:
    """Check a payment event against the shared secret; dev/local accept unsigned events."""
    if not signature_header:
        if env.lower() in {"dev", "local"}:
            logger.warning("Unsigned payment event accepted in dev mode")
            return True
        return False

    if not secret:
        logger.error("PAYMENT_WEBHOOK_SECRET is not set; rejecting signed payment event")
        return False

    received = _digest_from_header(signature_header)
    if received is None:
        return False
    _, _, expected = sign_body(secret, body).partition("=")
    return hmac.compare_digest(expected, received)
