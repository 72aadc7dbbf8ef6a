"""Webhook signature verification: constant-time HMAC-SHA256.

Security contract:
- Shopify sends X-Shopify-Hmac-Sha256: base64(HMAC-SHA256(secret, raw body))
- The digest is computed over the raw request bytes, never re-serialized JSON
- Comparison uses hmac.compare_digest() (constant-time, no timing attacks)
- Missing secret -> accept with a warning (fail-open), unless fail_closed
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-shopify-hmac-sha256"


def compute_signature(raw_body: bytes, secret: str) -> str:
    """Return the base64-encoded HMAC-SHA256 digest of raw_body."""
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(
    raw_body: bytes,
    provided_signature: str | None,
    secret: str | None,
    *,
    fail_closed: bool = False,
) -> bool:
    """Verify a Shopify webhook signature.

    Args:
        raw_body: Request body bytes exactly as received
        provided_signature: Value of the X-Shopify-Hmac-Sha256 header
        secret: Shared webhook secret, or None when not configured
        fail_closed: Reject instead of accept when no secret is configured

    Returns:
        True if the signature is valid (or verification is disabled)
    """
    if not secret:
        if fail_closed:
            logger.warning("SHOPIFY_WEBHOOK_SECRET not set, rejecting webhook")
            return False
        logger.warning("SHOPIFY_WEBHOOK_SECRET not set, skipping verification")
        return True
    if not provided_signature:
        return False

    expected = compute_signature(raw_body, secret)
    return hmac.compare_digest(
        expected.encode("ascii"), provided_signature.encode("utf-8")
    )
