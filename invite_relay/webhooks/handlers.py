"""Webhook HTTP handlers: FastAPI routes for the order relay.

The order-created handler:
1. Reads raw body (needed for HMAC verification)
2. Verifies the Shopify signature
3. Parses the order payload
4. Extracts the customer record
5. Forwards it to the invitation API

Status contract:
- 401 only for signature failures
- 400 when a required customer field is missing
- 500 for parse failures and invitation API failures
- Never return error details to the webhook caller
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from invite_relay.config import Settings
from invite_relay.customers import (
    AddressRecord,
    OrderCustomer,
    OrderRecord,
    extract_customer,
    parse_order,
)
from invite_relay.exceptions import (
    AuthenticationFailure,
    ForwardError,
    PayloadParseError,
    RelayError,
    ValidationFailure,
)
from invite_relay.forwarder import InviteClient
from invite_relay.webhooks.verification import SIGNATURE_HEADER, verify_signature

logger = logging.getLogger(__name__)

ORDER_CREATED_PATH = "/webhook/shopify/order/created"
TEST_WEBHOOK_PATH = "/test-webhook"
HEALTH_PATH = "/health"

_AUDIT_STATUSES: tuple[tuple[type[RelayError], str], ...] = (
    (AuthenticationFailure, "signature_failed"),
    (ValidationFailure, "invalid"),
    (PayloadParseError, "parse_failed"),
    (ForwardError, "forward_failed"),
)


def _log_webhook(order_ref: str, status: str) -> None:
    """Audit log for webhook activity."""
    logger.info("WEBHOOK_AUDIT order=%s status=%s", order_ref, status)


def _audit_status(error: RelayError) -> str:
    return next(
        (status for cls, status in _AUDIT_STATUSES if isinstance(error, cls)), "failed"
    )


def _sample_order(email: str) -> OrderRecord:
    """Fixed order used by the test endpoint."""
    return OrderRecord(
        id=12345,
        order_number="TEST-001",
        email=email,
        billing_address=AddressRecord(
            first_name="Test",
            last_name="Customer",
            phone="+1-555-123-4567",
        ),
        customer=OrderCustomer(first_name="Test", last_name="Customer", email=email),
    )


def _utc_timestamp() -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def _handle_order_created(request: Request) -> PlainTextResponse:
    """Verify, parse, extract and forward one order-created webhook."""
    settings: Settings = request.app.state.settings
    client: InviteClient = request.app.state.invite_client

    body = await request.body()

    order_ref = "unknown"
    try:
        if not verify_signature(
            body,
            request.headers.get(SIGNATURE_HEADER),
            settings.shopify_webhook_secret,
            fail_closed=settings.webhook_fail_closed,
        ):
            raise AuthenticationFailure("Webhook verification failed")

        order = parse_order(body)
        order_ref = order.ref
        logger.info("Received order: id=%s number=%s", order.id, order.order_number)

        customer = extract_customer(order)
        await client.forward(customer)
    except RelayError as e:
        logger.error("Order %s rejected (%s): %s", order_ref, type(e).__name__, e)
        _log_webhook(order_ref, _audit_status(e))
        return PlainTextResponse(e.response_text, status_code=e.status_code)
    except Exception:
        logger.exception("Webhook processing error for order %s", order_ref)
        _log_webhook(order_ref, "error")
        return PlainTextResponse("Error processing webhook", status_code=500)

    logger.info(
        "Successfully processed order %s for %s", order.order_number, customer.email
    )
    _log_webhook(order_ref, "forwarded")
    return PlainTextResponse("Webhook processed successfully", status_code=200)


async def _handle_test_webhook(request: Request) -> JSONResponse:
    """Run the sample order through extraction and forwarding."""
    settings: Settings = request.app.state.settings
    client: InviteClient = request.app.state.invite_client

    try:
        customer = extract_customer(_sample_order(settings.test_customer_email))
        await client.forward(customer)
    except RelayError as e:
        logger.error("Test webhook error: %s", e)
        return JSONResponse({"success": False, "error": str(e)}, status_code=500)
    except Exception as e:
        logger.exception("Test webhook error")
        return JSONResponse({"success": False, "error": str(e)}, status_code=500)

    return JSONResponse(
        {
            "success": True,
            "message": "Test webhook processed",
            "data": customer.to_payload(),
        }
    )


def register_webhook_routes(app: FastAPI) -> None:
    """Register the webhook, test and health routes on the FastAPI app."""

    @app.post(ORDER_CREATED_PATH)
    async def shopify_order_created(request: Request):
        """Receive Shopify order-created webhooks (signature-verified)."""
        return await _handle_order_created(request)

    @app.post(TEST_WEBHOOK_PATH)
    async def test_webhook(request: Request):
        """Forward a fixed sample order (development aid)."""
        return await _handle_test_webhook(request)

    @app.get(HEALTH_PATH)
    async def health():
        """Liveness check."""
        return {"status": "OK", "timestamp": _utc_timestamp()}

    logger.info("Webhook routes registered: %s, %s", ORDER_CREATED_PATH, TEST_WEBHOOK_PATH)
