"""Error taxonomy for the webhook relay.

Each failure class carries the HTTP status the order webhook answers with:
- AuthenticationFailure  -> 401 (signature mismatch)
- ValidationFailure      -> 400 (missing required customer field)
- PayloadParseError      -> 500 (malformed payload)
- ForwardError           -> 500 (invitation API rejected or unreachable)

No failure is retried. Every one is terminal for its request.
"""

from __future__ import annotations

__all__ = [
    "AuthenticationFailure",
    "ForwardError",
    "MissingRequiredFieldError",
    "PayloadParseError",
    "RelayError",
    "TransportFailureError",
    "UpstreamRejectedError",
    "ValidationFailure",
]


class RelayError(Exception):
    """Base exception for webhook relay failures."""

    status_code: int = 500
    # Body returned to the webhook caller; details stay in the logs
    response_text: str = "Error processing webhook"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationFailure(RelayError):
    """Webhook signature did not match."""

    status_code = 401
    response_text = "Unauthorized"


class ValidationFailure(RelayError):
    """Order payload lacks data the invitation API requires."""

    status_code = 400
    response_text = "Missing required customer data"


class MissingRequiredFieldError(ValidationFailure):
    """A required customer field was empty after every fallback source."""

    def __init__(self, fields: list[str], order_ref: str = "") -> None:
        """Initialize missing-field error.

        Args:
            fields: Names of the required fields that resolved to empty
            order_ref: Order id/number for log context
        """
        super().__init__(f"Missing required customer data: {', '.join(fields)}")
        self.fields = fields
        self.order_ref = order_ref


class PayloadParseError(RelayError):
    """Webhook body is not a JSON order object."""


class ForwardError(RelayError):
    """Invitation API call failed."""


class UpstreamRejectedError(ForwardError):
    """Invitation API answered with a non-2xx status."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"API call failed: {status} - {body}")
        self.status = status
        self.body = body


class TransportFailureError(ForwardError):
    """Invitation API could not be reached."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"API call failed: {type(cause).__name__}: {cause}")
        self.cause = cause
