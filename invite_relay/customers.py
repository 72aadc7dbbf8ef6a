"""Order payload models and customer extraction.

Shopify orders carry the buyer's name, email and phone in several places
(billing address, shipping address, customer object). Each customer field is
resolved from an ordered fallback chain: the first non-empty source wins.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, Callable

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from invite_relay.exceptions import MissingRequiredFieldError, PayloadParseError


# ---------------------------------------------------------------------------
# Payload models
# ---------------------------------------------------------------------------


_RECORD_FIELDS = frozenset({"billing_address", "shipping_address", "customer"})


class _PayloadModel(BaseModel):
    """Lenient payload model: unusable values count as absent.

    A sub-record that is not an object, or a leaf that is not a string or
    number, resolves to None so the fallback chain moves on to the next
    source.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @field_validator("*", mode="before")
    @classmethod
    def absent_if_unusable(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name in _RECORD_FIELDS:
            return value if isinstance(value, (dict, BaseModel)) else None
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            return None
        return value


class AddressRecord(_PayloadModel):
    """Billing or shipping address on an order."""

    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


class OrderCustomer(_PayloadModel):
    """Customer object embedded in an order."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None


class OrderRecord(_PayloadModel):
    """The subset of a Shopify order webhook the relay reads."""

    id: int | str | None = None
    order_number: int | str | None = None
    email: str | None = None
    billing_address: AddressRecord | None = None
    shipping_address: AddressRecord | None = None
    customer: OrderCustomer | None = None

    @property
    def ref(self) -> str:
        """Order id/number for log lines."""
        return f"{self.id}/{self.order_number}"


def parse_order(raw_body: bytes) -> OrderRecord:
    """Decode a webhook body into an OrderRecord.

    Raises:
        PayloadParseError: body is not valid JSON or not an order object
    """
    try:
        data = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PayloadParseError(f"Invalid JSON payload: {e}") from e

    if not isinstance(data, dict):
        raise PayloadParseError(
            f"Order payload must be a JSON object, got {type(data).__name__}"
        )

    try:
        return OrderRecord.model_validate(data)
    except ValidationError as e:
        raise PayloadParseError(f"Unexpected order shape: {e}") from e


# ---------------------------------------------------------------------------
# Customer record
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CustomerRecord:
    """Customer contact data sent to the invitation API."""

    first_name: str
    last_name: str
    email: str
    phone: str | None = None

    def to_payload(self) -> dict[str, str]:
        """JSON body for the invitation API. Phone is omitted when absent."""
        payload = asdict(self)
        if self.phone is None:
            del payload["phone"]
        return payload


# ---------------------------------------------------------------------------
# Fallback chains
# ---------------------------------------------------------------------------

Accessor = Callable[[OrderRecord], str | None]


def _billing(name: str) -> Accessor:
    return lambda order: getattr(order.billing_address, name, None)


def _shipping(name: str) -> Accessor:
    return lambda order: getattr(order.shipping_address, name, None)


def _customer(name: str) -> Accessor:
    return lambda order: getattr(order.customer, name, None)


def _order_email(order: OrderRecord) -> str | None:
    return order.email


FIELD_SOURCES: dict[str, tuple[Accessor, ...]] = {
    "first_name": (_billing("first_name"), _shipping("first_name"), _customer("first_name")),
    "last_name": (_billing("last_name"), _shipping("last_name"), _customer("last_name")),
    "email": (_order_email, _customer("email")),
    "phone": (_billing("phone"), _shipping("phone"), _customer("phone")),
}

REQUIRED_FIELDS = ("first_name", "last_name", "email")


def resolve_field(order: OrderRecord, sources: tuple[Accessor, ...]) -> str | None:
    """Return the first non-empty value from sources, or None."""
    for source in sources:
        value = source(order)
        if value:
            return value
    return None


def extract_customer(order: OrderRecord) -> CustomerRecord:
    """Build the customer record for an order.

    Raises:
        MissingRequiredFieldError: first_name, last_name or email is empty
            after its fallback chain
    """
    resolved: dict[str, Any] = {
        name: resolve_field(order, sources) for name, sources in FIELD_SOURCES.items()
    }

    missing = [name for name in REQUIRED_FIELDS if not resolved[name]]
    if missing:
        raise MissingRequiredFieldError(missing, order_ref=order.ref)

    return CustomerRecord(**resolved)
