"""Shared fixtures for the invite relay test suite."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from contextlib import contextmanager
from typing import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from invite_relay.config import Settings
from invite_relay.serve import create_app

SECRET = "abc"
INVITE_URL = "https://invite.test/invite"


def sign(body: bytes, secret: str = SECRET) -> str:
    """Compute a valid X-Shopify-Hmac-Sha256 value."""
    digest = hmac.new(secret.encode(), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


class InviteApiStub:
    """Stand-in for the invitation API behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.status_code = 200
        self.json_body: object = {"invited": True}
        self.text_body: str | None = None
        self.error: Exception | None = None
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.text_body is not None:
            return httpx.Response(self.status_code, text=self.text_body)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        shopify_webhook_secret=SECRET,
        invite_api_url=INVITE_URL,
        test_customer_email="qa@example.com",
        _env_file=None,
    )


@pytest.fixture()
def invite_api() -> InviteApiStub:
    return InviteApiStub()


@contextmanager
def relay_client(settings: Settings, invite_api: InviteApiStub) -> Iterator[TestClient]:
    """TestClient for an app whose invitation API is the given stub."""
    app = create_app(settings, transport=httpx.MockTransport(invite_api))
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture()
def client(settings: Settings, invite_api: InviteApiStub) -> Iterator[TestClient]:
    with relay_client(settings, invite_api) as c:
        yield c
