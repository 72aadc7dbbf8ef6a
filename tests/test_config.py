"""Tests for environment-driven settings."""

from __future__ import annotations

import os
from unittest.mock import patch

from invite_relay.config import Settings

_CLEAN_ENV = {
    k: v
    for k, v in os.environ.items()
    if k
    not in {
        "SHOPIFY_WEBHOOK_SECRET",
        "WEBHOOK_FAIL_CLOSED",
        "PORT",
        "HOST",
        "INVITE_API_URL",
        "INVITE_API_TIMEOUT",
        "TEST_CUSTOMER_EMAIL",
        "LOG_LEVEL",
    }
}


class TestSettings:
    @patch.dict(os.environ, _CLEAN_ENV, clear=True)
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.shopify_webhook_secret is None
        assert s.webhook_fail_closed is False
        assert s.port == 3000
        assert s.invite_api_url == "https://husband.fly.dev/invite"

    @patch.dict(
        os.environ,
        {
            "SHOPIFY_WEBHOOK_SECRET": "shh",
            "PORT": "8080",
            "INVITE_API_URL": "https://invites.example/api",
            "WEBHOOK_FAIL_CLOSED": "true",
        },
    )
    def test_reads_environment(self):
        s = Settings(_env_file=None)
        assert s.shopify_webhook_secret == "shh"
        assert s.port == 8080
        assert s.invite_api_url == "https://invites.example/api"
        assert s.webhook_fail_closed is True

    @patch.dict(os.environ, {"SHOPIFY_WEBHOOK_SECRET": ""})
    def test_empty_secret_is_unset(self):
        assert Settings(_env_file=None).shopify_webhook_secret is None
