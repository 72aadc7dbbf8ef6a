"""FastAPI app factory and server entry point.

Settings are built once at startup and handed to create_app(); handlers read
them from app.state. The lifespan owns the httpx client used for forwarding.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from invite_relay.config import Settings, get_settings
from invite_relay.forwarder import InviteClient
from invite_relay.webhooks.handlers import (
    ORDER_CREATED_PATH,
    TEST_WEBHOOK_PATH,
    register_webhook_routes,
)

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    logging.basicConfig(level=level.upper(), format=_LOG_FORMAT, force=True)


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the relay application.

    Args:
        settings: Relay configuration (defaults to environment settings)
        transport: Optional httpx transport for the invitation API client
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with httpx.AsyncClient(
            timeout=settings.invite_api_timeout, transport=transport
        ) as http:
            app.state.invite_client = InviteClient(settings.invite_api_url, http)
            if not settings.shopify_webhook_secret:
                logger.warning(
                    "SHOPIFY_WEBHOOK_SECRET not set: webhook signatures are %s",
                    "rejected" if settings.webhook_fail_closed else "NOT verified",
                )
            yield

    app = FastAPI(title="Invite Relay", lifespan=lifespan)
    app.state.settings = settings
    register_webhook_routes(app)
    return app


def main() -> None:
    """Run the relay under uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Webhook server running on port %d", settings.port)
    logger.info("Webhook URL: http://localhost:%d%s", settings.port, ORDER_CREATED_PATH)
    logger.info("Test URL: http://localhost:%d%s", settings.port, TEST_WEBHOOK_PATH)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
