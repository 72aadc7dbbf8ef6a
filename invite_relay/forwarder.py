"""Invitation API client.

Posts the extracted customer record to the downstream invite endpoint.
One attempt per webhook: any failure surfaces as a ForwardError and is
terminal for the request.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from invite_relay.customers import CustomerRecord
from invite_relay.exceptions import TransportFailureError, UpstreamRejectedError

logger = logging.getLogger(__name__)


class InviteClient:
    """Sends customer records to the invitation API over a shared AsyncClient."""

    def __init__(self, url: str, http: httpx.AsyncClient) -> None:
        self._url = url
        self._http = http

    async def forward(self, customer: CustomerRecord) -> Any:
        """POST the customer record and return the decoded response body.

        Raises:
            UpstreamRejectedError: the API answered with a non-2xx status
            TransportFailureError: the request failed before a response arrived
        """
        payload = customer.to_payload()
        logger.info("Sending to invite API: %s", payload)

        try:
            response = await self._http.post(
                self._url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.RequestError as e:
            logger.error("Invite API request failed (%s): %s", type(e).__name__, e)
            raise TransportFailureError(e) from e

        if not response.is_success:
            body = response.text
            logger.error(
                "Invite API rejected customer %s: HTTP %d - %s",
                customer.email,
                response.status_code,
                body,
            )
            raise UpstreamRejectedError(response.status_code, body)

        try:
            result = response.json()
        except ValueError:
            result = response.text
        logger.info("Invite API response: %s", result)
        return result
