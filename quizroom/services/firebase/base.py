# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared HTTP plumbing for the Firebase REST adapters."""

import logging
from typing import Any

import httpx

from quizroom.core.exceptions import ContractError, NetworkError

logger = logging.getLogger(__name__)


class FirebaseRestClient:
    """Sends one request per httpx.AsyncClient and maps transport failures.

    Attributes:
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self._transport = transport

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, turning unreachable-backend failures into NetworkError."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                return await client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.warning("Firebase unreachable: %s %s (%s)", method, url, type(e).__name__)
            raise NetworkError(details={"error_type": type(e).__name__}) from e

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        """Decode a successful response body."""
        try:
            return response.json()
        except ValueError as e:
            raise ContractError(
                "Unexpected response from identity backend",
                response_body=response.text,
            ) from e
