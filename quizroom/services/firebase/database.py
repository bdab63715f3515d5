# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Firebase Realtime Database adapter.

Records are read and replaced whole at ``{database_url}/{path}.json``,
authenticated with the current id token. A ``null`` body means the record
does not exist.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from quizroom.core.config.settings import FirebaseSettings
from quizroom.core.exceptions import ApiError, AuthError, ContractError
from quizroom.domains.identity.backend import AuthBackend, RecordStore
from quizroom.services.firebase.base import FirebaseRestClient

logger = logging.getLogger(__name__)


class FirebaseRecordStore(FirebaseRestClient, RecordStore):
    """RecordStore over the Realtime Database REST API.

    Attributes:
        database_url: Root URL of the database.
    """

    def __init__(
        self,
        settings: FirebaseSettings,
        auth: AuthBackend,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            settings: Firebase configuration.
            auth: Backend supplying the id token for each request.
            transport: Optional httpx transport (used to stub the network).
        """
        super().__init__(settings.timeout, transport)
        self.database_url = settings.database_url.rstrip("/")
        self._auth = auth

    def _url(self, path: str) -> str:
        return f"{self.database_url}/{quote(path.strip('/'), safe='/')}.json"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        # Signed-out reads (the instructor name check at registration) go unauthenticated
        params = {}
        if self._auth.current_user() is not None:
            params["auth"] = await self._auth.get_id_token()
        response = await self._send(method, self._url(path), params=params, **kwargs)
        if response.is_success:
            return response

        try:
            body = response.json()
            error = body.get("error", response.text) if isinstance(body, dict) else response.text
        except ValueError:
            error = response.text or response.reason_phrase

        logger.warning("Record %s %s failed: [%s] %s", method, path, response.status_code, error)
        if response.status_code in (401, 403):
            raise AuthError(str(error), {"path": path})
        raise ApiError(response.status_code, str(error), {"path": path})

    async def get(self, path: str) -> dict[str, Any] | None:
        response = await self._request("GET", path)
        data = self._json(response)
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ContractError(f"Record at {path} is not an object", response_body=response.text)
        return data

    async def set(self, path: str, record: dict[str, Any]) -> None:
        await self._request("PUT", path, json=record)
        logger.debug("Wrote record %s", path)
