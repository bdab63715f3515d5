# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session sinks keep an external copy of the current session in sync.

IdentitySession and CourseMembership publish {courseId, role} after every
state-changing success and clear it on logout. Screens that start before
the identity backend has answered read the last-known value with load().
"""

import logging
from abc import ABC, abstractmethod

from pydantic import ValidationError as PydanticValidationError

from quizroom.core.exceptions import NetworkError
from quizroom.domains.identity.models import StoredSession
from quizroom.infrastructure.cache.redis_client import RedisClient, RedisError

logger = logging.getLogger(__name__)


class SessionSink(ABC):
    """Destination for the last-known session."""

    @abstractmethod
    async def publish(self, session: StoredSession) -> None:
        """Replace the stored session."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove the stored session. Safe to call when already empty."""

    @abstractmethod
    async def load(self) -> StoredSession | None:
        """Return the stored session, if any."""


class InMemorySessionSink(SessionSink):
    """Keeps the session in process memory."""

    def __init__(self) -> None:
        self._session: StoredSession | None = None

    @property
    def session(self) -> StoredSession | None:
        return self._session

    async def publish(self, session: StoredSession) -> None:
        self._session = session.model_copy()

    async def clear(self) -> None:
        self._session = None

    async def load(self) -> StoredSession | None:
        return self._session


class RedisSessionSink(SessionSink):
    """Stores the session as JSON under a single Redis key.

    Redis failures surface as NetworkError so callers handle them like any
    other unreachable backend.
    """

    def __init__(self, client: RedisClient, key: str = "quizroom:session") -> None:
        """Initialize the sink.

        Args:
            client: Connected Redis client.
            key: Key holding the session.
        """
        self._client = client
        self._key = key

    async def publish(self, session: StoredSession) -> None:
        try:
            await self._client.set(self._key, session.model_dump(mode="json", by_alias=True))
        except RedisError as e:
            logger.warning("Failed to publish session: %s", e)
            raise NetworkError("Session cache unavailable", details={"key": self._key}) from e

    async def clear(self) -> None:
        try:
            await self._client.delete(self._key)
        except RedisError as e:
            logger.warning("Failed to clear session: %s", e)
            raise NetworkError("Session cache unavailable", details={"key": self._key}) from e

    async def load(self) -> StoredSession | None:
        try:
            data = await self._client.get(self._key)
        except RedisError as e:
            logger.warning("Failed to load session: %s", e)
            raise NetworkError("Session cache unavailable", details={"key": self._key}) from e

        if not isinstance(data, dict):
            return None
        try:
            return StoredSession.model_validate(data)
        except PydanticValidationError:
            # Written by an incompatible version; treat as no cached session
            logger.info("Discarding unreadable cached session under %s", self._key)
            return None
