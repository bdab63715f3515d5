# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for service wiring."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from quizroom.bootstrap import close_services, create_services
from quizroom.core.config.settings import Settings
from quizroom.domains.identity.models import UserRole
from quizroom.domains.identity.session_sink import InMemorySessionSink, RedisSessionSink

SIGN_IN_BODY = {
    "localId": "uid-1",
    "email": "ben@example.com",
    "idToken": "id-1",
    "refreshToken": "refresh-1",
    "expiresIn": "3600",
}


class TestCreateServices:
    """Tests for create_services."""

    @pytest.mark.asyncio
    async def test_memory_sink(self) -> None:
        """Test the in-memory sink is the default."""
        services = await create_services(Settings())

        assert isinstance(services.sink, InMemorySessionSink)
        assert services.redis is None
        assert services.courses.session is services.identity
        assert services.student_quizzes.session is services.identity

        await close_services(services)

    @pytest.mark.asyncio
    async def test_redis_sink(self) -> None:
        """Test the Redis sink connects and is closed again."""
        with patch("quizroom.bootstrap.RedisClient") as client_cls:
            client = client_cls.return_value
            client.connect = AsyncMock()
            client.close = AsyncMock()

            services = await create_services(Settings(session_sink="redis"))

            assert isinstance(services.sink, RedisSessionSink)
            client.connect.assert_awaited_once()

            await close_services(services)
            client.close.assert_awaited_once()
            assert services.redis is None

    @pytest.mark.asyncio
    async def test_login_end_to_end(self) -> None:
        """Test a login flows through the Firebase adapters."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/accounts:signInWithPassword"):
                return httpx.Response(200, json=SIGN_IN_BODY)
            if request.url.path == "/users/uid-1.json":
                return httpx.Response(200, json={"courseId": "c1", "name": "Ben", "type": "STUDENT"})
            return httpx.Response(404, json={"error": "unexpected"})

        services = await create_services(Settings(), transport=httpx.MockTransport(handler))

        identity = await services.identity.login("ben@example.com", "secret")

        assert identity.role == UserRole.STUDENT
        assert identity.course_id == "c1"
        assert (await services.sink.load()).course_id == "c1"

        await services.identity.logout()
        await close_services(services)
