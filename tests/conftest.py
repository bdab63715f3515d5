# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides in-memory stand-ins for the identity and record
backends plus fixtures for signed-in instructors and students.
"""

import copy
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio

from quizroom.core.exceptions import AuthError, SessionExpiredError
from quizroom.domains.identity.backend import AuthBackend, AuthUser, RecordStore
from quizroom.domains.identity.models import Identity, StoredSession, UserRole
from quizroom.domains.identity.service import IdentitySession
from quizroom.domains.identity.session_sink import InMemorySessionSink
from quizroom.services.quiz_api.client import QuizApiClient
from quizroom.utils.datetime import seconds_from_now


# =============================================================================
# Backend fakes
# =============================================================================


class FakeAuthBackend(AuthBackend):
    """Auth backend keeping accounts in a dict.

    Every get_id_token() call hands out a new token so tests can check that
    tokens are fetched per call.
    """

    def __init__(self) -> None:
        self.accounts: dict[str, tuple[str, str]] = {}
        self.user: AuthUser | None = None
        self.session_valid = True
        self.token_calls = 0
        self.sign_in_calls = 0
        self.sign_in_error: Exception | None = None
        self.reset_emails: list[str] = []

    def add_account(self, email: str, password: str, uid: str) -> None:
        self.accounts[email] = (password, uid)

    def _make_user(self, uid: str, email: str) -> AuthUser:
        return AuthUser(
            uid=uid,
            email=email,
            id_token=f"token-{uid}",
            refresh_token=f"refresh-{uid}",
            expires_at=seconds_from_now(3600),
        )

    async def sign_in(self, email: str, password: str) -> AuthUser:
        self.sign_in_calls += 1
        if self.sign_in_error is not None:
            raise self.sign_in_error
        if email not in self.accounts or self.accounts[email][0] != password:
            raise AuthError("Invalid password")
        self.user = self._make_user(self.accounts[email][1], email)
        return self.user

    async def sign_up(self, email: str, password: str) -> AuthUser:
        if email in self.accounts:
            raise AuthError("The email address is already in use by another account")
        uid = f"uid-{len(self.accounts) + 1}"
        self.accounts[email] = (password, uid)
        self.user = self._make_user(uid, email)
        return self.user

    async def send_password_reset(self, email: str) -> None:
        self.reset_emails.append(email)

    def current_user(self) -> AuthUser | None:
        return self.user

    async def reload(self) -> AuthUser:
        if self.user is None:
            raise AuthError("User is not logged in!")
        if not self.session_valid:
            self.user = None
            raise SessionExpiredError("Your session has expired, please log in again")
        return self.user

    async def get_id_token(self, force_refresh: bool = False) -> str:
        if self.user is None:
            raise AuthError("User is not logged in!")
        self.token_calls += 1
        return f"{self.user.id_token}-{self.token_calls}"

    async def sign_out(self) -> None:
        self.user = None


class InMemoryRecordStore(RecordStore):
    """Record store backed by a dict of path -> record.

    Queue exceptions in ``write_failures[path]`` to make the next writes to
    that path fail in order.
    """

    def __init__(self) -> None:
        self.data: dict[str, dict[str, Any]] = {}
        self.write_failures: dict[str, list[Exception]] = {}
        self.writes: list[str] = []

    async def get(self, path: str) -> dict[str, Any] | None:
        record = self.data.get(path)
        return copy.deepcopy(record) if record is not None else None

    async def set(self, path: str, record: dict[str, Any]) -> None:
        self.writes.append(path)
        failures = self.write_failures.get(path)
        if failures:
            raise failures.pop(0)
        self.data[path] = copy.deepcopy(record)


class FlakySessionSink(InMemorySessionSink):
    """In-memory sink whose next publishes can be made to fail.

    Queue exceptions in ``publish_failures``; each publish pops one.
    """

    def __init__(self) -> None:
        super().__init__()
        self.publish_failures: list[Exception] = []

    async def publish(self, session: StoredSession) -> None:
        if self.publish_failures:
            raise self.publish_failures.pop(0)
        await super().publish(session)


# =============================================================================
# Identity fixtures
# =============================================================================


@pytest.fixture
def auth() -> FakeAuthBackend:
    """Provide an empty fake auth backend."""
    return FakeAuthBackend()


@pytest.fixture
def records() -> InMemoryRecordStore:
    """Provide an empty record store."""
    return InMemoryRecordStore()


@pytest.fixture
def sink() -> FlakySessionSink:
    """Provide an in-memory session sink."""
    return FlakySessionSink()


@pytest.fixture
def identity_session(auth, records, sink) -> IdentitySession:
    """Provide an identity session over the fakes."""
    return IdentitySession(auth, records, sink, write_retries=3)


@pytest_asyncio.fixture
async def instructor(identity_session) -> Identity:
    """Register and sign in an instructor named Ana."""
    return await identity_session.register("ana@example.com", "secret", "Ana", UserRole.INSTRUCTOR)


@pytest_asyncio.fixture
async def student(identity_session) -> Identity:
    """Register and sign in a student named Ben."""
    return await identity_session.register("ben@example.com", "secret", "Ben", UserRole.STUDENT)


# =============================================================================
# Quiz API fixtures
# =============================================================================


@pytest.fixture
def mock_client() -> AsyncMock:
    """Provide a quiz API client mock with async endpoint methods."""
    return AsyncMock(spec=QuizApiClient)


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], QuizApiClient]:
    """Build a QuizApiClient whose requests go to a handler function."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> QuizApiClient:
        return QuizApiClient("https://quiz.test", transport=httpx.MockTransport(handler))

    return _make


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
