# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Ports to the identity and record backend.

The identity domain never reaches into a global SDK handle. It is given an
AuthBackend and a RecordStore, which keeps the services testable and lets
the concrete backend (Firebase over REST) be swapped.

Implementations must raise only errors from quizroom.core.exceptions:
- AuthError for rejected credentials or registration fields
- SessionExpiredError when the stored credential is no longer valid
- NetworkError when the backend cannot be reached
- ApiError for any other failure reported by the backend
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from quizroom.core.exceptions import ApiError, NetworkError, ValidationError

logger = logging.getLogger(__name__)

USERS_PATH = "users"
COURSES_PATH = "courses"
INSTRUCTOR_INDEX_PATH = "instructorsNameCourseIndex"

# Not allowed in a record key; "/" would address a child record
RESERVED_KEY_CHARS = frozenset(".#$[]/")


def user_path(user_id: str) -> str:
    return f"{USERS_PATH}/{user_id}"


def course_path(course_id: str) -> str:
    return f"{COURSES_PATH}/{course_id}"


def validate_record_key(key: str) -> str:
    """Return key unchanged if it can name a single record.

    Raises:
        ValidationError: If key contains a reserved character.
    """
    if RESERVED_KEY_CHARS.intersection(key):
        raise ValidationError(
            "Name must not contain any of . # $ [ ] /",
            {"name": key},
        )
    return key


def instructor_index_path(name: str) -> str:
    return f"{INSTRUCTOR_INDEX_PATH}/{validate_record_key(name)}"


class AuthUser(BaseModel):
    """Signed-in account as held by the auth backend.

    Attributes:
        uid: Opaque account id.
        email: Account email.
        id_token: Current bearer token.
        refresh_token: Token used to mint a new id_token.
        expires_at: When id_token stops being accepted.
    """

    uid: str
    email: str = ""
    id_token: str
    refresh_token: str = ""
    expires_at: datetime | None = None


class AuthBackend(ABC):
    """Account authentication and token management."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthUser:
        """Sign in with email and password and make it the current user."""

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> AuthUser:
        """Create an account and make it the current user."""

    @abstractmethod
    async def send_password_reset(self, email: str) -> None:
        """Enqueue a password reset email."""

    @abstractmethod
    def current_user(self) -> AuthUser | None:
        """Return the signed-in account, if any. No network call."""

    @abstractmethod
    async def reload(self) -> AuthUser:
        """Re-validate the current account against the backend.

        Raises:
            AuthError: If no account is signed in.
            SessionExpiredError: If the account or its token is no longer valid.
        """

    @abstractmethod
    async def get_id_token(self, force_refresh: bool = False) -> str:
        """Return a token valid as of this call, refreshing it if needed.

        Raises:
            AuthError: If no account is signed in.
        """

    @abstractmethod
    async def sign_out(self) -> None:
        """Forget the current account. Safe to call when signed out."""


class RecordStore(ABC):
    """Path-addressed record store with single-record reads and writes.

    No transactions span paths; the last writer wins.
    """

    @abstractmethod
    async def get(self, path: str) -> dict[str, Any] | None:
        """Read the record at path, or None if absent."""

    @abstractmethod
    async def set(self, path: str, record: dict[str, Any]) -> None:
        """Replace the record at path."""


async def write_record(
    records: RecordStore,
    path: str,
    record: dict[str, Any],
    retries: int = 3,
) -> None:
    """Replace a record, retrying transient failures.

    Every write replaces the whole record, so repeating one is harmless.
    Network failures and 5xx answers are retried up to ``retries`` attempts
    in total; anything else is raised on the first occurrence.

    Args:
        records: Store to write to.
        path: Record path.
        record: Full record body.
        retries: Maximum number of attempts.
    """
    for attempt in range(1, retries + 1):
        try:
            await records.set(path, record)
            return
        except (NetworkError, ApiError) as e:
            transient = isinstance(e, NetworkError) or e.status_code >= 500
            if not transient or attempt == retries:
                logger.error("Write to %s failed after %d attempt(s): %s", path, attempt, e)
                raise
            logger.warning("Write to %s failed (attempt %d/%d), retrying", path, attempt, retries)
