# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity session service.

This module provides the IdentitySession class for:
- Login, registration and password reset
- Restoring the current identity from a stored credential
- Fetching a fresh authorization token for remote calls
- Logout

IdentitySession is the only writer of the Identity it hands out. Course
membership changes go through assign_course(), which persists the user
record and keeps the session sink in sync.
"""

import logging

from quizroom.core.exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    SessionExpiredError,
    ValidationError,
)
from quizroom.domains.identity.backend import (
    AuthBackend,
    RecordStore,
    instructor_index_path,
    user_path,
    write_record,
)
from quizroom.domains.identity.models import (
    Identity,
    InstructorNameIndex,
    StoredSession,
    UserRecord,
    UserRole,
)
from quizroom.domains.identity.session_sink import SessionSink
from quizroom.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)

NOT_LOGGED_IN = "User is not logged in!"


class IdentitySession:
    """Owns the authenticated identity of the running app.

    Operations are expected to be invoked one at a time; nothing here locks.

    Attributes:
        auth: Account authentication backend.
        records: Record store holding user and index records.
        sink: Destination for the last-known {courseId, role}.
        write_retries: Attempts per record write.
    """

    def __init__(
        self,
        auth: AuthBackend,
        records: RecordStore,
        sink: SessionSink,
        write_retries: int = 3,
    ) -> None:
        """Initialize the identity session.

        Args:
            auth: Account authentication backend.
            records: Record store holding user and index records.
            sink: Destination for the last-known {courseId, role}.
            write_retries: Attempts per record write.
        """
        self.auth = auth
        self.records = records
        self.sink = sink
        self.write_retries = write_retries
        self._identity: Identity | None = None

    @property
    def identity(self) -> Identity | None:
        """Last identity produced by login, register or current_identity()."""
        return self._identity

    def require_identity(self) -> Identity:
        """Return the current identity.

        Raises:
            AuthError: If no one is logged in.
        """
        if self._identity is None:
            raise AuthError(NOT_LOGGED_IN)
        return self._identity

    async def login(self, email: str, password: str) -> Identity:
        """Log in with email and password.

        Args:
            email: Account email.
            password: Account password.

        Returns:
            The composed identity.

        Raises:
            ValidationError: If email or password is empty.
            AuthError: If the credentials are rejected, the backend fails
                internally, or the user record is missing.
            NetworkError: If the backend cannot be reached.
        """
        if not email or not password:
            raise ValidationError("Email and password must not be empty")

        try:
            user = await self.auth.sign_in(email, password)
        except ApiError as e:
            logger.warning("Login failed with backend error: %s", e)
            raise AuthError("An error occurred when logging in") from e

        record = await self.load_user_record(user.uid)
        if record is None:
            # No half-logged-in state
            await self.auth.sign_out()
            raise AuthError("User details not found")

        identity = Identity(
            id=user.uid,
            course_id=record.course_id,
            display_name=record.name,
            role=record.role,
        )
        try:
            await self._activate(identity)
        except Exception:
            await self.auth.sign_out()
            raise
        logger.info("User logged in: user=%s, role=%s", identity.id, identity.role.value)
        return identity

    async def register(
        self,
        email: str,
        password: str,
        display_name: str,
        role: UserRole,
    ) -> Identity:
        """Create an account and its user record.

        Instructor names double as the public course lookup key, so they
        must be unique; student names are not checked.

        Args:
            email: Account email.
            password: Account password.
            display_name: Name shown to others.
            role: Student or Instructor.

        Returns:
            The new identity, with no course.

        Raises:
            ValidationError: If a field is empty, role is unset, or an
                instructor name contains a character reserved in record keys.
            ConflictError: If an instructor with this name already exists.
            AuthError: If the backend refuses the email or password.
            NetworkError: If the backend cannot be reached.
        """
        if not email or not password:
            raise ValidationError("Email and password must not be empty")
        if not display_name:
            raise ValidationError("Name must not be empty")
        if role == UserRole.NONE:
            raise ValidationError("Role must be student or instructor")

        if role == UserRole.INSTRUCTOR:
            existing = await self.records.get(instructor_index_path(display_name))
            if existing is not None:
                raise ConflictError("Name has been taken by another instructor")

        user = await self.auth.sign_up(email, password)

        identity = Identity(id=user.uid, course_id="", display_name=display_name, role=role)
        try:
            if role == UserRole.INSTRUCTOR:
                await self.write_instructor_index(display_name, user.uid, "")
            record = UserRecord(course_id="", name=display_name, role=role)
            await write_record(
                self.records,
                user_path(user.uid),
                record.model_dump(mode="json", by_alias=True),
                self.write_retries,
            )
            await self._activate(identity)
        except Exception:
            # Signed up but unusable without its records
            logger.warning("Registration incomplete, signing out: user=%s", user.uid)
            await self.auth.sign_out()
            raise

        logger.info("User registered: user=%s, role=%s", identity.id, role.value)
        return identity

    async def send_password_reset(self, email: str) -> None:
        """Ask the backend to email a password reset link.

        Raises:
            ValidationError: If email is empty.
        """
        if not email:
            raise ValidationError("Email must not be empty")
        await self.auth.send_password_reset(email)

    async def current_identity(self) -> Identity | None:
        """Restore the identity of the stored credential.

        Returns:
            The identity, or None if nobody is signed in or the stored
            credential is no longer valid.

        Raises:
            AuthError: If the account exists but has no user record.
            NetworkError: If the backend cannot be reached.
        """
        if self.auth.current_user() is None:
            self._identity = None
            return None

        try:
            user = await self.auth.reload()
        except SessionExpiredError as e:
            logger.info("Stored session is no longer valid: %s", e.message)
            self._identity = None
            return None

        record = await self.load_user_record(user.uid)
        if record is None:
            raise AuthError("User details not found")

        self._identity = Identity(
            id=user.uid,
            course_id=record.course_id,
            display_name=record.name,
            role=record.role,
        )
        bind_context(user_id=user.uid)
        return self._identity

    async def get_authorization_token(self) -> str:
        """Return a bearer token valid as of this call.

        Raises:
            AuthError: If nobody is signed in.
        """
        if self.auth.current_user() is None:
            raise AuthError(NOT_LOGGED_IN)
        return await self.auth.get_id_token()

    async def logout(self) -> None:
        """Sign out and clear the cached session. Idempotent."""
        await self.auth.sign_out()
        self._identity = None
        await self.sink.clear()
        clear_context()

    # =========================================================================
    # Write path used by course membership
    # =========================================================================

    async def load_user_record(self, user_id: str) -> UserRecord | None:
        data = await self.records.get(user_path(user_id))
        if data is None:
            return None
        return UserRecord.model_validate(data)

    async def assign_course(self, identity: Identity, course_id: str) -> Identity:
        """Persist a course membership and update the identity.

        The user record is written first, then the session sink. The
        identity only changes once both have succeeded.

        Args:
            identity: Identity being enrolled.
            course_id: Course the identity now belongs to.

        Returns:
            The updated identity.
        """
        record = UserRecord(course_id=course_id, name=identity.display_name, role=identity.role)
        await write_record(
            self.records,
            user_path(identity.id),
            record.model_dump(mode="json", by_alias=True),
            self.write_retries,
        )

        await self.sink.publish(StoredSession(course_id=course_id, role=identity.role))

        identity._assign_course(course_id)
        if self._identity is not None and self._identity is not identity:
            if self._identity.id == identity.id:
                self._identity._assign_course(course_id)
        return identity

    async def write_instructor_index(self, name: str, user_id: str, course_id: str) -> None:
        index = InstructorNameIndex(user_id=user_id, course_id=course_id)
        await write_record(
            self.records,
            instructor_index_path(name),
            index.model_dump(mode="json", by_alias=True),
            self.write_retries,
        )

    async def _activate(self, identity: Identity) -> None:
        await self.sink.publish(StoredSession(course_id=identity.course_id, role=identity.role))
        self._identity = identity
        bind_context(user_id=identity.id)
