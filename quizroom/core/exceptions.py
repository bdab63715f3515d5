# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy shared by every Quizroom component.

Callers branch on these kinds only, never on backend exception types:
- AuthError: bad credentials, not logged in, rejected login/registration fields
- NetworkError: backend unreachable, DNS failure, timeout
- ApiError: remote service answered with a structured failure
- ValidationError: locally detected bad input or unauthorized role
- ConflictError: already enrolled, instructor name taken

Refinements keep their parent kind (SessionExpiredError is an AuthError,
NotFoundError an ApiError, InvalidStateError a ValidationError).

ContractError is deliberately outside the five kinds: a successful response
that does not decode into the expected shape is a programming error and is
not recoverable by the user.
"""


class QuizroomError(Exception):
    """Base exception for all Quizroom errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict | None = None):
        """Initialize Quizroom error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class AuthError(QuizroomError):
    """Authentication failure.

    Raised for rejected credentials, a missing session, or registration
    fields the identity backend refuses.
    """

    pass


class SessionExpiredError(AuthError):
    """The stored credential is invalid, disabled or expired."""

    pass


class NetworkError(QuizroomError):
    """A backend could not be reached (connection, DNS or timeout)."""

    def __init__(
        self,
        message: str = "Unable to reach the server. Check your connection and try again.",
        details: dict | None = None,
    ):
        super().__init__(message, details)


class ApiError(QuizroomError):
    """Structured failure returned by a remote service.

    Attributes:
        status_code: HTTP status code reported by the service.
        error: Error text from the response body.
    """

    def __init__(
        self,
        status_code: int,
        error: str,
        details: dict | None = None,
    ):
        """Initialize API error.

        Args:
            status_code: HTTP status code reported by the service.
            error: Error text from the response body.
            details: Optional dictionary with additional error context.
        """
        self.status_code = status_code
        self.error = error
        super().__init__(error, details)

    def __str__(self) -> str:
        """Return string representation with status code."""
        base = f"[{self.status_code}] {self.message}"
        if self.details:
            base = f"{base} - Details: {self.details}"
        return base


class NotFoundError(ApiError):
    """A record or index entry does not exist."""

    def __init__(self, error: str, details: dict | None = None):
        super().__init__(404, error, details)


class ValidationError(QuizroomError):
    """Bad input detected locally, before any remote call."""

    pass


class InvalidStateError(ValidationError):
    """The requested transition is not allowed in the current state.

    Attributes:
        state: Name of the state the object was in.
    """

    def __init__(self, message: str, state: str | None = None, details: dict | None = None):
        self.state = state
        super().__init__(message, details)

    def __str__(self) -> str:
        """Return string representation with the offending state."""
        if self.state:
            return f"{self.message} (state: {self.state})"
        return self.message


class ConflictError(QuizroomError):
    """The write would violate a uniqueness or membership rule."""

    pass


class ContractError(QuizroomError):
    """A successful response did not match the expected shape.

    Attributes:
        response_body: Raw body that failed to decode.
    """

    def __init__(self, message: str, response_body: str | None = None, details: dict | None = None):
        self.response_body = response_body
        super().__init__(message, details)
