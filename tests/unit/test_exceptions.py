# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the error taxonomy."""

from quizroom.core.exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    ContractError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    QuizroomError,
    SessionExpiredError,
    ValidationError,
)


class TestErrorKinds:
    """Tests for the kind hierarchy."""

    def test_refinements_keep_their_kind(self) -> None:
        """Test refined errors are caught by their parent kind."""
        assert issubclass(SessionExpiredError, AuthError)
        assert issubclass(NotFoundError, ApiError)
        assert issubclass(InvalidStateError, ValidationError)

    def test_every_kind_is_a_quizroom_error(self) -> None:
        """Test all kinds share the base class."""
        for kind in (AuthError, NetworkError, ApiError, ValidationError, ConflictError, ContractError):
            assert issubclass(kind, QuizroomError)

    def test_contract_error_is_not_an_api_error(self) -> None:
        """Test decode failures are distinguished from service failures."""
        assert not issubclass(ContractError, ApiError)


class TestErrorMessages:
    """Tests for messages and string forms."""

    def test_message_and_details(self) -> None:
        """Test message and details are kept."""
        err = ConflictError("User already enrolled in course", {"course_id": "c1"})

        assert err.message == "User already enrolled in course"
        assert err.details == {"course_id": "c1"}
        assert str(err) == "User already enrolled in course - Details: {'course_id': 'c1'}"

    def test_details_default_to_empty(self) -> None:
        """Test a missing details dict becomes empty."""
        err = AuthError("Invalid password")

        assert err.details == {}
        assert str(err) == "Invalid password"

    def test_network_error_default_message(self) -> None:
        """Test NetworkError has a readable default."""
        assert "connection" in NetworkError().message

    def test_api_error_carries_status(self) -> None:
        """Test ApiError keeps the status and error text."""
        err = ApiError(409, "Quiz already started")

        assert err.status_code == 409
        assert err.error == "Quiz already started"
        assert str(err) == "[409] Quiz already started"

    def test_not_found_is_404(self) -> None:
        """Test NotFoundError always reports 404."""
        err = NotFoundError("Course details not found")

        assert err.status_code == 404
        assert str(err) == "[404] Course details not found"

    def test_invalid_state_names_the_state(self) -> None:
        """Test InvalidStateError mentions the current state."""
        err = InvalidStateError("Only a draft quiz can be started", "running")

        assert err.state == "running"
        assert str(err) == "Only a draft quiz can be started (state: running)"

    def test_contract_error_keeps_body(self) -> None:
        """Test ContractError keeps the raw body."""
        err = ContractError("Unexpected response from /x", response_body="<html>")

        assert err.response_body == "<html>"
