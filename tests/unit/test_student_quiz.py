# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for student quiz attempts."""

import pytest

from quizroom.core.exceptions import ContractError, InvalidStateError, NetworkError, ValidationError
from quizroom.domains.quiz.models import AttemptState
from quizroom.domains.quiz.student import StudentQuizService
from quizroom.services.quiz_api.schemas import (
    QuizAttemptDetails,
    StudentQuizAttemptCreateResponse,
    StudentQuizAttemptResponse,
    StudentQuizDetails,
    StudentQuizzesForCourseResponse,
    StudentWeeklySummaryResponse,
    SubmitAttemptResponse,
    WeeklySummary,
)

QUESTIONS = ["Q1", "Q2", "Q3"]


@pytest.fixture
def attempt_service(mock_client, identity_session) -> StudentQuizService:
    """Create the student quiz service with a mocked client."""
    mock_client.create_quiz_attempt.return_value = StudentQuizAttemptCreateResponse(
        quiz_attempt_id="a1", quiz_name="Loops", questions=QUESTIONS
    )
    mock_client.submit_quiz_attempt.return_value = SubmitAttemptResponse(score=87)
    return StudentQuizService(mock_client, identity_session)


class TestAttempt:
    """Tests for answering an attempt."""

    @pytest.mark.asyncio
    async def test_new_attempt(self, attempt_service, student) -> None:
        """Test a new attempt has no answers and starts at question 1."""
        attempt = await attempt_service.create_attempt("q1")

        assert attempt.answers == []
        assert attempt.current_question_number == 1
        assert attempt.current_question == "Q1"
        assert attempt.state == AttemptState.ACTIVE

    @pytest.mark.asyncio
    async def test_quiz_without_questions_is_refused(self, attempt_service, mock_client, student) -> None:
        """Test an empty question set never becomes an attempt."""
        mock_client.create_quiz_attempt.return_value = StudentQuizAttemptCreateResponse(
            quiz_attempt_id="a2", quiz_name="Empty", questions=[]
        )

        with pytest.raises(ContractError, match="no questions"):
            await attempt_service.create_attempt("q2")

        mock_client.submit_quiz_attempt.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_answer_every_question_then_submit(self, attempt_service, mock_client, student) -> None:
        """Test the full attempt flow including the ignored extra answer."""
        attempt = await attempt_service.create_attempt("q1")

        for i in range(len(QUESTIONS)):
            assert attempt.current_question == QUESTIONS[i]
            attempt.add_answer(f"A{i + 1}")

        assert attempt.is_finished()
        attempt.add_answer("extra")
        assert attempt.answers == ["A1", "A2", "A3"]

        score = await attempt.submit()

        assert score == 87
        assert attempt.final_score == 87
        assert attempt.state == AttemptState.SCORED
        assert mock_client.submit_quiz_attempt.await_args.args[1:] == ("a1", ["A1", "A2", "A3"])

    @pytest.mark.asyncio
    async def test_current_question_never_overruns(self, attempt_service, student) -> None:
        """Test the current question stays in range once finished."""
        attempt = await attempt_service.create_attempt("q1")
        for answer in ["A1", "A2", "A3"]:
            attempt.add_answer(answer)

        assert attempt.state == AttemptState.FINISHED
        assert attempt.current_question_number == len(QUESTIONS)
        assert attempt.current_question is None

    @pytest.mark.asyncio
    async def test_submit_before_finished(self, attempt_service, mock_client, student) -> None:
        """Test submitting with unanswered questions fails locally."""
        attempt = await attempt_service.create_attempt("q1")
        attempt.add_answer("A1")

        with pytest.raises(InvalidStateError):
            await attempt.submit()

        mock_client.submit_quiz_attempt.assert_not_awaited()
        assert attempt.final_score is None

    @pytest.mark.asyncio
    async def test_submit_twice(self, attempt_service, mock_client, student) -> None:
        """Test a scored attempt cannot be submitted again."""
        attempt = await attempt_service.create_attempt("q1")
        for answer in ["A1", "A2", "A3"]:
            attempt.add_answer(answer)
        await attempt.submit()

        with pytest.raises(InvalidStateError):
            await attempt.submit()

        assert mock_client.submit_quiz_attempt.await_count == 1

    @pytest.mark.asyncio
    async def test_failed_submit_keeps_finished(self, attempt_service, mock_client, student) -> None:
        """Test a failed submit can be retried."""
        attempt = await attempt_service.create_attempt("q1")
        for answer in ["A1", "A2", "A3"]:
            attempt.add_answer(answer)
        mock_client.submit_quiz_attempt.side_effect = [NetworkError(), SubmitAttemptResponse(score=50)]

        with pytest.raises(NetworkError):
            await attempt.submit()
        assert attempt.state == AttemptState.FINISHED

        assert await attempt.submit() == 50


class TestStudentReads:
    """Tests for the read paths."""

    @pytest.mark.asyncio
    async def test_instructors_cannot_attempt(self, attempt_service, mock_client, instructor) -> None:
        """Test attempts are for students only."""
        with pytest.raises(ValidationError):
            await attempt_service.create_attempt("q1")

        mock_client.create_quiz_attempt.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_attempt_by_id(self, attempt_service, mock_client, student) -> None:
        """Test a stored attempt is returned."""
        mock_client.get_quiz_attempt.return_value = StudentQuizAttemptResponse(
            quiz_attempt=QuizAttemptDetails(id="a1", name="Loops", answers=["A1"], score=70, submitted=True)
        )

        details = await attempt_service.get_attempt_by_id("a1")

        assert details.score == 70

    @pytest.mark.asyncio
    async def test_list_quizzes(self, attempt_service, mock_client, student) -> None:
        """Test the course quizzes are listed."""
        mock_client.get_course_quizzes_for_student.return_value = StudentQuizzesForCourseResponse(
            quizzes=[StudentQuizDetails(id="q1", name="Loops")]
        )

        quizzes = await attempt_service.list_quizzes_for_course()

        assert quizzes[0].name == "Loops"

    @pytest.mark.asyncio
    async def test_weekly_summary(self, attempt_service, mock_client, student) -> None:
        """Test the weekly summary is returned."""
        mock_client.get_weekly_summary.return_value = StudentWeeklySummaryResponse(
            weekly_summary=WeeklySummary(average_score=80.0, attempts=4)
        )

        summary = await attempt_service.weekly_summary()

        assert summary.attempts == 4
