# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student quiz attempts.

An attempt is ACTIVE while answers < questions, FINISHED once every
question has an answer and SCORED after the scorer returned a result.
"""

import logging

from quizroom.core.exceptions import ContractError, InvalidStateError
from quizroom.domains.identity.models import UserRole
from quizroom.domains.identity.service import IdentitySession
from quizroom.domains.quiz.models import AttemptState, require_role
from quizroom.services.quiz_api.client import QuizApiClient
from quizroom.services.quiz_api.schemas import QuizAttemptDetails, StudentQuizDetails, WeeklySummary

logger = logging.getLogger(__name__)


class StudentQuizAttempt:
    """One student's run through a quiz.

    Attributes:
        id: Attempt id assigned by the quiz API.
        quiz_name: Name of the quiz being attempted.
        final_score: Score set by submit(), None before.
    """

    def __init__(
        self,
        service: "StudentQuizService",
        attempt_id: str,
        quiz_name: str,
        questions: list[str],
    ) -> None:
        self._service = service
        self.id = attempt_id
        self.quiz_name = quiz_name
        self._questions = tuple(questions)
        self._answers: list[str] = []
        self.final_score: int | None = None

    @property
    def questions(self) -> list[str]:
        return list(self._questions)

    @property
    def answers(self) -> list[str]:
        return list(self._answers)

    @property
    def state(self) -> AttemptState:
        if self.final_score is not None:
            return AttemptState.SCORED
        if self.is_finished():
            return AttemptState.FINISHED
        return AttemptState.ACTIVE

    def is_finished(self) -> bool:
        """Check if every question has an answer."""
        return len(self._answers) == len(self._questions)

    def add_answer(self, answer: str) -> None:
        """Answer the current question.

        Ignored once every question is answered, so a repeated tap on the
        last question does not fail.
        """
        if self.is_finished():
            logger.debug("Ignoring answer to finished attempt %s", self.id)
            return
        self._answers.append(answer)

    @property
    def current_question_number(self) -> int:
        """1-based number of the question being answered.

        Stays on the last question once the attempt is finished.
        """
        if self.is_finished():
            return len(self._questions)
        return len(self._answers) + 1

    @property
    def current_question(self) -> str | None:
        """Question awaiting an answer, or None when finished."""
        if self.is_finished():
            return None
        return self._questions[len(self._answers)]

    async def submit(self) -> int:
        """Send the answers for scoring and record the score.

        Returns:
            The score returned by the scorer.

        Raises:
            InvalidStateError: If questions are unanswered or the attempt
                was already scored.
        """
        state = self.state
        if state == AttemptState.ACTIVE:
            raise InvalidStateError("Answer every question before submitting", state.value)
        if state == AttemptState.SCORED:
            raise InvalidStateError("Attempt has already been submitted", state.value)

        token = await self._service.session.get_authorization_token()
        res = await self._service.client.submit_quiz_attempt(token, self.id, list(self._answers))

        self.final_score = res.score
        logger.info("Submitted attempt: attempt=%s, score=%s", self.id, res.score)
        return res.score


class StudentQuizService:
    """Student-side quiz operations.

    Attributes:
        client: Quiz API client.
        session: Identity session supplying the identity and tokens.
    """

    def __init__(self, client: QuizApiClient, session: IdentitySession) -> None:
        self.client = client
        self.session = session

    async def _student_token(self, action: str) -> str:
        require_role(self.session, UserRole.STUDENT, action)
        return await self.session.get_authorization_token()

    async def create_attempt(self, quiz_id: str) -> StudentQuizAttempt:
        """Open an attempt with no answers.

        Raises:
            ContractError: If the quiz has no questions.
        """
        token = await self._student_token("attempt quizzes")
        res = await self.client.create_quiz_attempt(token, quiz_id)
        if not res.questions:
            raise ContractError("Quiz attempt has no questions", details={"quiz_id": quiz_id})

        logger.info("Created attempt: attempt=%s, quiz=%s", res.quiz_attempt_id, quiz_id)
        return StudentQuizAttempt(self, res.quiz_attempt_id, res.quiz_name, res.questions)

    async def get_attempt_by_id(self, attempt_id: str) -> QuizAttemptDetails:
        token = await self._student_token("view attempts")
        res = await self.client.get_quiz_attempt(token, attempt_id)
        return res.quiz_attempt

    async def list_quizzes_for_course(self) -> list[StudentQuizDetails]:
        token = await self._student_token("list course quizzes")
        res = await self.client.get_course_quizzes_for_student(token)
        return res.quizzes

    async def weekly_summary(self) -> WeeklySummary:
        token = await self._student_token("view a weekly summary")
        res = await self.client.get_weekly_summary(token)
        return res.weekly_summary
