# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Instructor quizzes.

An InstructorQuiz moves DRAFT -> RUNNING -> FINISHED. Questions are
generated one at a time by the quiz API and kept in call order. Every
transition is checked locally before the remote call, and local state only
changes after the call returned, so a failed or cancelled call leaves the
quiz as it was.
"""

import logging

from quizroom.core.exceptions import InvalidStateError, ValidationError
from quizroom.domains.identity.models import UserRole
from quizroom.domains.identity.service import IdentitySession
from quizroom.domains.quiz.models import QuizState, require_role
from quizroom.services.quiz_api.client import QuizApiClient
from quizroom.services.quiz_api.schemas import InstructorQuizCreateOptions, InstructorQuizDetails

logger = logging.getLogger(__name__)


class InstructorQuiz:
    """A quiz being authored or run by an instructor.

    Attributes:
        id: Quiz id assigned by the quiz API.
        name: Quiz name.
        question_limit: Maximum number of questions.
    """

    def __init__(
        self,
        service: "InstructorQuizService",
        quiz_id: str,
        name: str,
        question_limit: int,
        questions: list[str],
        state: QuizState = QuizState.DRAFT,
    ) -> None:
        self._service = service
        self.id = quiz_id
        self.name = name
        self.question_limit = question_limit
        self._questions = list(questions)
        self._state = state

    def __repr__(self) -> str:
        return (
            f"InstructorQuiz(id={self.id!r}, state={self._state.value}, "
            f"questions={len(self._questions)})"
        )

    @property
    def state(self) -> QuizState:
        return self._state

    @property
    def questions(self) -> list[str]:
        """Questions in order. Returns a copy."""
        return list(self._questions)

    async def append_question(self) -> str:
        """Generate the next question and append it.

        Returns:
            The new question.

        Raises:
            InvalidStateError: If the quiz is finished or already holds
                question_limit questions.
        """
        if self._state == QuizState.FINISHED:
            raise InvalidStateError("Cannot add questions to a finished quiz", self._state.value)
        if len(self._questions) >= self.question_limit:
            raise InvalidStateError(
                f"Quiz already has {self.question_limit} questions", self._state.value
            )

        token = await self._service.session.get_authorization_token()
        res = await self._service.client.next_question(token, self.id)

        self._questions.append(res.question)
        logger.debug("Appended question %d to quiz %s", len(self._questions), self.id)
        return res.question

    async def edit_questions(self, questions: list[str]) -> None:
        """Replace the whole question list. Draft only.

        Raises:
            InvalidStateError: If the quiz has been started.
            ValidationError: If more than question_limit questions are given.
        """
        if self._state != QuizState.DRAFT:
            raise InvalidStateError(
                "Questions can only be edited before the quiz starts", self._state.value
            )
        if len(questions) > self.question_limit:
            raise ValidationError(f"A quiz can have at most {self.question_limit} questions")

        new_questions = list(questions)
        token = await self._service.session.get_authorization_token()
        await self._service.client.edit_questions(token, self.id, new_questions)

        self._questions = new_questions

    async def start(self) -> None:
        """Publish the quiz to students.

        Raises:
            InvalidStateError: If the quiz is not a draft.
        """
        if self._state != QuizState.DRAFT:
            raise InvalidStateError("Only a draft quiz can be started", self._state.value)

        token = await self._service.session.get_authorization_token()
        await self._service.client.start_quiz(token, self.id)

        self._state = QuizState.RUNNING
        logger.info("Started quiz: quiz=%s", self.id)

    async def finish(self) -> None:
        """Close the quiz.

        Raises:
            InvalidStateError: If the quiz is not running.
        """
        if self._state != QuizState.RUNNING:
            raise InvalidStateError("Only a running quiz can be finished", self._state.value)

        token = await self._service.session.get_authorization_token()
        await self._service.client.finish_quiz(token, self.id)

        self._state = QuizState.FINISHED
        logger.info("Finished quiz: quiz=%s", self.id)


class InstructorQuizService:
    """Creates and lists an instructor's quizzes.

    Attributes:
        client: Quiz API client.
        session: Identity session supplying the identity and tokens.
    """

    def __init__(self, client: QuizApiClient, session: IdentitySession) -> None:
        self.client = client
        self.session = session

    async def create_quiz(self, name: str, question_limit: int, prompt: str) -> InstructorQuiz:
        """Create a draft quiz seeded with its first question.

        Args:
            name: Quiz name.
            question_limit: Maximum number of questions; must be positive.
            prompt: Topic the questions are generated from.

        Raises:
            ValidationError: If name or prompt is empty, question_limit is
                not positive, or the user is not an instructor.
        """
        if not name or not prompt:
            raise ValidationError("Name and prompt must not be empty")
        if question_limit < 1:
            raise ValidationError("Question limit must be a positive number")
        require_role(self.session, UserRole.INSTRUCTOR, "create quizzes")

        options = InstructorQuizCreateOptions(name=name, question_limit=question_limit, prompt=prompt)
        token = await self.session.get_authorization_token()
        res = await self.client.create_quiz(token, options)

        logger.info("Created quiz: quiz=%s, name=%s", res.quiz_id, name)
        return InstructorQuiz(self, res.quiz_id, name, question_limit, [res.first_question])

    async def list_quizzes_for_course(self) -> list[InstructorQuizDetails]:
        require_role(self.session, UserRole.INSTRUCTOR, "list course quizzes")
        token = await self.session.get_authorization_token()
        res = await self.client.get_course_quizzes_for_instructor(token)
        return res.quizzes

    async def finish_quiz(self, quiz_id: str) -> None:
        """Finish a quiz known only by id."""
        require_role(self.session, UserRole.INSTRUCTOR, "finish quizzes")
        token = await self.session.get_authorization_token()
        await self.client.finish_quiz(token, quiz_id)
        logger.info("Finished quiz: quiz=%s", quiz_id)
