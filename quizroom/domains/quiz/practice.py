# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Practice quizzes.

A practice quiz is an open-ended exchange with the quiz API: the student
answers a problem, reads the feedback and continues until the service
returns a score instead of a new problem.
"""

import logging

from quizroom.core.exceptions import InvalidStateError, ValidationError
from quizroom.domains.identity.service import IdentitySession
from quizroom.services.quiz_api.client import QuizApiClient
from quizroom.services.quiz_api.schemas import PracticeQuizGetByIdResponse

logger = logging.getLogger(__name__)


class PracticeQuiz:
    """A running practice quiz.

    Attributes:
        id: Practice quiz id.
        problem: Problem currently shown.
        feedback: Feedback on the last answer.
        score: Final score, set once the quiz is over.
    """

    def __init__(self, service: "PracticeQuizService", practice_quiz_id: str, problem: str) -> None:
        self._service = service
        self.id = practice_quiz_id
        self.problem: str | None = problem
        self.feedback: str | None = None
        self.score: int | None = None

    @property
    def is_finished(self) -> bool:
        return self.score is not None

    async def answer(self, answer: str) -> str:
        """Answer the current problem and return the feedback."""
        if self.is_finished:
            raise InvalidStateError("Practice quiz is over", "finished")
        if not answer:
            raise ValidationError("Answer must not be empty")

        token = await self._service.session.get_authorization_token()
        res = await self._service.client.answer_practice_quiz(token, self.id, answer)

        self.feedback = res.feedback
        return res.feedback

    async def continue_quiz(self) -> str | None:
        """Move to the next problem.

        Returns:
            The next problem, or None when the quiz is over and score is set.
        """
        if self.is_finished:
            raise InvalidStateError("Practice quiz is over", "finished")

        token = await self._service.session.get_authorization_token()
        res = await self._service.client.continue_practice_quiz(token, self.id)

        self.feedback = None
        if res.score is not None:
            self.problem = None
            self.score = res.score
            logger.info("Practice quiz over: quiz=%s, score=%s", self.id, res.score)
            return None
        self.problem = res.problem
        return res.problem


class PracticeQuizService:
    """Starts and looks up practice quizzes."""

    def __init__(self, client: QuizApiClient, session: IdentitySession) -> None:
        self.client = client
        self.session = session

    async def start(self, prompt: str) -> PracticeQuiz:
        if not prompt:
            raise ValidationError("Prompt must not be empty")

        token = await self.session.get_authorization_token()
        res = await self.client.start_practice_quiz(token, prompt)

        logger.info("Started practice quiz: quiz=%s", res.practice_quiz_id)
        return PracticeQuiz(self, res.practice_quiz_id, res.problem)

    async def get(self, practice_quiz_id: str) -> PracticeQuizGetByIdResponse:
        token = await self.session.get_authorization_token()
        return await self.client.get_practice_quiz(token, practice_quiz_id)
