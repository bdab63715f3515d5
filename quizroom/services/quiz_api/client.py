# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz API client.

This module provides an async HTTP client for the quiz service, which
generates quiz questions, scores student attempts and runs practice quizzes.

The client is stateless: it never stores a token. Callers fetch a fresh
identity token right before each call and pass it in, so refreshed tokens
are always honored. Every failure leaves this module already mapped:
- transport failures (connection, DNS, timeout) -> NetworkError
- non-2xx responses with a {status, error} body -> ApiError
- 2xx responses that do not decode -> ContractError

Example:
    client = QuizApiClient(base_url="https://kotlin-khaos-api.maximoguk.com")

    res = await client.create_quiz(
        token,
        InstructorQuizCreateOptions(name="Loops", question_limit=5, prompt="for loops"),
    )
    print(res.first_question)
"""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from quizroom.core.config.settings import QuizApiSettings
from quizroom.core.exceptions import ApiError, ContractError, NetworkError
from quizroom.services.quiz_api.schemas import (
    ApiErrorBody,
    EditQuestionsRequest,
    EmptyResponse,
    InstructorQuizCreateOptions,
    InstructorQuizCreateResponse,
    InstructorQuizzesForCourseResponse,
    NextQuestionResponse,
    PracticeQuizAnswerRequest,
    PracticeQuizAnswerResponse,
    PracticeQuizContinueResponse,
    PracticeQuizGetByIdResponse,
    PracticeQuizStartResponse,
    ProfilePictureHashResponse,
    StudentQuizAttemptCreateResponse,
    StudentQuizAttemptResponse,
    StudentQuizzesForCourseResponse,
    StudentWeeklySummaryResponse,
    SubmitAttemptRequest,
    SubmitAttemptResponse,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class QuizApiClient:
    """Async HTTP client for the quiz API.

    Each request opens its own httpx.AsyncClient inside an ``async with``
    block, so connections are released on success, on error and when the
    calling task is cancelled. Instances hold configuration only and are
    safe to share.

    Attributes:
        base_url: Base URL of the quiz API.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the quiz API client.

        Args:
            base_url: Base URL of the quiz API.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used to stub the network).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: QuizApiSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "QuizApiClient":
        """Build a client from quiz API settings."""
        return cls(settings.base_url, timeout=settings.timeout, transport=transport)

    def _get_headers(self, token: str | None) -> dict[str, str]:
        """Get headers for API requests.

        Args:
            token: Bearer token, or None for unauthenticated calls.

        Returns:
            Dictionary of HTTP headers.
        """
        headers = {"Accept": "application/json"}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"
            headers["Content-Type"] = "application/json"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        response_model: type[ResponseT],
        *,
        token: str | None = None,
        body: BaseModel | dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> ResponseT:
        """Send a request and decode the response.

        Args:
            method: HTTP method.
            path: Path relative to the base URL.
            response_model: Model the 2xx body must decode into.
            token: Bearer token to attach.
            body: Optional JSON body.
            params: Optional query parameters.

        Returns:
            The decoded response body.

        Raises:
            NetworkError: If the service cannot be reached or times out.
            ApiError: If the service answers with a non-2xx status.
            ContractError: If a 2xx body does not match response_model.
        """
        payload = body.model_dump(by_alias=True) if isinstance(body, BaseModel) else body

        logger.debug("Quiz API request: %s %s", method, path)

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    path,
                    json=payload,
                    params=params,
                    headers=self._get_headers(token),
                )
        except httpx.TransportError as e:
            logger.warning("Quiz API unreachable: %s %s (%s)", method, path, type(e).__name__)
            raise NetworkError(
                details={"error_type": type(e).__name__, "path": path},
            ) from e

        return self._parse_response(response, response_model, path)

    def _parse_response(
        self,
        response: httpx.Response,
        response_model: type[ResponseT],
        path: str,
    ) -> ResponseT:
        """Decode a response or raise the mapped error."""
        if response.is_success:
            try:
                data = response.json() if response.content else {}
                return response_model.model_validate(data)
            except (ValueError, PydanticValidationError) as e:
                logger.error(
                    "Quiz API response did not match %s for %s",
                    response_model.__name__,
                    path,
                )
                raise ContractError(
                    f"Unexpected response from {path}",
                    response_body=response.text,
                    details={"expected": response_model.__name__},
                ) from e

        try:
            error_body = ApiErrorBody.model_validate(response.json())
            status_code, error = error_body.status, error_body.error
        except (ValueError, PydanticValidationError):
            status_code, error = response.status_code, response.text or response.reason_phrase

        logger.warning("Quiz API error on %s: [%s] %s", path, status_code, error)
        raise ApiError(status_code, error)

    # =========================================================================
    # Instructor quizzes
    # =========================================================================

    async def create_quiz(
        self,
        token: str,
        options: InstructorQuizCreateOptions,
    ) -> InstructorQuizCreateResponse:
        """Create a quiz and generate its first question."""
        return await self.request(
            "POST",
            "/instructor/quizs",
            InstructorQuizCreateResponse,
            token=token,
            body={"options": options.model_dump(by_alias=True)},
        )

    async def get_course_quizzes_for_instructor(
        self,
        token: str,
    ) -> InstructorQuizzesForCourseResponse:
        return await self.request(
            "GET", "/instructor/quizs", InstructorQuizzesForCourseResponse, token=token
        )

    async def next_question(self, token: str, quiz_id: str) -> NextQuestionResponse:
        """Generate and append the next question of a quiz."""
        return await self.request(
            "POST",
            f"/instructor/quizs/{quiz_id}/next-question",
            NextQuestionResponse,
            token=token,
        )

    async def edit_questions(
        self,
        token: str,
        quiz_id: str,
        questions: list[str],
    ) -> EmptyResponse:
        """Replace the whole question list of a quiz."""
        return await self.request(
            "PUT",
            f"/instructor/quizs/{quiz_id}/questions",
            EmptyResponse,
            token=token,
            body=EditQuestionsRequest(questions=questions),
        )

    async def start_quiz(self, token: str, quiz_id: str) -> EmptyResponse:
        return await self.request(
            "POST", f"/instructor/quizs/{quiz_id}/start", EmptyResponse, token=token
        )

    async def finish_quiz(self, token: str, quiz_id: str) -> EmptyResponse:
        return await self.request(
            "POST", f"/instructor/quizs/{quiz_id}/finish", EmptyResponse, token=token
        )

    # =========================================================================
    # Student quizzes and attempts
    # =========================================================================

    async def get_course_quizzes_for_student(
        self,
        token: str,
    ) -> StudentQuizzesForCourseResponse:
        return await self.request(
            "GET", "/student/quizs", StudentQuizzesForCourseResponse, token=token
        )

    async def create_quiz_attempt(
        self,
        token: str,
        quiz_id: str,
    ) -> StudentQuizAttemptCreateResponse:
        """Open a new attempt and fetch its question set."""
        return await self.request(
            "POST",
            f"/student/quizs/{quiz_id}/attempts",
            StudentQuizAttemptCreateResponse,
            token=token,
        )

    async def get_quiz_attempt(
        self,
        token: str,
        quiz_attempt_id: str,
    ) -> StudentQuizAttemptResponse:
        return await self.request(
            "GET",
            f"/student/quiz-attempts/{quiz_attempt_id}",
            StudentQuizAttemptResponse,
            token=token,
        )

    async def submit_quiz_attempt(
        self,
        token: str,
        quiz_attempt_id: str,
        answers: list[str],
    ) -> SubmitAttemptResponse:
        """Send all answers of an attempt for scoring."""
        return await self.request(
            "POST",
            f"/student/quiz-attempts/{quiz_attempt_id}/submit",
            SubmitAttemptResponse,
            token=token,
            body=SubmitAttemptRequest(answers=answers),
        )

    async def get_weekly_summary(self, token: str) -> StudentWeeklySummaryResponse:
        return await self.request(
            "GET", "/student/weekly-summary", StudentWeeklySummaryResponse, token=token
        )

    # =========================================================================
    # Practice quizzes
    # =========================================================================

    async def start_practice_quiz(self, token: str, prompt: str) -> PracticeQuizStartResponse:
        return await self.request(
            "POST",
            "/practice-quizs",
            PracticeQuizStartResponse,
            token=token,
            params={"prompt": prompt},
        )

    async def get_practice_quiz(
        self,
        token: str,
        practice_quiz_id: str,
    ) -> PracticeQuizGetByIdResponse:
        return await self.request(
            "GET",
            f"/practice-quizs/{practice_quiz_id}",
            PracticeQuizGetByIdResponse,
            token=token,
        )

    async def answer_practice_quiz(
        self,
        token: str,
        practice_quiz_id: str,
        answer: str,
    ) -> PracticeQuizAnswerResponse:
        return await self.request(
            "POST",
            f"/practice-quizs/{practice_quiz_id}",
            PracticeQuizAnswerResponse,
            token=token,
            body=PracticeQuizAnswerRequest(answer=answer),
        )

    async def continue_practice_quiz(
        self,
        token: str,
        practice_quiz_id: str,
    ) -> PracticeQuizContinueResponse:
        """Get the next problem, or the score when no problems are left."""
        return await self.request(
            "POST",
            f"/practice-quizs/{practice_quiz_id}/continue",
            PracticeQuizContinueResponse,
            token=token,
        )

    # =========================================================================
    # User profile
    # =========================================================================

    async def get_profile_picture_hash(self, token: str) -> ProfilePictureHashResponse:
        return await self.request(
            "GET", "/user/profile-picture", ProfilePictureHashResponse, token=token
        )
