# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request and response bodies of the quiz API.

Field names follow Python conventions; the camelCase names used on the
wire are declared as aliases. Unknown response fields are ignored so the
service can add data without breaking older clients.
"""

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    """Base model for quiz API payloads."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class EmptyResponse(ApiModel):
    """Acknowledgement body for calls that return no data."""

    pass


class ApiErrorBody(ApiModel):
    """Structured error body returned on non-2xx responses."""

    status: int
    error: str


# =============================================================================
# Instructor quizzes
# =============================================================================


class InstructorQuizCreateOptions(ApiModel):
    """Options for creating a new instructor quiz."""

    name: str
    question_limit: int = Field(alias="questionLimit")
    prompt: str


class InstructorQuizCreateResponse(ApiModel):
    quiz_id: str = Field(alias="quizId")
    first_question: str = Field(alias="firstQuestion")


class InstructorQuizDetails(ApiModel):
    """Quiz summary shown on the instructor's course listing."""

    id: str
    name: str
    started: bool = False
    finished: bool = False


class InstructorQuizzesForCourseResponse(ApiModel):
    quizzes: list[InstructorQuizDetails] = Field(default_factory=list, alias="quizs")


class NextQuestionResponse(ApiModel):
    question: str


class EditQuestionsRequest(ApiModel):
    questions: list[str]


# =============================================================================
# Student quizzes and attempts
# =============================================================================


class StudentQuizDetails(ApiModel):
    """Quiz summary shown on the student's course listing."""

    id: str
    name: str
    finished: bool = False
    attempt_id: str | None = Field(default=None, alias="attemptId")
    score: int | None = None


class StudentQuizzesForCourseResponse(ApiModel):
    quizzes: list[StudentQuizDetails] = Field(default_factory=list, alias="quizs")


class StudentQuizAttemptCreateResponse(ApiModel):
    quiz_attempt_id: str = Field(alias="quizAttemptId")
    quiz_name: str = Field(alias="quizName")
    questions: list[str]


class QuizAttemptDetails(ApiModel):
    """A stored attempt as returned by the attempt lookup."""

    id: str
    quiz_id: str | None = Field(default=None, alias="quizId")
    name: str
    questions: list[str] = Field(default_factory=list)
    answers: list[str] = Field(default_factory=list)
    feedback: list[str] = Field(default_factory=list)
    score: int | None = None
    submitted: bool = False


class StudentQuizAttemptResponse(ApiModel):
    quiz_attempt: QuizAttemptDetails = Field(alias="quizAttempt")


class SubmitAttemptRequest(ApiModel):
    answers: list[str]


class SubmitAttemptResponse(ApiModel):
    score: int


class DailyScore(ApiModel):
    """Average score for one day of the week."""

    day: str
    average_score: float | None = Field(default=None, alias="averageScore")
    attempts: int = 0


class WeeklySummary(ApiModel):
    """A student's quiz activity over the last seven days."""

    days: list[DailyScore] = Field(default_factory=list)
    average_score: float | None = Field(default=None, alias="averageScore")
    attempts: int = 0


class StudentWeeklySummaryResponse(ApiModel):
    weekly_summary: WeeklySummary = Field(alias="weeklySummary")


# =============================================================================
# Practice quizzes
# =============================================================================


class PracticeQuizStartResponse(ApiModel):
    problem: str
    practice_quiz_id: str = Field(alias="practiceQuizId")


class PracticeQuizGetByIdResponse(ApiModel):
    message: str | None = None
    score: int | None = None


class PracticeQuizAnswerRequest(ApiModel):
    answer: str


class PracticeQuizAnswerResponse(ApiModel):
    feedback: str


class PracticeQuizContinueResponse(ApiModel):
    """Either the next problem or, once the quiz is over, the score."""

    problem: str | None = None
    score: int | None = None


# =============================================================================
# User profile
# =============================================================================


class ProfilePictureHashResponse(ApiModel):
    sha256: str
