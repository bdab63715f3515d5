# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz API service package.

This package provides the HTTP client for the quiz service, which creates
AI-generated quizzes, scores attempts and runs practice quizzes.

Example:
    >>> from quizroom.services.quiz_api import QuizApiClient
    >>> client = QuizApiClient.from_settings(get_settings().quiz_api)
"""

from quizroom.services.quiz_api.client import QuizApiClient
from quizroom.services.quiz_api.schemas import (
    InstructorQuizCreateOptions,
    InstructorQuizDetails,
    QuizAttemptDetails,
    StudentQuizDetails,
    WeeklySummary,
)

__all__ = [
    "QuizApiClient",
    "InstructorQuizCreateOptions",
    "InstructorQuizDetails",
    "QuizAttemptDetails",
    "StudentQuizDetails",
    "WeeklySummary",
]
