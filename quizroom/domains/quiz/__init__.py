# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz domain: instructor quizzes, student attempts and practice quizzes."""

from quizroom.domains.quiz.instructor import InstructorQuiz, InstructorQuizService
from quizroom.domains.quiz.models import AttemptState, QuizState
from quizroom.domains.quiz.practice import PracticeQuiz, PracticeQuizService
from quizroom.domains.quiz.student import StudentQuizAttempt, StudentQuizService

__all__ = [
    "AttemptState",
    "QuizState",
    "InstructorQuiz",
    "InstructorQuizService",
    "StudentQuizAttempt",
    "StudentQuizService",
    "PracticeQuiz",
    "PracticeQuizService",
]
