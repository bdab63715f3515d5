# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course domain: course creation, joining and lookup."""

from quizroom.domains.course.models import Course, EducationLevel
from quizroom.domains.course.service import CourseMembership

__all__ = [
    "Course",
    "CourseMembership",
    "EducationLevel",
]
