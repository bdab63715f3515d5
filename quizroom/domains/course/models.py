# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course record models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EducationLevel(str, Enum):
    """Education level of a course. NONE is the unset sentinel."""

    UNIVERSITY = "UNIVERSITY"
    ELEMENTARY = "ELEMENTARY"
    HIGH_SCHOOL = "HIGH_SCHOOL"
    NONE = "NONE"


class Course(BaseModel):
    """Course record stored at courses/{courseId}.

    instructor_id never changes after creation and student_ids only grows.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    instructor_id: str = Field(alias="instructorId")
    name: str
    education_level: EducationLevel = Field(default=EducationLevel.NONE, alias="educationLevel")
    description: str = ""
    student_ids: list[str] = Field(default_factory=list, alias="studentIds")
    quiz_ids: list[str] = Field(default_factory=list, alias="quizIds")

    def to_record(self) -> dict:
        """Serialize with the store's field names."""
        return self.model_dump(mode="json", by_alias=True)
