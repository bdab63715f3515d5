# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Data models for the identity domain.

This module defines:
- UserRole: the role chosen at registration
- Identity: the authenticated user as the rest of the app sees it
- UserRecord: the users/{userId} record in the backing store
- InstructorNameIndex: the instructorsNameCourseIndex/{name} record
- StoredSession: the {courseId, role} pair published to the session sink

Record models keep the store's camelCase field names as aliases.
"""

from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class UserRole(str, Enum):
    """User roles.

    NONE is the unset sentinel of records written without a role.
    """

    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"
    NONE = "NONE"


class Identity(BaseModel):
    """Authenticated user and current course membership.

    id, display_name and role never change once set. course_id is empty
    until the user creates or joins a course. It is read-only here and only
    IdentitySession.assign_course() moves it.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    role: UserRole

    _course_id: str = PrivateAttr(default="")

    def __init__(self, course_id: str = "", **data: Any) -> None:
        super().__init__(**data)
        self._course_id = course_id

    def __repr_args__(self) -> Iterator[tuple[str, Any]]:
        yield from super().__repr_args__()
        yield "course_id", self._course_id

    @property
    def course_id(self) -> str:
        return self._course_id

    def _assign_course(self, course_id: str) -> None:
        self._course_id = course_id

    @property
    def has_course(self) -> bool:
        """Check if the user belongs to a course."""
        return bool(self.course_id)


class UserRecord(BaseModel):
    """Course membership record stored at users/{userId}."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    course_id: str = Field(default="", alias="courseId")
    name: str = ""
    role: UserRole = Field(default=UserRole.NONE, alias="type")


class InstructorNameIndex(BaseModel):
    """Public lookup entry stored at instructorsNameCourseIndex/{name}."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(default="", alias="userId")
    course_id: str = Field(default="", alias="courseId")


class StoredSession(BaseModel):
    """Last-known session state kept outside the core."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    course_id: str = Field(default="", alias="courseId")
    role: UserRole = UserRole.NONE
