# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course membership service.

This module provides the CourseMembership class for:
- Course creation by instructors
- Course joining by students
- Course lookup by id or instructor name
- Rebuilding the instructor name index from the user record

A course change touches up to three records (course, user, instructor
index) with no transaction across them. Every write replaces a whole
record and is retried on transient failures, so re-running an operation
converges. Course creation writes the instructor index first; a retry
after a partial failure picks up the course id recorded there instead of
minting a new one. The session only changes once all writes have landed.
"""

import logging
from uuid import uuid4

from quizroom.core.exceptions import ConflictError, NotFoundError, ValidationError
from quizroom.domains.course.models import Course, EducationLevel
from quizroom.domains.identity.backend import (
    RecordStore,
    course_path,
    instructor_index_path,
    write_record,
)
from quizroom.domains.identity.models import Identity, InstructorNameIndex, UserRole
from quizroom.domains.identity.service import IdentitySession

logger = logging.getLogger(__name__)


class CourseMembership:
    """Creates, joins and looks up courses.

    Attributes:
        session: Identity session, the only writer of identity state.
    """

    def __init__(self, session: IdentitySession) -> None:
        """Initialize course membership.

        Args:
            session: Identity session used for record access and the
                identity write path.
        """
        self.session = session

    @property
    def records(self) -> RecordStore:
        return self.session.records

    async def create_course(
        self,
        identity: Identity,
        name: str,
        education_level: EducationLevel,
        description: str,
    ) -> Course:
        """Create a course owned by an instructor.

        Args:
            identity: Creating instructor.
            name: Course name.
            education_level: Course level; NONE is rejected.
            description: Course description.

        Returns:
            The stored course.

        Raises:
            ValidationError: If the identity is not an instructor or a field
                is empty.
            ConflictError: If the instructor already owns a course.
        """
        if identity.role != UserRole.INSTRUCTOR:
            raise ValidationError("You do not have the authorization level to create a class")
        if not name or not description or education_level == EducationLevel.NONE:
            raise ValidationError("Course name, description and education level must not be empty")
        if identity.has_course:
            raise ConflictError("User already enrolled in course")

        course_id = await self._pending_course_id(identity)
        student_ids: list[str] = []
        if course_id is None:
            course_id = str(uuid4())
        else:
            existing = await self.records.get(course_path(course_id))
            if existing is not None:
                student_ids = Course.model_validate(existing).student_ids
            logger.info("Resuming course creation: course=%s, instructor=%s", course_id, identity.id)

        course = Course(
            id=course_id,
            instructor_id=identity.id,
            name=name,
            education_level=education_level,
            description=description,
            student_ids=student_ids,
        )

        await self.session.write_instructor_index(identity.display_name, identity.id, course.id)
        await write_record(
            self.records, course_path(course.id), course.to_record(), self.session.write_retries
        )
        logger.info("Course record written: course=%s, instructor=%s", course.id, identity.id)

        await self.session.assign_course(identity, course.id)

        logger.info("Created course: course=%s, name=%s", course.id, name)
        return course

    async def _pending_course_id(self, identity: Identity) -> str | None:
        """Course id left in the index by an earlier, interrupted create."""
        data = await self.records.get(instructor_index_path(identity.display_name))
        if data is None:
            return None
        index = InstructorNameIndex.model_validate(data)
        if index.user_id != identity.id or not index.course_id:
            return None
        return index.course_id

    async def join_course(self, identity: Identity, course: Course) -> Course:
        """Enroll a student in a course.

        The course is re-read before the append so the freshest membership
        list is written back. The student's id is added at most once.

        Args:
            identity: Joining student.
            course: Course to join.

        Returns:
            The stored course with the student appended.

        Raises:
            ConflictError: If the identity already belongs to a course.
            ValidationError: If the identity is not a student.
            NotFoundError: If the course no longer exists.
        """
        if identity.has_course:
            raise ConflictError("User already enrolled in course")
        if identity.role != UserRole.STUDENT:
            raise ValidationError("Only students can join a course")

        latest = await self.get_course(course.id)
        if identity.id not in latest.student_ids:
            latest = latest.model_copy(update={"student_ids": [*latest.student_ids, identity.id]})

        await write_record(
            self.records, course_path(latest.id), latest.to_record(), self.session.write_retries
        )
        await self.session.assign_course(identity, latest.id)

        logger.info("Student joined course: student=%s, course=%s", identity.id, latest.id)
        return latest

    async def get_course(self, course_id: str) -> Course:
        """Read a course record.

        Raises:
            NotFoundError: If no such course exists.
        """
        data = await self.records.get(course_path(course_id))
        if data is None:
            raise NotFoundError("Course details not found", {"course_id": course_id})
        return Course.model_validate(data)

    async def find_course_by_instructor_name(self, name: str) -> Course:
        """Look up a course through its instructor's display name.

        Raises:
            ValidationError: If name is empty.
            NotFoundError: If no index entry or course exists.
        """
        if not name:
            raise ValidationError("No instructor name specified!")

        data = await self.records.get(instructor_index_path(name))
        if data is None:
            raise NotFoundError("Course details not found", {"instructor": name})

        index = InstructorNameIndex.model_validate(data)
        if not index.course_id:
            raise NotFoundError("Course details not found", {"instructor": name})
        return await self.get_course(index.course_id)

    async def repair_instructor_index(self, identity: Identity) -> InstructorNameIndex:
        """Rewrite the instructor name index from the user record.

        The user record is the source of truth; running this again after
        it succeeded changes nothing.

        Raises:
            ValidationError: If the identity is not an instructor.
            NotFoundError: If the user record is missing.
        """
        if identity.role != UserRole.INSTRUCTOR:
            raise ValidationError("Only instructors have a name index entry")

        record = await self.session.load_user_record(identity.id)
        if record is None:
            raise NotFoundError("User details not found", {"user_id": identity.id})

        await self.session.write_instructor_index(record.name, identity.id, record.course_id)
        logger.info("Rebuilt instructor index: instructor=%s, course=%s", identity.id, record.course_id)
        return InstructorNameIndex(user_id=identity.id, course_id=record.course_id)
