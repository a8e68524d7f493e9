# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student service.

This module provides the StudentService that handles:
- Enrolling a student in the admin's school
- Listing students, overall or per school
- Updating name, age and classroom
- Removing a student

A student's school never changes here; moving a student to another school
is the job of TransferCoordinator.

Example:
    >>> service = StudentService(store)
    >>> student = await service.create_student("Ada", 11, user, classroom_id=room_id)
    >>> students = await service.list_by_school(user.school_id, user)
"""

import logging
from typing import Any

from schoolhub.core.exceptions import ConflictError, NotFoundError, ValidationError
from schoolhub.domains.auth.gate import CurrentUser
from schoolhub.domains.scope import (
    ensure_school_access,
    ensure_school_admin,
    scoped_school_filter,
)
from schoolhub.infrastructure.store import (
    EntityKind,
    EntityNotFoundError,
    EntityStore,
    VersionConflictError,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "age", "classroom_id")
REQUIRED_FIELDS = ("name", "age")


class StudentService:
    """Service for managing students.

    Attributes:
        _store: Entity store.
    """

    def __init__(self, store: EntityStore) -> None:
        """Initialize the student service.

        Args:
            store: Entity store.
        """
        self._store = store

    async def create_student(
        self,
        name: str,
        age: int,
        requester: CurrentUser,
        school_id: str | None = None,
        classroom_id: str | None = None,
    ) -> dict[str, Any]:
        """Enroll a student.

        Args:
            name: Student name.
            age: Student age.
            requester: Authenticated school admin.
            school_id: Target school; defaults to the caller's school.
            classroom_id: Optional classroom of the same school.

        Returns:
            The created student document.

        Raises:
            AuthorizationError: If the caller is not the school's admin.
            NotFoundError: If the school does not exist.
            ValidationError: If the classroom is not part of the school.
        """
        own_school_id = ensure_school_admin(requester)
        target_school_id = school_id or own_school_id
        ensure_school_access(requester, target_school_id)

        await self._require_school(target_school_id)
        if classroom_id:
            await self._check_classroom(classroom_id, target_school_id)

        student = await self._store.insert(
            EntityKind.STUDENT,
            {
                "name": name,
                "age": age,
                "school_id": target_school_id,
                "classroom_id": classroom_id,
            },
        )
        logger.info("Student created: %s in school %s", student["id"], target_school_id)
        return student

    async def list_students(self, requester: CurrentUser) -> list[dict[str, Any]]:
        """List every student visible to the caller."""
        return await self._store.find(EntityKind.STUDENT, **scoped_school_filter(requester))

    async def list_by_school(
        self,
        school_id: str,
        requester: CurrentUser,
    ) -> list[dict[str, Any]]:
        """List the students of one school.

        Raises:
            AuthorizationError: If the school is outside the caller's scope.
            NotFoundError: If the school does not exist.
        """
        ensure_school_access(requester, school_id)
        await self._require_school(school_id)
        return await self._store.find(EntityKind.STUDENT, school_id=school_id)

    async def get_student(self, student_id: str, requester: CurrentUser) -> dict[str, Any]:
        """Get one student.

        Raises:
            NotFoundError: If the student does not exist.
            AuthorizationError: If the student is in another school.
        """
        student = await self.require_student(student_id)
        ensure_school_access(requester, student["school_id"])
        return student

    async def update_student(
        self,
        student_id: str,
        changes: dict[str, Any],
        requester: CurrentUser,
    ) -> dict[str, Any]:
        """Update name, age or classroom of a student.

        Keys other than those are ignored, except ``school_id``: the school
        only changes through a transfer.

        Raises:
            NotFoundError: If the student does not exist.
            AuthorizationError: If the caller is not the school's admin.
            ValidationError: If the classroom is not part of the school, a
                required field is set to None, or the school is included.
            ConflictError: If the student changed concurrently.
        """
        ensure_school_admin(requester)
        if "school_id" in changes:
            raise ValidationError(
                "The school cannot be changed by an update, use the transfer endpoint",
                {"field": "schoolId"},
            )
        fields = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        for key in REQUIRED_FIELDS:
            if key in fields and fields[key] is None:
                raise ValidationError(f"{key} must not be null", {"field": key})

        student = await self.get_student(student_id, requester)
        if not fields:
            return student

        if fields.get("classroom_id"):
            await self._check_classroom(fields["classroom_id"], student["school_id"])

        try:
            updated = await self._store.update_fields(
                EntityKind.STUDENT,
                student_id,
                fields,
                expected_version=student["version"],
            )
        except EntityNotFoundError:
            raise NotFoundError(f"Student {student_id} not found")
        except VersionConflictError:
            raise ConflictError("Student was modified concurrently, retry")

        logger.info("Student updated: %s (%s)", student_id, ", ".join(sorted(fields)))
        return updated

    async def delete_student(self, student_id: str, requester: CurrentUser) -> None:
        """Remove a student.

        Raises:
            NotFoundError: If the student does not exist.
            AuthorizationError: If the caller is not the school's admin.
            ConflictError: If the student changed concurrently.
        """
        ensure_school_admin(requester)
        student = await self.get_student(student_id, requester)

        try:
            await self._store.delete(
                EntityKind.STUDENT,
                student_id,
                expected_version=student["version"],
            )
        except EntityNotFoundError:
            raise NotFoundError(f"Student {student_id} not found")
        except VersionConflictError:
            raise ConflictError("Student was modified concurrently, retry")

        logger.info("Student deleted: %s", student_id)

    async def require_student(self, student_id: str) -> dict[str, Any]:
        """Load a student or raise NotFoundError."""
        try:
            return await self._store.find_by_id(EntityKind.STUDENT, student_id)
        except EntityNotFoundError:
            raise NotFoundError(f"Student {student_id} not found")

    async def _require_school(self, school_id: str) -> None:
        try:
            await self._store.find_by_id(EntityKind.SCHOOL, school_id)
        except EntityNotFoundError:
            raise NotFoundError(f"School {school_id} not found")

    async def _check_classroom(self, classroom_id: str, school_id: str) -> None:
        try:
            classroom = await self._store.find_by_id(EntityKind.CLASSROOM, classroom_id)
        except EntityNotFoundError:
            raise ValidationError(
                "Classroom does not exist",
                {"field": "classroomId"},
            )
        if classroom["school_id"] != school_id:
            raise ValidationError(
                "Classroom belongs to a different school",
                {"field": "classroomId"},
            )
