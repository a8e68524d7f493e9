# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom service.

Classrooms belong to one school. School admins manage the classrooms of
their own school; superadmins may read every classroom.

Example:
    >>> service = ClassroomService(store)
    >>> classroom = await service.create_classroom("5A", "5", 30, user)
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

UPDATABLE_FIELDS = ("name", "grade", "capacity")


class ClassroomService:
    """Service for managing classrooms.

    Attributes:
        _store: Entity store.
    """

    def __init__(self, store: EntityStore) -> None:
        """Initialize the classroom service.

        Args:
            store: Entity store.
        """
        self._store = store

    async def create_classroom(
        self,
        name: str,
        grade: str | None,
        capacity: int | None,
        requester: CurrentUser,
        school_id: str | None = None,
    ) -> dict[str, Any]:
        """Create a classroom in the caller's school.

        Args:
            name: Classroom name.
            grade: Grade level.
            capacity: Number of seats.
            requester: Authenticated school admin.
            school_id: Target school; defaults to the caller's school.

        Returns:
            The created classroom document.

        Raises:
            AuthorizationError: If the caller is not the school's admin.
            NotFoundError: If the school does not exist.
        """
        own_school_id = ensure_school_admin(requester)
        target_school_id = school_id or own_school_id
        ensure_school_access(requester, target_school_id)

        try:
            await self._store.find_by_id(EntityKind.SCHOOL, target_school_id)
        except EntityNotFoundError:
            raise NotFoundError(f"School {target_school_id} not found")

        classroom = await self._store.insert(
            EntityKind.CLASSROOM,
            {
                "school_id": target_school_id,
                "name": name,
                "grade": grade,
                "capacity": capacity,
            },
        )
        logger.info("Classroom created: %s in school %s", classroom["id"], target_school_id)
        return classroom

    async def list_classrooms(self, requester: CurrentUser) -> list[dict[str, Any]]:
        """List the classrooms visible to the caller."""
        return await self._store.find(EntityKind.CLASSROOM, **scoped_school_filter(requester))

    async def get_classroom(self, classroom_id: str, requester: CurrentUser) -> dict[str, Any]:
        """Get one classroom.

        Raises:
            NotFoundError: If the classroom does not exist.
            AuthorizationError: If it belongs to another school.
        """
        classroom = await self._require(classroom_id)
        ensure_school_access(requester, classroom["school_id"])
        return classroom

    async def update_classroom(
        self,
        classroom_id: str,
        changes: dict[str, Any],
        requester: CurrentUser,
    ) -> dict[str, Any]:
        """Update name, grade or capacity of a classroom.

        Raises:
            NotFoundError: If the classroom does not exist.
            AuthorizationError: If the caller is not the school's admin.
            ValidationError: If the name is set to None.
            ConflictError: If the classroom changed concurrently.
        """
        ensure_school_admin(requester)
        fields = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        if "name" in fields and fields["name"] is None:
            raise ValidationError("name must not be null", {"field": "name"})

        classroom = await self.get_classroom(classroom_id, requester)
        if not fields:
            return classroom

        try:
            return await self._store.update_fields(
                EntityKind.CLASSROOM,
                classroom_id,
                fields,
                expected_version=classroom["version"],
            )
        except EntityNotFoundError:
            raise NotFoundError(f"Classroom {classroom_id} not found")
        except VersionConflictError:
            raise ConflictError("Classroom was modified concurrently, retry")

    async def delete_classroom(self, classroom_id: str, requester: CurrentUser) -> None:
        """Delete an empty classroom.

        Raises:
            NotFoundError: If the classroom does not exist.
            AuthorizationError: If the caller is not the school's admin.
            ConflictError: If students are still assigned to it.
        """
        ensure_school_admin(requester)
        classroom = await self.get_classroom(classroom_id, requester)

        assigned = await self._store.find(EntityKind.STUDENT, classroom_id=classroom_id)
        if assigned:
            raise ConflictError(
                "Classroom still has students assigned",
                {"students": len(assigned)},
            )

        try:
            await self._store.delete(
                EntityKind.CLASSROOM,
                classroom_id,
                expected_version=classroom["version"],
            )
        except EntityNotFoundError:
            raise NotFoundError(f"Classroom {classroom_id} not found")
        except VersionConflictError:
            raise ConflictError("Classroom was modified concurrently, retry")

        logger.info("Classroom deleted: %s", classroom_id)

    async def _require(self, classroom_id: str) -> dict[str, Any]:
        try:
            return await self._store.find_by_id(EntityKind.CLASSROOM, classroom_id)
        except EntityNotFoundError:
            raise NotFoundError(f"Classroom {classroom_id} not found")
