# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student transfer between schools.

A transfer re-points a student at another school. The store offers no
multi-document transactions, so the operation is made atomic by doing all
validation first and then applying a single compare-and-swap update on
the student document:

1. Load the student and the target school concurrently.
2. Check the requester's role and school scope.
3. Reject a transfer to the student's current school.
4. Update ``school_id`` and clear ``classroom_id`` in one write, guarded
   by the version read in step 1.

If any step fails nothing has been written. If another writer touched the
student between steps 1 and 4, the guarded write fails with a conflict
and the student stays exactly as that other writer left it.

Example:
    >>> coordinator = TransferCoordinator(store)
    >>> student = await coordinator.transfer(student_id, new_school_id, user)
    >>> student["school_id"] == new_school_id
    True
"""

import asyncio
import logging
from typing import Any

from schoolhub.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from schoolhub.domains.auth.gate import CurrentUser
from schoolhub.domains.auth.roles import ADMIN_ROLES
from schoolhub.domains.scope import ensure_school_access
from schoolhub.infrastructure.store import (
    EntityKind,
    EntityNotFoundError,
    EntityStore,
    VersionConflictError,
)

logger = logging.getLogger(__name__)


class TransferCoordinator:
    """Moves students between schools without partial state.

    Attributes:
        _store: Entity store.
    """

    def __init__(self, store: EntityStore) -> None:
        """Initialize the coordinator.

        Args:
            store: Entity store.
        """
        self._store = store

    async def transfer(
        self,
        student_id: str,
        new_school_id: str,
        requester: CurrentUser,
    ) -> dict[str, Any]:
        """Transfer a student to another school.

        The student's classroom assignment is cleared, since classrooms
        belong to the old school.

        Args:
            student_id: Student to move.
            new_school_id: Destination school.
            requester: Authenticated superadmin or school admin.

        Returns:
            The updated student document.

        Raises:
            NotFoundError: If the student or the target school does not
                exist. A missing student is reported first.
            AuthorizationError: If the requester may not move this student.
            ValidationError: If the student already belongs to the target.
            ConflictError: If the student changed during the transfer.
        """
        student_result, school_result = await asyncio.gather(
            self._store.find_by_id(EntityKind.STUDENT, student_id),
            self._store.find_by_id(EntityKind.SCHOOL, new_school_id),
            return_exceptions=True,
        )

        if isinstance(student_result, EntityNotFoundError):
            raise NotFoundError(f"Student {student_id} not found")
        if isinstance(student_result, BaseException):
            raise student_result
        if isinstance(school_result, EntityNotFoundError):
            raise NotFoundError(f"School {new_school_id} not found")
        if isinstance(school_result, BaseException):
            raise school_result

        student = student_result

        if requester.role not in ADMIN_ROLES:
            raise AuthorizationError("Only administrators can transfer students")
        ensure_school_access(requester, student["school_id"])

        if student["school_id"] == new_school_id:
            raise ValidationError(
                "Student already belongs to this school",
                {"field": "newSchoolId"},
            )

        try:
            updated = await self._store.update_fields(
                EntityKind.STUDENT,
                student_id,
                {"school_id": new_school_id, "classroom_id": None},
                expected_version=student["version"],
            )
        except EntityNotFoundError:
            raise NotFoundError(f"Student {student_id} not found")
        except VersionConflictError:
            logger.warning("Transfer of student %s lost a concurrent update", student_id)
            raise ConflictError("Student was modified during the transfer, retry")

        logger.info(
            "Student %s transferred from school %s to %s by %s",
            student_id,
            student["school_id"],
            new_school_id,
            requester.id,
        )
        return updated
