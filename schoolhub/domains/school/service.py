# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School service.

This module provides the SchoolService that handles:
- School creation (superadmin)
- School listing and lookup, scoped to the caller's school for admins

Example:
    >>> school_service = SchoolService(store)
    >>> school = await school_service.create_school("North High", "1 Main St", None, user)
    >>> schools = await school_service.list_schools(user)
"""

import logging
from typing import Any

from schoolhub.core.exceptions import AuthorizationError, NotFoundError
from schoolhub.domains.auth.gate import CurrentUser
from schoolhub.domains.scope import ensure_school_access, scoped_school_filter
from schoolhub.infrastructure.store import EntityKind, EntityNotFoundError, EntityStore

logger = logging.getLogger(__name__)


class SchoolService:
    """Service for managing schools.

    Attributes:
        _store: Entity store.
    """

    def __init__(self, store: EntityStore) -> None:
        """Initialize the school service.

        Args:
            store: Entity store.
        """
        self._store = store

    async def create_school(
        self,
        name: str,
        address: str | None,
        contact_number: str | None,
        requester: CurrentUser,
    ) -> dict[str, Any]:
        """Create a new school.

        Args:
            name: School name.
            address: Postal address.
            contact_number: Phone number.
            requester: Authenticated caller.

        Returns:
            The created school document.

        Raises:
            AuthorizationError: If the caller is not a superadmin.
        """
        if not requester.is_superadmin:
            raise AuthorizationError("Only a superadmin can create schools")

        school = await self._store.insert(
            EntityKind.SCHOOL,
            {"name": name, "address": address, "contact_number": contact_number},
        )
        logger.info("School created: %s by %s", school["id"], requester.id)
        return school

    async def list_schools(self, requester: CurrentUser) -> list[dict[str, Any]]:
        """List the schools visible to the caller.

        A superadmin sees every school, a school admin only its own.
        """
        filters = scoped_school_filter(requester)
        if "school_id" in filters:
            try:
                return [await self._store.find_by_id(EntityKind.SCHOOL, filters["school_id"])]
            except EntityNotFoundError:
                return []
        return await self._store.find(EntityKind.SCHOOL)

    async def get_school(self, school_id: str, requester: CurrentUser) -> dict[str, Any]:
        """Get one school.

        Raises:
            AuthorizationError: If the school is outside the caller's scope.
            NotFoundError: If the school does not exist.
        """
        ensure_school_access(requester, school_id)
        return await self.require_school(school_id)

    async def require_school(self, school_id: str) -> dict[str, Any]:
        """Load a school or raise NotFoundError."""
        try:
            return await self._store.find_by_id(EntityKind.SCHOOL, school_id)
        except EntityNotFoundError:
            raise NotFoundError(f"School {school_id} not found")
