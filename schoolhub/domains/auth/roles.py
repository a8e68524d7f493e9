# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Closed role enumeration.

Roles are flat: no role implies another. Every protected route lists each
role it admits, superadmin included.
"""

from enum import Enum


class Role(str, Enum):
    """User roles embedded in session tokens."""

    SUPERADMIN = "superadmin"
    SCHOOL_ADMIN = "school_admin"
    TEACHER = "teacher"
    STUDENT = "student"

    @property
    def requires_school(self) -> bool:
        """Whether identities with this role must belong to a school."""
        return self is not Role.SUPERADMIN


ALL_ROLES: frozenset[Role] = frozenset(Role)
ADMIN_ROLES: frozenset[Role] = frozenset({Role.SUPERADMIN, Role.SCHOOL_ADMIN})


def parse_role(value: str) -> Role:
    """Parse a role string with exact, case-sensitive matching.

    Args:
        value: Raw role string, e.g. from a token claim.

    Returns:
        The matching Role.

    Raises:
        ValueError: If the string is not one of the enumerated roles.
    """
    for role in Role:
        if role.value == value:
            return role
    raise ValueError(f"Unknown role: {value!r}")
