# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School scoping shared by the school, classroom and student services.

A superadmin may act on any school. A school admin may act on its own
school only. No other role manages school data.
"""

from schoolhub.core.exceptions import AuthorizationError
from schoolhub.domains.auth.gate import CurrentUser
from schoolhub.domains.auth.roles import Role


def ensure_school_access(user: CurrentUser, school_id: str) -> None:
    """Check that a user may act on resources of the given school.

    Raises:
        AuthorizationError: If the school is outside the user's scope.
    """
    if user.role is Role.SUPERADMIN:
        return
    if user.role is Role.SCHOOL_ADMIN and user.school_id == school_id:
        return
    raise AuthorizationError(
        "Not allowed to access resources of this school",
        {"schoolId": school_id},
    )


def ensure_school_admin(user: CurrentUser) -> str:
    """Check that the user is a school admin and return its school id.

    Raises:
        AuthorizationError: If the user is not a school admin.
    """
    if user.role is not Role.SCHOOL_ADMIN or not user.school_id:
        raise AuthorizationError("Only a school admin can perform this action")
    return user.school_id


def scoped_school_filter(user: CurrentUser) -> dict[str, str]:
    """Store filter restricting a listing to the user's school.

    Returns:
        An empty filter for a superadmin, ``{"school_id": ...}`` otherwise.

    Raises:
        AuthorizationError: If the role manages no school data.
    """
    if user.role is Role.SUPERADMIN:
        return {}
    if user.role is Role.SCHOOL_ADMIN and user.school_id:
        return {"school_id": user.school_id}
    raise AuthorizationError("Not allowed to list school resources")
