# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role-scoped authentication for routes.

``Authorize(*roles)`` is attached to every protected route. It reads the
session token from the Authorization header, asks the AuthGate to verify
it against the route's role set, and stores the resulting CurrentUser on
``request.state.user``.

Both ``Authorization: Bearer <token>`` and a bare ``Authorization: <token>``
are accepted.

Example:
    @router.get("/students")
    async def list_students(
        user: CurrentUser = Depends(Authorize(Role.SCHOOL_ADMIN, Role.SUPERADMIN)),
    ):
        ...
"""

from fastapi import Request

from schoolhub.core.exceptions import AuthenticationError
from schoolhub.domains.auth.gate import AuthGate, CurrentUser
from schoolhub.domains.auth.roles import Role
from schoolhub.utils.logging import get_logger

logger = get_logger(__name__)


def extract_token(request: Request) -> str | None:
    """Extract the session token from the Authorization header.

    Args:
        request: HTTP request.

    Returns:
        Token string or None if the header is absent or empty.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    if len(parts) == 1 and parts[0].lower() != "bearer":
        return parts[0]
    return None


def get_current_user(request: Request) -> CurrentUser | None:
    """Get the user attached by Authorize, if any."""
    return getattr(request.state, "user", None)


class Authorize:
    """Dependency admitting only the listed roles.

    Roles are matched exactly; a superadmin is admitted only where it is
    listed. Every failure raises AuthenticationError, which the API turns
    into one uniform 401 response.

    Attributes:
        roles: Allowed roles for the route.
    """

    def __init__(self, *roles: Role) -> None:
        """Initialize the role requirement.

        Args:
            roles: Roles admitted to the route.

        Raises:
            ValueError: If no role is given.
        """
        if not roles:
            raise ValueError("Authorize needs at least one role")
        self.roles = frozenset(roles)

    async def __call__(self, request: Request) -> CurrentUser:
        """Verify the request's token and role.

        Args:
            request: HTTP request.

        Returns:
            The authenticated CurrentUser.

        Raises:
            AuthenticationError: If the token is missing, invalid, expired,
                revoked, or its role is not admitted.
        """
        gate: AuthGate = request.app.state.auth_gate
        token = extract_token(request)

        try:
            user = await gate.authenticate(token)
        except AuthenticationError as e:
            logger.info("auth_rejected", reason=e.reason, path=request.url.path)
            raise

        try:
            gate.authorize(user, self.roles)
        except AuthenticationError as e:
            logger.info(
                "auth_rejected",
                reason=e.reason,
                path=request.url.path,
                role=user.role.value,
                user_id=user.id,
            )
            raise

        request.state.user = user
        return user
