# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication gate.

Turns a presented session token into a CurrentUser and enforces the
route's allowed role set. Every failure raises AuthenticationError with a
reason tag; the API layer turns all of them into the same response.

Example:
    >>> gate = AuthGate(jwt_manager, revocations)
    >>> user = await gate.verify(token, {Role.SCHOOL_ADMIN, Role.SUPERADMIN})
"""

from collections.abc import Iterable
from dataclasses import dataclass

from schoolhub.core.exceptions import AuthenticationError
from schoolhub.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)
from schoolhub.domains.auth.revocation import RevocationList
from schoolhub.domains.auth.roles import Role, parse_role


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated identity decoded from a session token.

    Attributes:
        id: Identity ID.
        role: Role carried by the token.
        school_id: School of the identity (None for superadmin).
        token_id: jti of the session token.
        refresh_token_id: jti of the paired refresh token.
        expires_at: Session token expiry (unix seconds).
    """

    id: str
    role: Role
    school_id: str | None
    token_id: str
    refresh_token_id: str | None
    expires_at: int

    @classmethod
    def from_payload(cls, payload: TokenPayload) -> "CurrentUser":
        """Build from a decoded access token.

        Raises:
            ValueError: If the role claim is missing or unknown.
        """
        return cls(
            id=payload.sub,
            role=parse_role(payload.role or ""),
            school_id=payload.school_id,
            token_id=payload.jti,
            refresh_token_id=payload.rid,
            expires_at=payload.exp,
        )

    @property
    def is_superadmin(self) -> bool:
        """Check if user is a superadmin."""
        return self.role is Role.SUPERADMIN

    @property
    def is_school_admin(self) -> bool:
        """Check if user is a school admin."""
        return self.role is Role.SCHOOL_ADMIN


class AuthGate:
    """Session token verifier with role-set enforcement.

    Attributes:
        _jwt_manager: Token codec.
        _revocations: Deny-list of revoked token ids.
    """

    def __init__(self, jwt_manager: JWTManager, revocations: RevocationList) -> None:
        """Initialize the gate.

        Args:
            jwt_manager: Token codec.
            revocations: Deny-list consulted on every request.
        """
        self._jwt_manager = jwt_manager
        self._revocations = revocations

    async def authenticate(self, token: str | None) -> CurrentUser:
        """Validate a session token and decode its identity.

        Args:
            token: Raw token string, or None if the request carried none.

        Returns:
            The decoded CurrentUser.

        Raises:
            AuthenticationError: Missing, expired, invalid, revoked token or
                unknown role.
        """
        if not token:
            raise AuthenticationError("missing_token")

        try:
            payload = self._jwt_manager.decode_token(token, expected_type="access")
        except TokenExpiredError:
            raise AuthenticationError("expired")
        except InvalidTokenError:
            raise AuthenticationError("invalid_token")

        try:
            user = CurrentUser.from_payload(payload)
        except ValueError:
            raise AuthenticationError("unknown_role")

        if await self._revocations.is_revoked(user.token_id):
            raise AuthenticationError("revoked")

        return user

    @staticmethod
    def authorize(user: CurrentUser, allowed_roles: Iterable[Role]) -> CurrentUser:
        """Enforce that the user's role is one of the allowed roles.

        Membership is exact: no role stands in for another.

        Raises:
            AuthenticationError: If the role is not allowed.
        """
        if user.role not in frozenset(allowed_roles):
            raise AuthenticationError("role_not_allowed")
        return user

    async def verify(self, token: str | None, allowed_roles: Iterable[Role]) -> CurrentUser:
        """Authenticate a token and authorize its role in one step."""
        user = await self.authenticate(token)
        return self.authorize(user, allowed_roles)
