# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Credential issuer.

This module provides the AuthService that orchestrates:
- Identity registration with bcrypt password hashing
- Login issuing a session/refresh token pair
- Refresh with rotation (the presented refresh token is revoked)
- Password reset through a mailed, single-use reset token
- Logout revoking both tokens of the pair

Example:
    >>> auth_service = AuthService(store, jwt_manager, revocations, hasher)
    >>> tokens = await auth_service.login("admin@school.test", "secret")
    >>> tokens = await auth_service.refresh(tokens.refresh_token)
"""

import asyncio
import logging
from typing import Any

from schoolhub.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from schoolhub.domains.auth.gate import CurrentUser
from schoolhub.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
    TokenPair,
)
from schoolhub.domains.auth.password import PasswordHasher, fingerprint
from schoolhub.domains.auth.revocation import RevocationList
from schoolhub.domains.auth.roles import Role
from schoolhub.infrastructure.notifications import BaseChannel, NotificationPayload
from schoolhub.infrastructure.store import (
    DuplicateEntityError,
    EntityKind,
    EntityNotFoundError,
    EntityStore,
    VersionConflictError,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup."""
    return email.strip().lower()


def public_identity(identity: dict[str, Any]) -> dict[str, Any]:
    """Strip the password hash from an identity document."""
    return {key: value for key, value in identity.items() if key != "password_hash"}


class AuthService:
    """Credential issuer.

    Attributes:
        _store: Entity store holding identities and schools.
        _jwt_manager: Token codec.
        _revocations: Token deny-list.
        _hasher: Password hasher.
        _notifier: Channel used to deliver reset links, if any.
        _reset_url: Reset link template with a ``{token}`` placeholder.
    """

    def __init__(
        self,
        store: EntityStore,
        jwt_manager: JWTManager,
        revocations: RevocationList,
        hasher: PasswordHasher,
        notifier: BaseChannel | None = None,
        reset_url: str = "{token}",
    ) -> None:
        """Initialize the credential issuer.

        Args:
            store: Entity store.
            jwt_manager: Token codec.
            revocations: Token deny-list.
            hasher: Password hasher.
            notifier: Delivery channel for password reset messages.
            reset_url: Reset link template with a ``{token}`` placeholder.
        """
        self._store = store
        self._jwt_manager = jwt_manager
        self._revocations = revocations
        self._hasher = hasher
        self._notifier = notifier
        self._reset_url = reset_url

    async def register(
        self,
        email: str,
        password: str,
        role: Role,
        school_id: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> dict[str, Any]:
        """Create a new identity.

        Args:
            email: Login email, unique case-insensitively.
            password: Plain text password.
            role: Role of the identity. Cannot be changed later.
            school_id: School the identity belongs to. Must be absent for
                superadmin and present for every other role.
            first_name: Optional first name.
            last_name: Optional last name.

        Returns:
            The stored identity without its password hash.

        Raises:
            ValidationError: If the role and school do not fit together or
                the password is unusable.
            NotFoundError: If the school does not exist.
            ConflictError: If the email is already registered.
        """
        if role.requires_school and not school_id:
            raise ValidationError(
                f"Role {role.value} requires a school",
                {"field": "schoolId"},
            )
        if not role.requires_school and school_id:
            raise ValidationError(
                "A superadmin cannot belong to a school",
                {"field": "schoolId"},
            )

        if school_id:
            try:
                await self._store.find_by_id(EntityKind.SCHOOL, school_id)
            except EntityNotFoundError:
                raise NotFoundError(f"School {school_id} not found")

        try:
            password_hash = await asyncio.to_thread(self._hasher.hash, password)
        except ValueError as e:
            raise ValidationError(str(e), {"field": "password"})

        try:
            identity = await self._store.insert(
                EntityKind.IDENTITY,
                {
                    "email": normalize_email(email),
                    "password_hash": password_hash,
                    "first_name": first_name,
                    "last_name": last_name,
                    "role": role.value,
                    "school_id": school_id,
                },
            )
        except DuplicateEntityError:
            raise ConflictError("Email is already registered")

        logger.info("Identity registered: %s (%s)", identity["id"], role.value)
        return public_identity(identity)

    async def login(self, email: str, password: str) -> TokenPair:
        """Verify credentials and issue a token pair.

        Unknown email and wrong password fail identically, including in
        the time spent hashing.

        Raises:
            AuthenticationError: If the credentials do not match.
        """
        identity = await self._find_identity(email)
        if identity is None:
            await asyncio.to_thread(self._hasher.verify_dummy, password)
            raise AuthenticationError("invalid_credentials", INVALID_CREDENTIALS)

        if not await asyncio.to_thread(
            self._hasher.verify, password, identity["password_hash"]
        ):
            raise AuthenticationError("invalid_credentials", INVALID_CREDENTIALS)

        logger.info("Login succeeded for identity %s", identity["id"])
        return self._issue(identity)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new pair.

        The presented refresh token is revoked before the new pair is
        returned, so each refresh token works once.

        Raises:
            AuthenticationError: If the token is expired, malformed, of the
                wrong type, already used, or its identity no longer exists.
        """
        try:
            payload = self._jwt_manager.decode_token(refresh_token, expected_type="refresh")
        except TokenExpiredError:
            raise AuthenticationError("expired")
        except InvalidTokenError:
            raise AuthenticationError("invalid_token")

        # Atomic check-and-revoke
        if not await self._revocations.claim(payload.jti, payload.exp):
            logger.warning("Reuse of a rotated refresh token for identity %s", payload.sub)
            raise AuthenticationError("revoked")

        try:
            identity = await self._store.find_by_id(EntityKind.IDENTITY, payload.sub)
        except EntityNotFoundError:
            raise AuthenticationError("unknown_identity")

        logger.info("Tokens refreshed for identity %s", identity["id"])
        return self._issue(identity)

    async def forgot_password(self, email: str) -> NotificationPayload | None:
        """Prepare a password reset message if the email is registered.

        Delivery is left to the caller, see send_reset_link(), so the
        request can be answered before the mail goes out.

        Returns:
            The reset message to deliver, or None if the email is unknown
            or no notification channel is configured.
        """
        identity = await self._find_identity(email)
        if identity is None:
            logger.info("Password reset requested for an unknown email")
            return None

        if self._notifier is None:
            logger.warning("No notification channel, reset link not sent")
            return None

        token = self._jwt_manager.create_reset_token(
            identity["id"], fingerprint(identity["password_hash"])
        )
        name = " ".join(
            part for part in (identity.get("first_name"), identity.get("last_name")) if part
        )
        return NotificationPayload(
            notification_type="password_reset",
            title="Reset your password",
            message=(
                "A password reset was requested for your account. "
                "If this was not you, ignore this message."
            ),
            recipient_id=identity["id"],
            recipient_email=identity["email"],
            recipient_name=name or None,
            action_url=self._reset_url.format(token=token),
            action_label="Reset password",
        )

    async def send_reset_link(self, payload: NotificationPayload) -> None:
        """Deliver a reset message. Failures are logged, never raised."""
        if self._notifier is None:
            return
        result = await self._notifier.send(payload)
        if not result.delivered:
            logger.warning(
                "Reset link for identity %s not delivered: %s",
                payload.recipient_id,
                result.error_message,
            )

    async def reset_password(self, token: str, new_password: str) -> None:
        """Set a new password using a reset token.

        The token is bound to the password hash it was issued against, so
        it stops working as soon as the password changes.

        Raises:
            AuthenticationError: If the token is invalid, expired, of the
                wrong type or already used.
            ValidationError: If the new password is unusable.
        """
        try:
            payload = self._jwt_manager.decode_token(token, expected_type="reset")
        except TokenExpiredError:
            raise AuthenticationError("expired")
        except InvalidTokenError:
            raise AuthenticationError("invalid_token")

        try:
            identity = await self._store.find_by_id(EntityKind.IDENTITY, payload.sub)
        except EntityNotFoundError:
            raise AuthenticationError("unknown_identity")

        if payload.pwd != fingerprint(identity["password_hash"]):
            raise AuthenticationError("reset_token_used")

        try:
            password_hash = await asyncio.to_thread(self._hasher.hash, new_password)
        except ValueError as e:
            raise ValidationError(str(e), {"field": "password"})

        try:
            await self._store.update_fields(
                EntityKind.IDENTITY,
                identity["id"],
                {"password_hash": password_hash},
                expected_version=identity["version"],
            )
        except EntityNotFoundError:
            raise AuthenticationError("unknown_identity")
        except VersionConflictError:
            raise AuthenticationError("reset_token_used")

        logger.info("Password reset for identity %s", identity["id"])

    async def logout(self, user: CurrentUser) -> None:
        """Revoke the session token and its paired refresh token."""
        await self._revocations.revoke(user.token_id, user.expires_at)
        if user.refresh_token_id:
            # Upper bound of the refresh token's exp
            refresh_expires_at = user.expires_at + int(
                self._jwt_manager.refresh_token_ttl.total_seconds()
            )
            await self._revocations.revoke(user.refresh_token_id, refresh_expires_at)
        logger.info("Identity %s logged out", user.id)

    async def _find_identity(self, email: str) -> dict[str, Any] | None:
        matches = await self._store.find(EntityKind.IDENTITY, email=normalize_email(email))
        return matches[0] if matches else None

    def _issue(self, identity: dict[str, Any]) -> TokenPair:
        return self._jwt_manager.create_token_pair(
            user_id=identity["id"],
            role=identity["role"],
            school_id=identity.get("school_id"),
        )
