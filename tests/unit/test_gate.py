# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the authentication gate."""

import time
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from jose import jwt

from schoolhub.core.exceptions import AuthenticationError
from schoolhub.domains.auth.gate import AuthGate, CurrentUser
from schoolhub.domains.auth.jwt import JWTManager
from schoolhub.domains.auth.revocation import InMemoryRevocationList
from schoolhub.domains.auth.roles import ALL_ROLES, Role


def _forged_token(secret: str, **claims: object) -> str:
    now = int(time.time())
    payload = {
        "sub": str(uuid4()),
        "type": "access",
        "iat": now,
        "exp": now + 600,
        "jti": str(uuid4()),
        **claims,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


class TestAuthenticate:
    """Tests for AuthGate.authenticate."""

    @pytest.mark.asyncio
    async def test_valid_token(self, auth_gate: AuthGate, jwt_manager: JWTManager) -> None:
        """Test that a valid session token yields its identity."""
        user_id = str(uuid4())
        pair = jwt_manager.create_token_pair(user_id, "school_admin", "school-1")

        user = await auth_gate.authenticate(pair.session_token)

        assert isinstance(user, CurrentUser)
        assert user.id == user_id
        assert user.role is Role.SCHOOL_ADMIN
        assert user.school_id == "school-1"
        assert user.refresh_token_id is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token(self, auth_gate: AuthGate, token: str | None) -> None:
        """Test that an absent token is rejected."""
        with pytest.raises(AuthenticationError) as exc_info:
            await auth_gate.authenticate(token)

        assert exc_info.value.reason == "missing_token"

    @pytest.mark.asyncio
    async def test_expired_token(
        self,
        jwt_settings: MagicMock,
        revocations: InMemoryRevocationList,
    ) -> None:
        """Test that an expired token is rejected."""
        jwt_settings.access_token_expire_minutes = -5
        gate = AuthGate(JWTManager(jwt_settings), revocations)
        pair = JWTManager(jwt_settings).create_token_pair(str(uuid4()), "student", "s1")

        with pytest.raises(AuthenticationError) as exc_info:
            await gate.authenticate(pair.session_token)

        assert exc_info.value.reason == "expired"

    @pytest.mark.asyncio
    async def test_tampered_token(self, auth_gate: AuthGate, jwt_manager: JWTManager) -> None:
        """Test that a token with a modified payload is rejected."""
        pair = jwt_manager.create_token_pair(str(uuid4()), "student", "s1")
        forged = _forged_token("wrong-secret", role="superadmin")
        header, _, signature = pair.session_token.split(".")
        _, forged_body, _ = forged.split(".")

        with pytest.raises(AuthenticationError) as exc_info:
            await auth_gate.authenticate(f"{header}.{forged_body}.{signature}")

        assert exc_info.value.reason == "invalid_token"

    @pytest.mark.asyncio
    async def test_refresh_token_not_accepted(
        self,
        auth_gate: AuthGate,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that a refresh token cannot be used as a session token."""
        pair = jwt_manager.create_token_pair(str(uuid4()), "student", "s1")

        with pytest.raises(AuthenticationError) as exc_info:
            await auth_gate.authenticate(pair.refresh_token)

        assert exc_info.value.reason == "invalid_token"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["admin", "SUPERADMIN", "Teacher", None])
    async def test_unknown_role(
        self,
        auth_gate: AuthGate,
        jwt_settings: MagicMock,
        role: str | None,
    ) -> None:
        """Test that a signed token with an unknown role is rejected."""
        token = _forged_token(jwt_settings.secret_key.get_secret_value(), role=role)

        with pytest.raises(AuthenticationError) as exc_info:
            await auth_gate.authenticate(token)

        assert exc_info.value.reason == "unknown_role"

    @pytest.mark.asyncio
    async def test_revoked_token(
        self,
        auth_gate: AuthGate,
        jwt_manager: JWTManager,
        revocations: InMemoryRevocationList,
    ) -> None:
        """Test that a revoked token is rejected."""
        pair = jwt_manager.create_token_pair(str(uuid4()), "teacher", "s1")
        payload = jwt_manager.decode_token(pair.session_token)
        await revocations.revoke(payload.jti, payload.exp)

        with pytest.raises(AuthenticationError) as exc_info:
            await auth_gate.authenticate(pair.session_token)

        assert exc_info.value.reason == "revoked"

    @pytest.mark.asyncio
    async def test_failures_share_public_message(
        self,
        auth_gate: AuthGate,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that every rejection carries the same public message."""
        pair = jwt_manager.create_token_pair(str(uuid4()), "student", "s1")
        messages = set()

        for token in (None, "garbage", pair.refresh_token):
            with pytest.raises(AuthenticationError) as exc_info:
                await auth_gate.authenticate(token)
            messages.add(exc_info.value.message)

        assert messages == {"Please authenticate"}


class TestAuthorize:
    """Tests for role-set enforcement."""

    @pytest.mark.parametrize("role", list(Role))
    def test_role_in_set_passes(self, make_user, role: Role) -> None:
        """Test that each role passes when listed."""
        user = make_user(role, school_id=None if role is Role.SUPERADMIN else "s1")

        assert AuthGate.authorize(user, {role}) is user

    @pytest.mark.parametrize("role", list(Role))
    def test_role_outside_set_fails(self, make_user, role: Role) -> None:
        """Test that each role fails when not listed."""
        user = make_user(role, school_id="s1")

        with pytest.raises(AuthenticationError) as exc_info:
            AuthGate.authorize(user, ALL_ROLES - {role})

        assert exc_info.value.reason == "role_not_allowed"
        assert exc_info.value.message == "Please authenticate"

    def test_superadmin_is_not_implicitly_allowed(self, make_user) -> None:
        """Test that superadmin has no access to routes that do not list it."""
        user = make_user(Role.SUPERADMIN)

        with pytest.raises(AuthenticationError):
            AuthGate.authorize(user, {Role.SCHOOL_ADMIN})

    def test_decision_ignores_identity(self, make_user) -> None:
        """Test that the decision depends on role only, not on identity."""
        first = make_user(Role.TEACHER, "s1", user_id="a")
        second = make_user(Role.TEACHER, "s2", user_id="b")

        assert AuthGate.authorize(first, {Role.TEACHER}) is first
        assert AuthGate.authorize(second, {Role.TEACHER}) is second

    @pytest.mark.asyncio
    async def test_verify_combines_both_steps(
        self,
        auth_gate: AuthGate,
        jwt_manager: JWTManager,
    ) -> None:
        """Test verify authenticates then authorizes."""
        pair = jwt_manager.create_token_pair(str(uuid4()), "student", "s1")

        user = await auth_gate.verify(pair.session_token, {Role.STUDENT})
        assert user.role is Role.STUDENT

        with pytest.raises(AuthenticationError) as exc_info:
            await auth_gate.verify(pair.session_token, {Role.SCHOOL_ADMIN, Role.SUPERADMIN})
        assert exc_info.value.reason == "role_not_allowed"
