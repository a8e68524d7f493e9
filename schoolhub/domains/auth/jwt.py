# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT token management utilities.

This module provides JWT token creation and validation using python-jose.
Three token types are issued:

- access: short-lived session token carrying identity id, role and school
- refresh: longer-lived, single-purpose token that mints a new pair
- reset: password reset token bound to the current password hash

Every token carries a random ``jti`` so it can be revoked individually.
An access token also carries ``rid``, the ``jti`` of the refresh token
issued alongside it, so logout can revoke the pair.

Example:
    >>> from schoolhub.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> tokens = jwt_manager.create_token_pair(user_id="user-123", role="superadmin")
    >>> claims = jwt_manager.decode_token(tokens.session_token, expected_type="access")
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Literal
from uuid import UUID

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel, ValidationError as PydanticValidationError

from schoolhub.core.config.settings import JWTSettings

logger = logging.getLogger(__name__)

TokenType = Literal["access", "refresh", "reset"]


class TokenPayload(BaseModel):
    """JWT token payload structure.

    Attributes:
        sub: Subject (identity ID).
        type: Token type.
        role: Role code (access tokens only).
        school_id: School the identity belongs to (access tokens only).
        rid: jti of the paired refresh token (access tokens only).
        pwd: Password hash fingerprint (reset tokens only).
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: JWT ID for revocation.
    """

    sub: str
    type: TokenType
    role: str | None = None
    school_id: str | None = None
    rid: str | None = None
    pwd: str | None = None
    exp: int
    iat: int
    jti: str


class TokenPair(BaseModel):
    """Session and refresh token pair.

    Attributes:
        session_token: JWT access token string.
        refresh_token: JWT refresh token string.
        token_type: Token type (always "Bearer").
        expires_in: Session token expiration in seconds.
        refresh_expires_in: Refresh token expiration in seconds.
    """

    session_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    refresh_expires_in: int


class JWTError(Exception):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTManager:
    """JWT token creation and validation manager.

    Attributes:
        _settings: JWT configuration settings.

    Example:
        >>> jwt_manager = JWTManager(settings)
        >>> tokens = jwt_manager.create_token_pair(
        ...     user_id="user-123",
        ...     role="school_admin",
        ...     school_id="school-1",
        ... )
        >>> claims = jwt_manager.decode_token(tokens.session_token)
    """

    def __init__(self, settings: JWTSettings) -> None:
        """Initialize the JWT manager.

        Args:
            settings: JWT configuration settings.
        """
        self._settings = settings

    @property
    def refresh_token_ttl(self) -> timedelta:
        """Lifetime of refresh tokens."""
        return timedelta(days=self._settings.refresh_token_expire_days)

    def create_token_pair(
        self,
        user_id: str | UUID,
        role: str,
        school_id: str | UUID | None = None,
    ) -> TokenPair:
        """Create a session and refresh token pair.

        Args:
            user_id: Identity identifier.
            role: Role code.
            school_id: School the identity belongs to.

        Returns:
            TokenPair with session and refresh tokens.
        """
        now = datetime.now(timezone.utc)
        access_exp = now + timedelta(minutes=self._settings.access_token_expire_minutes)
        refresh_exp = now + self.refresh_token_ttl
        refresh_jti = secrets.token_urlsafe(16)

        access_payload = {
            "sub": str(user_id),
            "type": "access",
            "role": role,
            "school_id": str(school_id) if school_id else None,
            "rid": refresh_jti,
            "exp": int(access_exp.timestamp()),
            "iat": int(now.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }

        refresh_payload = {
            "sub": str(user_id),
            "type": "refresh",
            "exp": int(refresh_exp.timestamp()),
            "iat": int(now.timestamp()),
            "jti": refresh_jti,
        }

        return TokenPair(
            session_token=self._encode(access_payload),
            refresh_token=self._encode(refresh_payload),
            token_type="Bearer",
            expires_in=self._settings.access_token_expire_minutes * 60,
            refresh_expires_in=int(self.refresh_token_ttl.total_seconds()),
        )

    def create_reset_token(self, user_id: str | UUID, fingerprint: str) -> str:
        """Create a password reset token.

        Args:
            user_id: Identity identifier.
            fingerprint: Fingerprint of the identity's current password hash.

        Returns:
            JWT reset token string.
        """
        now = datetime.now(timezone.utc)
        exp = now + timedelta(minutes=self._settings.reset_token_expire_minutes)

        return self._encode({
            "sub": str(user_id),
            "type": "reset",
            "pwd": fingerprint,
            "exp": int(exp.timestamp()),
            "iat": int(now.timestamp()),
            "jti": secrets.token_urlsafe(16),
        })

    def decode_token(
        self,
        token: str,
        expected_type: TokenType | None = None,
    ) -> TokenPayload:
        """Decode and validate a JWT token.

        Args:
            token: JWT token string.
            expected_type: Expected token type.

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or of the wrong type.
        """
        try:
            claims = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
            payload = TokenPayload.model_validate(claims)
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except (JoseJWTError, PydanticValidationError) as e:
            logger.debug("Token decode failed: %s", type(e).__name__)
            raise InvalidTokenError(f"Invalid token: {type(e).__name__}")

        if expected_type and payload.type != expected_type:
            raise InvalidTokenError(
                f"Expected {expected_type} token, got {payload.type}"
            )

        return payload

    def verify_token(
        self,
        token: str,
        expected_type: TokenType | None = None,
    ) -> bool:
        """Verify if a token is valid.

        Args:
            token: JWT token string.
            expected_type: Expected token type.

        Returns:
            True if token is valid, False otherwise.
        """
        try:
            self.decode_token(token, expected_type)
            return True
        except (TokenExpiredError, InvalidTokenError):
            return False

    def _encode(self, payload: dict) -> str:
        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )
