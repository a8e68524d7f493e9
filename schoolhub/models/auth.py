# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication request and response models."""

from datetime import datetime

from pydantic import EmailStr, Field

from schoolhub.domains.auth.roles import Role
from schoolhub.models.common import APIModel


class RegisterRequest(APIModel):
    """Identity registration request."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=8, max_length=72, description="Plain text password")
    role: Role = Field(..., description="Role of the new identity")
    school_id: str | None = Field(None, description="Required for every role except superadmin")
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class IdentityResponse(APIModel):
    """Registered identity, without credentials."""

    id: str
    email: str
    role: Role
    school_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime


class LoginRequest(APIModel):
    """Credentials for login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


class TokenResponse(APIModel):
    """Session and refresh token pair."""

    session_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(..., description="Session token lifetime in seconds")
    refresh_expires_in: int = Field(..., description="Refresh token lifetime in seconds")


class RefreshRequest(APIModel):
    """Refresh token exchange request."""

    refresh_token: str = Field(..., min_length=1)


class ForgotPasswordRequest(APIModel):
    """Password reset link request."""

    email: EmailStr


class ResetPasswordRequest(APIModel):
    """New password with the mailed reset token."""

    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8, max_length=72)
