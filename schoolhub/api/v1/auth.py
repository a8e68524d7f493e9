# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

- POST /register - Create an identity
- POST /login - Exchange credentials for a token pair
- POST /refresh-token - Rotate a refresh token
- POST /forgot-password - Mail a password reset link
- POST /reset-password - Set a new password with a reset token
- POST /logout - Revoke the current token pair

Example:
    POST /api/v1/auth/login
    {"email": "admin@north.test", "password": "..."}
"""

import logging

from fastapi import APIRouter, BackgroundTasks, status

from schoolhub.api.dependencies import AnyRole, AuthServiceDep
from schoolhub.models.auth import (
    ForgotPasswordRequest,
    IdentityResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from schoolhub.models.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=IdentityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register identity",
)
async def register(data: RegisterRequest, service: AuthServiceDep) -> IdentityResponse:
    """Create an identity with the given role."""
    identity = await service.register(
        email=data.email,
        password=data.password,
        role=data.role,
        school_id=data.school_id,
        first_name=data.first_name,
        last_name=data.last_name,
    )
    return IdentityResponse.model_validate(identity)


@router.post("/login", response_model=TokenResponse, summary="Login")
async def login(data: LoginRequest, service: AuthServiceDep) -> TokenResponse:
    """Exchange email and password for a session/refresh token pair."""
    tokens = await service.login(data.email, data.password)
    return TokenResponse.model_validate(tokens.model_dump())


@router.post("/refresh-token", response_model=TokenResponse, summary="Refresh tokens")
async def refresh_token(data: RefreshRequest, service: AuthServiceDep) -> TokenResponse:
    """Exchange a refresh token for a new pair. The old one stops working."""
    tokens = await service.refresh(data.refresh_token)
    return TokenResponse.model_validate(tokens.model_dump())


@router.post("/forgot-password", response_model=MessageResponse, summary="Forgot password")
async def forgot_password(
    data: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    service: AuthServiceDep,
) -> MessageResponse:
    """Request a password reset link.

    The response is the same whether or not the email is registered. The
    mail is sent after the response.
    """
    payload = await service.forgot_password(data.email)
    if payload is not None:
        background_tasks.add_task(service.send_reset_link, payload)
    return MessageResponse(
        message="If the email is registered, a password reset link has been sent"
    )


@router.post("/reset-password", response_model=MessageResponse, summary="Reset password")
async def reset_password(
    data: ResetPasswordRequest,
    service: AuthServiceDep,
) -> MessageResponse:
    """Set a new password using a reset token."""
    await service.reset_password(data.token, data.password)
    return MessageResponse(message="Password has been reset")


@router.post("/logout", response_model=MessageResponse, summary="Logout")
async def logout(current_user: AnyRole, service: AuthServiceDep) -> MessageResponse:
    """Revoke the session token and its paired refresh token."""
    await service.logout(current_user)
    return MessageResponse(message="Logged out")
