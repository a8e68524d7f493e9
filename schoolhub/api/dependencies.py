# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

Shared components (entity store, deny-list, token codec, auth gate,
notification channel) are created once by the application lifespan and
kept on ``app.state``. The functions here hand them, or services built on
them, to route handlers.

Example:
    @router.get("/students")
    async def list_students(
        service: StudentServiceDep,
        user: CurrentUser = Depends(Authorize(Role.SCHOOL_ADMIN, Role.SUPERADMIN)),
    ):
        ...
"""

from typing import Annotated

from fastapi import Depends, Request

from schoolhub.api.middleware.auth import Authorize
from schoolhub.core.config import Settings
from schoolhub.domains.auth.gate import CurrentUser
from schoolhub.domains.auth.jwt import JWTManager
from schoolhub.domains.auth.password import PasswordHasher
from schoolhub.domains.auth.revocation import RevocationList
from schoolhub.domains.auth.roles import ALL_ROLES, Role
from schoolhub.domains.auth.service import AuthService
from schoolhub.domains.classroom.service import ClassroomService
from schoolhub.domains.school.service import SchoolService
from schoolhub.domains.student.service import StudentService
from schoolhub.domains.student.transfer import TransferCoordinator
from schoolhub.infrastructure.store import EntityStore


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_store(request: Request) -> EntityStore:
    """Entity store shared by all requests."""
    return request.app.state.store


def get_revocations(request: Request) -> RevocationList:
    """Token deny-list shared by all requests."""
    return request.app.state.revocations


def get_jwt_manager(request: Request) -> JWTManager:
    """Token codec."""
    return request.app.state.jwt_manager


def get_password_hasher(request: Request) -> PasswordHasher:
    """bcrypt hasher configured with the application's cost factor."""
    return request.app.state.password_hasher


def get_auth_service(request: Request) -> AuthService:
    """Build the credential issuer for a request."""
    state = request.app.state
    return AuthService(
        store=state.store,
        jwt_manager=state.jwt_manager,
        revocations=state.revocations,
        hasher=state.password_hasher,
        notifier=state.notifier,
        reset_url=state.settings.smtp.reset_url,
    )


def get_school_service(store: Annotated[EntityStore, Depends(get_store)]) -> SchoolService:
    """Build a school service."""
    return SchoolService(store)


def get_classroom_service(
    store: Annotated[EntityStore, Depends(get_store)],
) -> ClassroomService:
    """Build a classroom service."""
    return ClassroomService(store)


def get_student_service(store: Annotated[EntityStore, Depends(get_store)]) -> StudentService:
    """Build a student service."""
    return StudentService(store)


def get_transfer_coordinator(
    store: Annotated[EntityStore, Depends(get_store)],
) -> TransferCoordinator:
    """Build a transfer coordinator."""
    return TransferCoordinator(store)


# =========================================================================
# Type aliases
# =========================================================================

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
SchoolServiceDep = Annotated[SchoolService, Depends(get_school_service)]
ClassroomServiceDep = Annotated[ClassroomService, Depends(get_classroom_service)]
StudentServiceDep = Annotated[StudentService, Depends(get_student_service)]
TransferCoordinatorDep = Annotated[TransferCoordinator, Depends(get_transfer_coordinator)]

AnyRole = Annotated[CurrentUser, Depends(Authorize(*ALL_ROLES))]
SuperAdmin = Annotated[CurrentUser, Depends(Authorize(Role.SUPERADMIN))]
SchoolAdmin = Annotated[CurrentUser, Depends(Authorize(Role.SCHOOL_ADMIN))]
Administrator = Annotated[CurrentUser, Depends(Authorize(Role.SCHOOL_ADMIN, Role.SUPERADMIN))]
