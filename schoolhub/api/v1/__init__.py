# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    auth: Registration, login, token refresh, password reset, logout.
    schools: School creation and lookup.
    classrooms: Classroom management.
    students: Student management and transfer between schools.
"""

from fastapi import APIRouter

from schoolhub.api.routes import health
from schoolhub.api.v1 import auth, classrooms, schools, students

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(health.router, tags=["Health"])
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(schools.router, prefix="/schools", tags=["Schools"])
router.include_router(classrooms.router, prefix="/classrooms", tags=["Classrooms"])
router.include_router(students.router, prefix="/students", tags=["Students"])

__all__ = ["router"]
