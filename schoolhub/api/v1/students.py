# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student management API endpoints.

- POST / - Enroll a student (school_admin)
- GET / - List students
- GET /school/{school_id} - List the students of one school
- GET /{student_id} - Get student details
- PUT /{student_id} - Update name, age or classroom (school_admin)
- DELETE /{student_id} - Remove a student (school_admin)
- POST /{student_id}/transfer - Move a student to another school

Example:
    POST /api/v1/students/6f1c.../transfer
    {"newSchoolId": "a2d4..."}
"""

import logging

from fastapi import APIRouter, Response, status

from schoolhub.api.dependencies import (
    Administrator,
    SchoolAdmin,
    StudentServiceDep,
    TransferCoordinatorDep,
)
from schoolhub.models.student import (
    StudentCreateRequest,
    StudentResponse,
    StudentUpdateRequest,
    TransferRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create student",
)
async def create_student(
    data: StudentCreateRequest,
    current_user: SchoolAdmin,
    service: StudentServiceDep,
) -> StudentResponse:
    """Enroll a student in the caller's school."""
    student = await service.create_student(
        name=data.name,
        age=data.age,
        requester=current_user,
        school_id=data.school_id,
        classroom_id=data.classroom_id,
    )
    return StudentResponse.model_validate(student)


@router.get("", response_model=list[StudentResponse], summary="List students")
async def list_students(
    current_user: Administrator,
    service: StudentServiceDep,
) -> list[StudentResponse]:
    """List the students visible to the caller."""
    students = await service.list_students(current_user)
    return [StudentResponse.model_validate(student) for student in students]


@router.get(
    "/school/{school_id}",
    response_model=list[StudentResponse],
    summary="List students of a school",
)
async def list_students_by_school(
    school_id: str,
    current_user: Administrator,
    service: StudentServiceDep,
) -> list[StudentResponse]:
    """List the students of one school."""
    students = await service.list_by_school(school_id, current_user)
    return [StudentResponse.model_validate(student) for student in students]


@router.get("/{student_id}", response_model=StudentResponse, summary="Get student")
async def get_student(
    student_id: str,
    current_user: Administrator,
    service: StudentServiceDep,
) -> StudentResponse:
    """Get one student."""
    student = await service.get_student(student_id, current_user)
    return StudentResponse.model_validate(student)


@router.put("/{student_id}", response_model=StudentResponse, summary="Update student")
async def update_student(
    student_id: str,
    data: StudentUpdateRequest,
    current_user: SchoolAdmin,
    service: StudentServiceDep,
) -> StudentResponse:
    """Update name, age or classroom."""
    student = await service.update_student(
        student_id,
        data.model_dump(exclude_unset=True),
        current_user,
    )
    return StudentResponse.model_validate(student)


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete student",
)
async def delete_student(
    student_id: str,
    current_user: SchoolAdmin,
    service: StudentServiceDep,
) -> Response:
    """Remove a student."""
    await service.delete_student(student_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{student_id}/transfer",
    response_model=StudentResponse,
    summary="Transfer student",
)
async def transfer_student(
    student_id: str,
    data: TransferRequest,
    current_user: Administrator,
    coordinator: TransferCoordinatorDep,
) -> StudentResponse:
    """Move a student to another school.

    The student's classroom assignment is cleared. Fails with 409 if the
    student was modified while the transfer was in progress.
    """
    logger.info(
        "Transfer requested: student=%s, to=%s, by=%s",
        student_id,
        data.new_school_id,
        current_user.id,
    )
    student = await coordinator.transfer(student_id, data.new_school_id, current_user)
    return StudentResponse.model_validate(student)
