# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom management API endpoints.

- POST / - Create a classroom in the admin's school
- GET / - List classrooms
- GET /{classroom_id} - Get classroom details
- PUT /{classroom_id} - Update a classroom
- DELETE /{classroom_id} - Delete an empty classroom
"""

from fastapi import APIRouter, Response, status

from schoolhub.api.dependencies import Administrator, ClassroomServiceDep, SchoolAdmin
from schoolhub.models.classroom import (
    ClassroomCreateRequest,
    ClassroomResponse,
    ClassroomUpdateRequest,
)

router = APIRouter()


@router.post(
    "",
    response_model=ClassroomResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create classroom",
)
async def create_classroom(
    data: ClassroomCreateRequest,
    current_user: SchoolAdmin,
    service: ClassroomServiceDep,
) -> ClassroomResponse:
    """Create a classroom."""
    classroom = await service.create_classroom(
        name=data.name,
        grade=data.grade,
        capacity=data.capacity,
        requester=current_user,
        school_id=data.school_id,
    )
    return ClassroomResponse.model_validate(classroom)


@router.get("", response_model=list[ClassroomResponse], summary="List classrooms")
async def list_classrooms(
    current_user: Administrator,
    service: ClassroomServiceDep,
) -> list[ClassroomResponse]:
    """List the classrooms visible to the caller."""
    classrooms = await service.list_classrooms(current_user)
    return [ClassroomResponse.model_validate(classroom) for classroom in classrooms]


@router.get("/{classroom_id}", response_model=ClassroomResponse, summary="Get classroom")
async def get_classroom(
    classroom_id: str,
    current_user: Administrator,
    service: ClassroomServiceDep,
) -> ClassroomResponse:
    """Get one classroom."""
    classroom = await service.get_classroom(classroom_id, current_user)
    return ClassroomResponse.model_validate(classroom)


@router.put("/{classroom_id}", response_model=ClassroomResponse, summary="Update classroom")
async def update_classroom(
    classroom_id: str,
    data: ClassroomUpdateRequest,
    current_user: SchoolAdmin,
    service: ClassroomServiceDep,
) -> ClassroomResponse:
    """Update name, grade or capacity."""
    classroom = await service.update_classroom(
        classroom_id,
        data.model_dump(exclude_unset=True),
        current_user,
    )
    return ClassroomResponse.model_validate(classroom)


@router.delete(
    "/{classroom_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete classroom",
)
async def delete_classroom(
    classroom_id: str,
    current_user: SchoolAdmin,
    service: ClassroomServiceDep,
) -> Response:
    """Delete a classroom that has no students."""
    await service.delete_classroom(classroom_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
