# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School management API endpoints.

- POST / - Create a school (superadmin)
- GET / - List schools (superadmin: all, school_admin: own)
- GET /{school_id} - Get school details
"""

from fastapi import APIRouter, status

from schoolhub.api.dependencies import Administrator, SchoolServiceDep, SuperAdmin
from schoolhub.models.school import SchoolCreateRequest, SchoolResponse

router = APIRouter()


@router.post(
    "",
    response_model=SchoolResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create school",
)
async def create_school(
    data: SchoolCreateRequest,
    current_user: SuperAdmin,
    service: SchoolServiceDep,
) -> SchoolResponse:
    """Create a new school."""
    school = await service.create_school(
        name=data.name,
        address=data.address,
        contact_number=data.contact_number,
        requester=current_user,
    )
    return SchoolResponse.model_validate(school)


@router.get("", response_model=list[SchoolResponse], summary="List schools")
async def list_schools(
    current_user: Administrator,
    service: SchoolServiceDep,
) -> list[SchoolResponse]:
    """List the schools visible to the caller."""
    schools = await service.list_schools(current_user)
    return [SchoolResponse.model_validate(school) for school in schools]


@router.get("/{school_id}", response_model=SchoolResponse, summary="Get school")
async def get_school(
    school_id: str,
    current_user: Administrator,
    service: SchoolServiceDep,
) -> SchoolResponse:
    """Get one school."""
    school = await service.get_school(school_id, current_user)
    return SchoolResponse.model_validate(school)
