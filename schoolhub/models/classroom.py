# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom request and response models."""

from pydantic import Field, field_validator

from schoolhub.models.common import APIModel, DocumentResponse


class ClassroomCreateRequest(APIModel):
    """Request to create a classroom."""

    name: str = Field(..., min_length=1, max_length=100)
    grade: str | None = Field(None, max_length=50)
    capacity: int | None = Field(None, ge=1, le=1000)
    school_id: str | None = Field(None, description="Defaults to the caller's school")


class ClassroomUpdateRequest(APIModel):
    """Partial classroom update."""

    name: str | None = Field(None, min_length=1, max_length=100)
    grade: str | None = Field(None, max_length=50)
    capacity: int | None = Field(None, ge=1, le=1000)

    @field_validator("name")
    @classmethod
    def _name_not_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


class ClassroomResponse(DocumentResponse):
    """Classroom details."""

    school_id: str
    name: str
    grade: str | None = None
    capacity: int | None = None
