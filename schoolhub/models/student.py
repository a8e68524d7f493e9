# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student request and response models."""

from pydantic import ConfigDict, Field, field_validator

from schoolhub.models.common import APIModel, DocumentResponse


class StudentCreateRequest(APIModel):
    """Request to enroll a student."""

    name: str = Field(..., min_length=1, max_length=200)
    age: int = Field(..., ge=0, le=150)
    school_id: str | None = Field(None, description="Defaults to the caller's school")
    classroom_id: str | None = None


class StudentUpdateRequest(APIModel):
    """Partial student update.

    The school cannot be changed here; use the transfer endpoint.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=200)
    age: int | None = Field(None, ge=0, le=150)
    classroom_id: str | None = Field(None, description="Set to null to unassign")
    school_id: str | None = Field(None, description="Rejected; see the transfer endpoint")

    @field_validator("name", "age")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("school_id")
    @classmethod
    def _school_is_fixed(cls, v):
        raise ValueError("cannot be changed here, use POST /students/{id}/transfer")


class TransferRequest(APIModel):
    """Student transfer request."""

    new_school_id: str = Field(..., min_length=1)


class StudentResponse(DocumentResponse):
    """Student details."""

    name: str
    age: int
    school_id: str
    classroom_id: str | None = None
