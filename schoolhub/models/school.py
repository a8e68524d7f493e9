# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School request and response models."""

from pydantic import Field

from schoolhub.models.common import APIModel, DocumentResponse


class SchoolCreateRequest(APIModel):
    """Request to create a school."""

    name: str = Field(..., min_length=1, max_length=200)
    address: str | None = Field(None, max_length=500)
    contact_number: str | None = Field(None, max_length=50)


class SchoolResponse(DocumentResponse):
    """School details."""

    name: str
    address: str | None = None
    contact_number: str | None = None
