# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared API model base and generic responses."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DocumentResponse(APIModel):
    """Fields every stored entity carries."""

    id: str
    version: int
    created_at: datetime
    updated_at: datetime


class MessageResponse(APIModel):
    """Plain acknowledgement."""

    message: str


class ErrorResponse(APIModel):
    """Error body returned for every failed request."""

    error: str = Field(description="Human readable error message")
    details: Any | None = Field(default=None, description="Extra context, if any")
