# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain error taxonomy.

Every error a service may raise towards the API boundary derives from
SchoolHubError. The API layer maps each subclass to a status code and a
JSON body; nothing else about the error reaches the client.

- ValidationError: malformed or inconsistent input (400, details surfaced)
- AuthenticationError: missing/invalid/expired/revoked token or a role
  outside the route's allowed set (401, uniform body)
- AuthorizationError: valid role lacking permission on this resource (403)
- NotFoundError: referenced entity absent (404)
- ConflictError: duplicate unique field or concurrent modification (409)
"""

from typing import Any


class SchoolHubError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ValidationError(SchoolHubError):
    """Raised when input is malformed, missing or inconsistent."""

    status_code = 400


class AuthenticationError(SchoolHubError):
    """Raised when a request cannot be authenticated for a route.

    The reason tag distinguishes the cause for logging only. Clients
    always receive the same response regardless of the reason.

    Attributes:
        reason: Internal tag such as ``expired`` or ``role_not_allowed``.
    """

    status_code = 401

    PUBLIC_MESSAGE = "Please authenticate"

    def __init__(self, reason: str = "unauthenticated", message: str | None = None) -> None:
        """Initialize the authentication error.

        Args:
            reason: Internal failure tag.
            message: Optional internal message, defaults to the public one.
        """
        self.reason = reason
        super().__init__(message or self.PUBLIC_MESSAGE)


class AuthorizationError(SchoolHubError):
    """Raised when an authenticated role may not act on this resource."""

    status_code = 403


class NotFoundError(SchoolHubError):
    """Raised when a referenced entity does not exist."""

    status_code = 404


class ConflictError(SchoolHubError):
    """Raised on duplicate unique fields or lost optimistic-lock races."""

    status_code = 409
