# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exception handlers mapping domain errors to HTTP responses.

Every error body has the shape ``{"error": message}``, with a ``details``
key for validation failures. Authentication failures never reveal their
reason to the client.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from schoolhub.api.middleware.rate_limit import rate_limit_exceeded_handler
from schoolhub.core.exceptions import AuthenticationError, SchoolHubError, ValidationError

logger = logging.getLogger(__name__)


async def schoolhub_error_handler(request: Request, exc: SchoolHubError) -> JSONResponse:
    """Render a domain error with its mapped status code."""
    content: dict = {"error": exc.message}
    if isinstance(exc, ValidationError) and exc.details:
        content["details"] = exc.details

    if exc.status_code >= 500:
        logger.error("Unhandled domain error on %s: %s", request.url.path, exc)
    else:
        logger.debug("%s on %s: %s", type(exc).__name__, request.url.path, exc)

    return JSONResponse(status_code=exc.status_code, content=content)


async def authentication_error_handler(
    request: Request,
    exc: AuthenticationError,
) -> JSONResponse:
    """Render an authentication failure.

    The reason tag has already been logged by the caller and is not
    included in the response.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render a malformed request body or parameter as 400."""
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": details},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render any other exception as a generic 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    """Install every exception handler on the application."""
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(SchoolHubError, schoolhub_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
