# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

A single application-wide limit is applied per client IP address, across
all routes (default ``100/15minutes``). Counters live in the storage named
by ``RATE_LIMIT_STORAGE_URI``; use a redis URL when several API workers
must share them.

Example:
    >>> app.state.limiter = create_limiter(settings)
    >>> app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    >>> app.add_middleware(SlowAPIMiddleware)
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from schoolhub.core.config.settings import Settings

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 60


def create_limiter(settings: Settings) -> Limiter:
    """Create the limiter configured for this application.

    Args:
        settings: Application settings.

    Returns:
        Limiter to store on ``app.state.limiter``.
    """
    return Limiter(
        key_func=get_remote_address,
        application_limits=[settings.rate_limit.default],
        storage_uri=settings.rate_limit.storage_uri,
        enabled=settings.rate_limit.enabled,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors.

    Must stay synchronous: SlowAPIMiddleware may call the registered
    handler without awaiting it.

    Args:
        request: HTTP request.
        exc: Rate limit exceeded exception.

    Returns:
        429 JSON response with a Retry-After header.
    """
    logger.warning(
        "Rate limit exceeded: %s for %s",
        exc.detail,
        get_remote_address(request),
    )

    return JSONResponse(
        status_code=429,
        content={"error": "Too many requests, please try again later."},
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )
