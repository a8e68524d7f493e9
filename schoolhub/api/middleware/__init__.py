# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request middleware and request-scoped dependencies."""

from schoolhub.api.middleware.auth import Authorize, extract_token, get_current_user
from schoolhub.api.middleware.rate_limit import create_limiter, rate_limit_exceeded_handler
from schoolhub.api.middleware.request_context import RequestContextMiddleware
from schoolhub.api.middleware.security import SecurityHeadersMiddleware

__all__ = [
    "Authorize",
    "RequestContextMiddleware",
    "SecurityHeadersMiddleware",
    "create_limiter",
    "extract_token",
    "get_current_user",
    "rate_limit_exceeded_handler",
]
