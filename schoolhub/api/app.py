# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the SchoolHub API.

Example:
    uvicorn "schoolhub.api.app:create_app" --factory
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from schoolhub import __version__
from schoolhub.api.errors import register_exception_handlers
from schoolhub.api.middleware.rate_limit import create_limiter
from schoolhub.api.middleware.request_context import RequestContextMiddleware
from schoolhub.api.middleware.security import DEFAULT_CSP, SecurityHeadersMiddleware
from schoolhub.api.v1 import router as v1_router
from schoolhub.core.config import Settings, get_settings
from schoolhub.domains.auth.gate import AuthGate
from schoolhub.domains.auth.jwt import JWTManager
from schoolhub.domains.auth.password import PasswordHasher
from schoolhub.domains.auth.revocation import (
    InMemoryRevocationList,
    RedisRevocationList,
    RevocationList,
)
from schoolhub.infrastructure.cache import RedisClient
from schoolhub.infrastructure.database.connection import (
    close_database,
    create_tables,
    init_database,
)
from schoolhub.infrastructure.notifications import BaseChannel, EmailChannel
from schoolhub.infrastructure.store import (
    EntityStore,
    InMemoryEntityStore,
    SQLAlchemyEntityStore,
)
from schoolhub.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds every shared component that was not injected into create_app():
    - Entity store (in-memory, or SQLAlchemy with optional table creation)
    - Token deny-list (in-memory, or Redis)
    - Notification channel (SMTP email)
    - Auth gate

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    logger.info(
        "Starting SchoolHub API (environment=%s, store=%s, revocation=%s)",
        settings.environment,
        settings.database.backend,
        settings.revocation.backend,
    )

    # =========================================================================
    # Startup
    # =========================================================================
    redis_client: RedisClient | None = None
    database_opened = False

    if app.state.store is None:
        if settings.database.backend == "sql":
            sessionmaker = await init_database(settings)
            database_opened = True
            if settings.database.create_tables:
                await create_tables()
                logger.info("Database tables ensured")
            app.state.store = SQLAlchemyEntityStore(sessionmaker)
        else:
            app.state.store = InMemoryEntityStore()

    if app.state.revocations is None:
        if settings.revocation.backend == "redis":
            redis_client = RedisClient(settings)
            await redis_client.connect()
            app.state.revocations = RedisRevocationList(redis_client)
        else:
            app.state.revocations = InMemoryRevocationList()

    if app.state.notifier is None:
        app.state.notifier = EmailChannel(settings.smtp)

    app.state.auth_gate = AuthGate(app.state.jwt_manager, app.state.revocations)

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================
    if redis_client is not None:
        await redis_client.close()
        logger.info("Redis connection closed")

    if database_opened:
        await close_database()
        logger.info("Database connections closed")

    logger.info("Shutting down SchoolHub API")


def create_app(
    settings: Settings | None = None,
    store: EntityStore | None = None,
    revocations: RevocationList | None = None,
    notification_channel: BaseChannel | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Components passed in are used as-is; the rest are built at startup
    from settings.

    Args:
        settings: Application settings. Defaults to get_settings().
        store: Entity store to use instead of the configured backend.
        revocations: Token deny-list to use instead of the configured one.
        notification_channel: Channel for password reset mail.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="SchoolHub API",
        description="Multi-tenant school management backend",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # =========================================================================
    # State
    # =========================================================================
    app.state.settings = settings
    app.state.store = store
    app.state.revocations = revocations
    app.state.notifier = notification_channel
    app.state.jwt_manager = JWTManager(settings.jwt)
    app.state.password_hasher = PasswordHasher(rounds=settings.password.bcrypt_rounds)
    app.state.limiter = create_limiter(settings)

    # =========================================================================
    # Exception handlers
    # =========================================================================
    register_exception_handlers(app)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )
    app.add_middleware(
        SecurityHeadersMiddleware,
        content_security_policy=None if settings.debug else DEFAULT_CSP,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(v1_router)

    return app
