# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (services against the in-memory store)
- Integration tests (HTTP API through TestClient)
"""

import time
from collections.abc import Callable
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from pydantic import SecretStr

from schoolhub.core.config.settings import (
    JWTSettings,
    PasswordSettings,
    RateLimitSettings,
    Settings,
)
from schoolhub.domains.auth.gate import AuthGate, CurrentUser
from schoolhub.domains.auth.jwt import JWTManager
from schoolhub.domains.auth.password import PasswordHasher
from schoolhub.domains.auth.revocation import InMemoryRevocationList
from schoolhub.domains.auth.roles import Role
from schoolhub.infrastructure.store import EntityKind, InMemoryEntityStore

TEST_JWT_SECRET = "test-secret-key-for-jwt-testing"


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr(TEST_JWT_SECRET)
    settings.algorithm = "HS256"
    settings.access_token_expire_minutes = 30
    settings.refresh_token_expire_days = 7
    settings.reset_token_expire_minutes = 30
    return settings


@pytest.fixture
def test_settings() -> Settings:
    """Application settings for tests: in-memory backends, fast bcrypt, no limiter."""
    return Settings(
        environment="test",
        debug=False,
        log_level="WARNING",
        jwt=JWTSettings(secret_key=SecretStr(TEST_JWT_SECRET)),
        password=PasswordSettings(bcrypt_rounds=4),
        rate_limit=RateLimitSettings(enabled=False),
    )


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


@pytest.fixture
def hasher() -> PasswordHasher:
    """Password hasher with the minimum bcrypt cost."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def store() -> InMemoryEntityStore:
    """Empty in-memory entity store."""
    return InMemoryEntityStore()


@pytest.fixture
def revocations() -> InMemoryRevocationList:
    """Empty in-memory deny-list."""
    return InMemoryRevocationList()


@pytest.fixture
def auth_gate(jwt_manager: JWTManager, revocations: InMemoryRevocationList) -> AuthGate:
    """Auth gate over the test JWT manager and deny-list."""
    return AuthGate(jwt_manager, revocations)


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def make_user() -> Callable[..., CurrentUser]:
    """Factory for authenticated users without going through tokens."""

    def _make(role: Role, school_id: str | None = None, user_id: str | None = None) -> CurrentUser:
        return CurrentUser(
            id=user_id or str(uuid4()),
            role=role,
            school_id=school_id,
            token_id=str(uuid4()),
            refresh_token_id=str(uuid4()),
            expires_at=int(time.time()) + 1800,
        )

    return _make


@pytest.fixture
def create_school(store: InMemoryEntityStore) -> Callable:
    """Insert a school directly into the store."""

    async def _create(name: str = "North High") -> dict:
        return await store.insert(
            EntityKind.SCHOOL,
            {"name": name, "address": "1 Main St", "contact_number": "555-0100"},
        )

    return _create


@pytest.fixture
def create_student(store: InMemoryEntityStore) -> Callable:
    """Insert a student directly into the store."""

    async def _create(school_id: str, classroom_id: str | None = None, name: str = "Ada") -> dict:
        return await store.insert(
            EntityKind.STUDENT,
            {"name": name, "age": 11, "school_id": school_id, "classroom_id": classroom_id},
        )

    return _create


@pytest.fixture
def create_classroom(store: InMemoryEntityStore) -> Callable:
    """Insert a classroom directly into the store."""

    async def _create(school_id: str, name: str = "5A") -> dict:
        return await store.insert(
            EntityKind.CLASSROOM,
            {"school_id": school_id, "name": name, "grade": "5", "capacity": 30},
        )

    return _create


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (HTTP API)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
