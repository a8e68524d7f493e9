# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for HTTP-level tests.

The application runs against the in-memory store and deny-list, with a
mocked notification channel, through FastAPI's TestClient.
"""

from collections.abc import Callable, Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from schoolhub.api.app import create_app
from schoolhub.core.config.settings import Settings
from schoolhub.domains.auth.revocation import InMemoryRevocationList
from schoolhub.infrastructure.notifications import ChannelResult, ChannelType, DeliveryStatus
from schoolhub.infrastructure.store import InMemoryEntityStore

PASSWORD = "password123"


@pytest.fixture
def notifier() -> MagicMock:
    """Mock notification channel recording sent messages."""
    channel = MagicMock()
    channel.send = AsyncMock(
        return_value=ChannelResult(channel=ChannelType.EMAIL, status=DeliveryStatus.SENT)
    )
    return channel


@pytest.fixture
def app(
    test_settings: Settings,
    store: InMemoryEntityStore,
    revocations: InMemoryRevocationList,
    notifier: MagicMock,
) -> FastAPI:
    """Create test FastAPI app."""
    return create_app(
        test_settings,
        store=store,
        revocations=revocations,
        notification_channel=notifier,
    )


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Create test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


def bearer(token: str) -> dict[str, str]:
    """Authorization header for a session token."""
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def login(client: TestClient) -> Callable[..., dict]:
    """Log in through the API and return the token response body."""

    def _login(email: str, password: str = PASSWORD) -> dict:
        response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()

    return _login


@pytest.fixture
def register_user(client: TestClient, login) -> Callable[..., dict[str, str]]:
    """Register an identity through the API and return its auth headers."""

    def _register(email: str, role: str, school_id: str | None = None) -> dict[str, str]:
        body = {"email": email, "password": PASSWORD, "role": role}
        if school_id:
            body["schoolId"] = school_id
        response = client.post("/api/v1/auth/register", json=body)
        assert response.status_code == 201, response.text
        return bearer(login(email)["sessionToken"])

    return _register


@pytest.fixture
def superadmin_headers(register_user) -> dict[str, str]:
    """Auth headers of a registered superadmin."""
    return register_user("root@schoolhub.org", "superadmin")


@pytest.fixture
def create_school_api(client: TestClient, superadmin_headers) -> Callable[[str], dict]:
    """Create a school through the API."""

    def _create(name: str) -> dict:
        response = client.post(
            "/api/v1/schools",
            json={"name": name, "address": "1 Main St", "contactNumber": "555-0100"},
            headers=superadmin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def school_a(create_school_api) -> dict:
    """First school."""
    return create_school_api("North High")


@pytest.fixture
def school_b(create_school_api) -> dict:
    """Second school."""
    return create_school_api("South High")


@pytest.fixture
def admin_a_headers(register_user, school_a) -> dict[str, str]:
    """Auth headers of the school admin of school A."""
    return register_user("admin@northhigh.org", "school_admin", school_a["id"])


@pytest.fixture
def admin_b_headers(register_user, school_b) -> dict[str, str]:
    """Auth headers of the school admin of school B."""
    return register_user("admin@southhigh.org", "school_admin", school_b["id"])


@pytest.fixture
def teacher_a_headers(register_user, school_a) -> dict[str, str]:
    """Auth headers of a teacher of school A."""
    return register_user("teacher@northhigh.org", "teacher", school_a["id"])


@pytest.fixture
def student_a(client: TestClient, admin_a_headers) -> dict:
    """A student enrolled in school A."""
    response = client.post(
        "/api/v1/students",
        json={"name": "Ada", "age": 11},
        headers=admin_a_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()
