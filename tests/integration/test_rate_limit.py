# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the application-wide rate limit and health check."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from schoolhub.api.app import create_app
from schoolhub.core.config.settings import RateLimitSettings, Settings
from schoolhub.domains.auth.revocation import InMemoryRevocationList
from schoolhub.infrastructure.store import InMemoryEntityStore


@pytest.fixture
def limited_client(
    test_settings: Settings,
    store: InMemoryEntityStore,
    revocations: InMemoryRevocationList,
) -> Iterator[TestClient]:
    """Client for an app limited to two requests per minute."""
    settings = test_settings.model_copy(
        update={"rate_limit": RateLimitSettings(enabled=True, default="2/minute")}
    )
    app = create_app(settings, store=store, revocations=revocations)
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    """Tests for GET /health."""

    def test_health(self, client: TestClient) -> None:
        """Test that the memory backend reports healthy without auth."""
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["store"] == "memory:up"
        assert data["environment"] == "test"

    def test_request_id_header(self, client: TestClient) -> None:
        """Test that every response carries a request id."""
        response = client.get("/api/v1/health")

        assert response.headers.get("X-Request-ID")


class TestRateLimit:
    """Tests for the slowapi limiter."""

    def test_limit_exceeded(self, limited_client: TestClient) -> None:
        """Test that the third request inside the window is refused."""
        assert limited_client.get("/api/v1/health").status_code == 200
        assert limited_client.get("/api/v1/health").status_code == 200

        response = limited_client.get("/api/v1/health")

        assert response.status_code == 429
        assert response.json() == {"error": "Too many requests, please try again later."}
        assert response.headers["Retry-After"] == "60"

    def test_limit_covers_every_route(self, limited_client: TestClient) -> None:
        """Test that requests to different routes share one budget."""
        limited_client.get("/api/v1/health")
        limited_client.post("/api/v1/auth/login", json={"email": "a@schoolhub.org", "password": "x"})

        response = limited_client.get("/api/v1/schools")

        assert response.status_code == 429

    def test_disabled_limiter(self, client: TestClient) -> None:
        """Test that the default test app is not limited."""
        for _ in range(5):
            assert client.get("/api/v1/health").status_code == 200
