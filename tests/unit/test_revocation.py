# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the token deny-list backends."""

import asyncio
import time
from unittest.mock import AsyncMock, MagicMock

import pytest

from schoolhub.domains.auth.revocation import InMemoryRevocationList, RedisRevocationList
from schoolhub.infrastructure.cache import RedisClient, RedisError


class TestInMemoryRevocationList:
    """Tests for InMemoryRevocationList."""

    @pytest.mark.asyncio
    async def test_revoked_token_is_reported(self) -> None:
        """Test that a revoked jti is reported until its expiry."""
        revocations = InMemoryRevocationList()

        await revocations.revoke("jti-1", int(time.time()) + 60)

        assert await revocations.is_revoked("jti-1") is True
        assert await revocations.is_revoked("jti-2") is False

    @pytest.mark.asyncio
    async def test_expired_entries_are_purged(self) -> None:
        """Test that entries past their expiry are dropped on the next revoke."""
        revocations = InMemoryRevocationList()

        await revocations.revoke("old", int(time.time()) - 10)
        await revocations.revoke("new", int(time.time()) + 60)

        assert len(revocations) == 1
        assert await revocations.is_revoked("old") is False

    @pytest.mark.asyncio
    async def test_claim_succeeds_once(self) -> None:
        """Test that only the first claim on a jti wins."""
        revocations = InMemoryRevocationList()
        expires_at = int(time.time()) + 60

        assert await revocations.claim("jti-1", expires_at) is True
        assert await revocations.claim("jti-1", expires_at) is False
        assert await revocations.is_revoked("jti-1") is True

    @pytest.mark.asyncio
    async def test_concurrent_claims(self) -> None:
        """Test that exactly one of many simultaneous claims wins."""
        revocations = InMemoryRevocationList()
        expires_at = int(time.time()) + 60

        results = await asyncio.gather(
            *(revocations.claim("jti-1", expires_at) for _ in range(10))
        )

        assert results.count(True) == 1

    @pytest.mark.asyncio
    async def test_claim_after_revoke_fails(self) -> None:
        """Test that a revoked jti cannot be claimed."""
        revocations = InMemoryRevocationList()
        expires_at = int(time.time()) + 60
        await revocations.revoke("jti-1", expires_at)

        assert await revocations.claim("jti-1", expires_at) is False

    @pytest.mark.asyncio
    async def test_claim_expired_token_fails(self) -> None:
        """Test that an expired token cannot be claimed."""
        revocations = InMemoryRevocationList()

        assert await revocations.claim("jti-1", int(time.time()) - 10) is False


class TestRedisRevocationList:
    """Tests for RedisRevocationList."""

    @pytest.fixture
    def redis_client(self) -> MagicMock:
        """Mock Redis client."""
        client = MagicMock()
        client.set = AsyncMock()
        client.set_if_absent = AsyncMock(return_value=True)
        client.exists = AsyncMock(return_value=True)
        return client

    @pytest.mark.asyncio
    async def test_revoke_sets_key_with_ttl(self, redis_client: MagicMock) -> None:
        """Test that revoke stores the jti with the remaining lifetime as TTL."""
        revocations = RedisRevocationList(redis_client)

        await revocations.revoke("jti-1", int(time.time()) + 120)

        redis_client.set.assert_awaited_once()
        args, kwargs = redis_client.set.call_args
        assert args[0] == "revoked:jti-1"
        assert 0 < kwargs["expire_seconds"] <= 120

    @pytest.mark.asyncio
    async def test_revoke_expired_token_is_noop(self, redis_client: MagicMock) -> None:
        """Test that an already expired token is not stored."""
        revocations = RedisRevocationList(redis_client)

        await revocations.revoke("jti-1", int(time.time()) - 1)

        redis_client.set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_is_revoked_checks_key(self, redis_client: MagicMock) -> None:
        """Test that lookups use the prefixed key."""
        revocations = RedisRevocationList(redis_client)

        assert await revocations.is_revoked("jti-1") is True
        redis_client.exists.assert_awaited_once_with("revoked:jti-1")

    @pytest.mark.asyncio
    async def test_claim_uses_set_if_absent(self, redis_client: MagicMock) -> None:
        """Test that claim is a single SET NX with the remaining lifetime."""
        revocations = RedisRevocationList(redis_client)

        assert await revocations.claim("jti-1", int(time.time()) + 120) is True

        args, kwargs = redis_client.set_if_absent.call_args
        assert args[0] == "revoked:jti-1"
        assert 0 < kwargs["expire_seconds"] <= 120

    @pytest.mark.asyncio
    async def test_claim_already_present(self, redis_client: MagicMock) -> None:
        """Test that an existing key makes the claim fail."""
        redis_client.set_if_absent.return_value = False
        revocations = RedisRevocationList(redis_client)

        assert await revocations.claim("jti-1", int(time.time()) + 120) is False

    @pytest.mark.asyncio
    async def test_claim_expired_token(self, redis_client: MagicMock) -> None:
        """Test that an expired token is refused without a Redis call."""
        revocations = RedisRevocationList(redis_client)

        assert await revocations.claim("jti-1", int(time.time()) - 1) is False
        redis_client.set_if_absent.assert_not_awaited()


class TestRedisClientSetIfAbsent:
    """Tests for RedisClient.set_if_absent."""

    @pytest.mark.asyncio
    async def test_sends_set_nx(self) -> None:
        """Test that the wrapper issues SET with NX and EX."""
        client = RedisClient(MagicMock())
        client._redis = MagicMock()
        client._redis.set = AsyncMock(return_value=True)

        assert await client.set_if_absent("revoked:jti-1", "1", expire_seconds=30) is True
        client._redis.set.assert_awaited_once_with("revoked:jti-1", "1", ex=30, nx=True)

    @pytest.mark.asyncio
    async def test_existing_key(self) -> None:
        """Test that redis answering None means the key was already set."""
        client = RedisClient(MagicMock())
        client._redis = MagicMock()
        client._redis.set = AsyncMock(return_value=None)

        assert await client.set_if_absent("revoked:jti-1", "1", expire_seconds=30) is False

    @pytest.mark.asyncio
    async def test_not_connected(self) -> None:
        """Test that use before connect() raises RedisError."""
        client = RedisClient(MagicMock())

        with pytest.raises(RedisError):
            await client.set_if_absent("revoked:jti-1", "1")
