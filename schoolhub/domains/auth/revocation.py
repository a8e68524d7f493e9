# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Token deny-list.

Session and refresh tokens are self-contained signed values, so revoking
one means remembering its ``jti`` until the token would have expired on
its own. The auth gate consults the deny-list on every request and the
credential issuer consults it before honouring a refresh token.

Two backends:
- InMemoryRevocationList: single process, entries purged lazily on expiry
- RedisRevocationList: shared between workers, entries carry a Redis TTL
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod

from schoolhub.infrastructure.cache import RedisClient

logger = logging.getLogger(__name__)


class RevocationList(ABC):
    """Abstract deny-list of revoked token ids."""

    @abstractmethod
    async def revoke(self, token_id: str, expires_at: int) -> None:
        """Revoke a token until its natural expiry.

        Args:
            token_id: The token's jti claim.
            expires_at: The token's exp claim (unix seconds).
        """
        ...

    @abstractmethod
    async def claim(self, token_id: str, expires_at: int) -> bool:
        """Revoke a token only if it is not revoked yet.

        Check and insert happen as one step, so of several concurrent
        claims on the same id exactly one succeeds.

        Args:
            token_id: The token's jti claim.
            expires_at: The token's exp claim (unix seconds).

        Returns:
            True if this call revoked the token, False if it was already
            revoked or has expired.
        """
        ...

    @abstractmethod
    async def is_revoked(self, token_id: str) -> bool:
        """Check whether a token id has been revoked.

        Args:
            token_id: The token's jti claim.

        Returns:
            True if the token must be rejected.
        """
        ...


class InMemoryRevocationList(RevocationList):
    """Process-local deny-list.

    Attributes:
        _entries: Map of revoked jti to expiry timestamp.
        _lock: Guards purge and insert.
    """

    def __init__(self) -> None:
        """Initialize an empty deny-list."""
        self._entries: dict[str, int] = {}
        self._lock = asyncio.Lock()

    async def revoke(self, token_id: str, expires_at: int) -> None:
        async with self._lock:
            self._purge(int(time.time()))
            self._entries[token_id] = expires_at

    async def claim(self, token_id: str, expires_at: int) -> bool:
        async with self._lock:
            now = int(time.time())
            self._purge(now)
            if expires_at < now or token_id in self._entries:
                return False
            self._entries[token_id] = expires_at
            return True

    async def is_revoked(self, token_id: str) -> bool:
        expires_at = self._entries.get(token_id)
        if expires_at is None:
            return False
        # An expired token fails signature checks anyway
        return expires_at >= int(time.time())

    def __len__(self) -> int:
        return len(self._entries)

    def _purge(self, now: int) -> None:
        expired = [jti for jti, exp in self._entries.items() if exp < now]
        for jti in expired:
            del self._entries[jti]


class RedisRevocationList(RevocationList):
    """Deny-list shared through Redis.

    Keys are ``revoked:<jti>`` with a TTL equal to the remaining token
    lifetime, so Redis drops them once the token could no longer be used.
    """

    KEY_PREFIX = "revoked"

    def __init__(self, client: RedisClient) -> None:
        """Initialize the deny-list.

        Args:
            client: Connected Redis client.
        """
        self._client = client

    async def revoke(self, token_id: str, expires_at: int) -> None:
        ttl = expires_at - int(time.time())
        if ttl <= 0:
            return
        await self._client.set(self._key(token_id), "1", expire_seconds=ttl)
        logger.debug("Token revoked in Redis, ttl=%ss", ttl)

    async def claim(self, token_id: str, expires_at: int) -> bool:
        ttl = expires_at - int(time.time())
        if ttl <= 0:
            return False
        return await self._client.set_if_absent(self._key(token_id), "1", expire_seconds=ttl)

    async def is_revoked(self, token_id: str) -> bool:
        return await self._client.exists(self._key(token_id))

    def _key(self, token_id: str) -> str:
        return f"{self.KEY_PREFIX}:{token_id}"
