# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Cache infrastructure using Redis.

Redis backs the shared token deny-list when several API workers run.

Example:
    from schoolhub.infrastructure.cache import RedisClient

    client = RedisClient(settings)
    await client.connect()
    await client.set("revoked:abc", "1", expire_seconds=3600)
    await client.close()
"""

from schoolhub.infrastructure.cache.redis_client import RedisClient, RedisError

__all__ = [
    "RedisClient",
    "RedisError",
]
