"""Key/value store interface for invalidation records.

``redis.asyncio.Redis`` satisfies :class:`KeyValueStore` as-is. The store
handle is always created and closed by the caller.
"""

from typing import Any, Protocol

from redis.asyncio import Redis

from jwt_revocation.config import Settings


class KeyValueStore(Protocol):
    """Minimal async get/set/delete interface."""

    async def get(self, name: str) -> str | bytes | None: ...

    async def set(self, name: str, value: str) -> Any: ...

    async def delete(self, *names: str) -> Any: ...


def create_redis(settings: Settings) -> Redis:
    """Create the async Redis client."""
    return Redis.from_url(str(settings.redis_url), decode_responses=True)
