"""Redis-backed cache client (Upstash or any redis:// / rediss:// URL)."""

from __future__ import annotations

import logging
from typing import Optional

from redis.asyncio.client import Redis as AsyncRedis  # type: ignore[misc]
from redis.exceptions import RedisError

from ..errors import CacheUnavailableError

logger = logging.getLogger(__name__)


class RedisCache:
    backend = "redis"

    def __init__(self, url: str, *, client: Optional[AsyncRedis] = None) -> None:
        self._url = url
        self._client: AsyncRedis = client or AsyncRedis.from_url(url, decode_responses=True)

    @property
    def url_scheme(self) -> str:
        return self._url.split("://")[0] if "://" in self._url else "unknown"

    async def connect(self) -> None:
        """Verify connectivity. Failures are logged, never raised."""
        try:
            await self._client.ping()  # type: ignore[misc]
        except RedisError as exc:
            logger.error("Failed to connect to Redis (scheme=%s): %s", self.url_scheme, exc)
            return
        logger.info("Redis connected (scheme=%s)", self.url_scheme)

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._client.get(key)
        except RedisError as exc:
            raise CacheUnavailableError(f"Redis GET {key} failed: {exc}") from exc

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as exc:
            raise CacheUnavailableError(f"Redis SET {key} failed: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["RedisCache"]
