"""Cache contract plus a process-local TTL backend."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol


def profile_cache_key(username: str) -> str:
    return f"user:{username}"


def rolling_cache_key(username: str, last_year: int, this_year: int) -> str:
    return f"user:rolling:{username}:{last_year}-{this_year}"


class CacheClient(Protocol):
    """Key-value store holding JSON strings with a per-key expiry."""

    async def connect(self) -> None:  # pragma: no cover - protocol definition
        ...

    async def get(self, key: str) -> Optional[str]:  # pragma: no cover - protocol definition
        ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:  # pragma: no cover - protocol definition
        ...

    async def close(self) -> None:  # pragma: no cover - protocol definition
        ...


@dataclass
class _CacheEntry:
    value: str
    expires_at: float


class MemoryCache:
    """Process-local cache used when no Redis URL is configured."""

    backend = "memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, _CacheEntry] = {}

    async def connect(self) -> None:
        return None

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError("Cache TTL must be positive.")
        now = self._clock()
        self._evict_expired(now)
        self._entries[key] = _CacheEntry(value=value, expires_at=now + ttl_seconds)

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._clock() < entry.expires_at

    def clear(self) -> None:
        self._entries.clear()

    async def close(self) -> None:
        self.clear()


__all__ = ["CacheClient", "MemoryCache", "profile_cache_key", "rolling_cache_key"]
