"""Cache-aware aggregation of LeetCode profile, contest, language and calendar data."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Protocol

from pydantic import ValidationError

from .cache import CacheClient, profile_cache_key, rolling_cache_key
from .errors import CacheUnavailableError, MalformedResponseError, UserNotFoundError
from .models import ExtraStats, LanguageStat, UserBundle, UserProfileResponse
from .submission_calendar import (
    calendar_from_response,
    merge_calendars,
    normalize_calendar,
    rolling_window_cutoff,
)
from .telemetry import emit_event

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


class UpstreamClient(Protocol):
    async def fetch_profile_bundle(self, username: str) -> Dict[str, Any]:  # pragma: no cover - protocol definition
        ...

    async def fetch_language_stats(self, username: str) -> Dict[str, Any]:  # pragma: no cover - protocol definition
        ...

    async def fetch_calendar(self, username: str, year: int) -> Dict[str, Any]:  # pragma: no cover - protocol definition
        ...


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _language_stats(body: Dict[str, Any]) -> List[LanguageStat]:
    data = body.get("data") or {}
    user = data.get("matchedUser") or {}
    rows = user.get("languageProblemCount") or []
    try:
        return [
            LanguageStat(language=row["languageName"], problems_solved=row.get("problemsSolved") or 0)
            for row in rows
        ]
    except (KeyError, TypeError, AttributeError, ValidationError) as exc:
        raise MalformedResponseError(f"Unexpected language statistics payload: {exc}") from exc


class ProfileAggregator:
    """Combines two independently cached fetch paths into one profile payload."""

    def __init__(
        self,
        client: UpstreamClient,
        cache: CacheClient,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self._today = today or _utc_today

    async def _cache_get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            raw = await self.cache.get(key)
        except CacheUnavailableError as exc:
            logger.warning("Cache read failed, falling back to upstream: %s", exc)
            emit_event("cache_unavailable", key=key, operation="get")
            return None
        if raw is None:
            emit_event("cache_miss", key=key)
            return None
        try:
            value = json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry %s", key)
            emit_event("cache_miss", key=key)
            return None
        if not isinstance(value, dict):
            logger.warning("Discarding non-object cache entry %s", key)
            emit_event("cache_miss", key=key)
            return None
        emit_event("cache_hit", key=key)
        return value

    async def _cache_set(self, key: str, value: Dict[str, Any]) -> None:
        try:
            await self.cache.set(key, json.dumps(value), self.ttl_seconds)
        except CacheUnavailableError as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)
            emit_event("cache_unavailable", key=key, operation="set")

    async def fetch_user_data(self, username: str) -> UserBundle:
        """Profile, submission stats and contest data, cached under ``user:<username>``."""
        key = profile_cache_key(username)
        cached = await self._cache_get(key)
        if cached is not None:
            try:
                return UserBundle.model_validate(cached)
            except ValidationError:
                logger.warning("Cached profile for %s no longer validates; refetching", username)

        body = await self.client.fetch_profile_bundle(username)
        data = body.get("data")
        if not isinstance(data, dict) or not data.get("matchedUser"):
            raise UserNotFoundError(username)
        try:
            bundle = UserBundle.model_validate(data)
        except ValidationError as exc:
            raise MalformedResponseError(f"Unexpected profile payload for {username}: {exc}") from exc

        await self._cache_set(key, bundle.to_json_dict())
        return bundle

    async def fetch_extra_stats(self, username: str) -> ExtraStats:
        """Language counts plus the trailing twelve-month submission calendar."""
        today = self._today()
        this_year = today.year
        last_year = this_year - 1
        key = rolling_cache_key(username, last_year, this_year)

        cached = await self._cache_get(key)
        if cached is not None:
            try:
                return ExtraStats.model_validate(cached)
            except ValidationError:
                logger.warning("Cached rolling stats for %s no longer validate; refetching", username)

        language_body, last_year_body, this_year_body = await asyncio.gather(
            self.client.fetch_language_stats(username),
            self.client.fetch_calendar(username, last_year),
            self.client.fetch_calendar(username, this_year),
        )

        cutoff = rolling_window_cutoff(today)
        calendar = merge_calendars(
            normalize_calendar(calendar_from_response(last_year_body), cutoff),
            normalize_calendar(calendar_from_response(this_year_body), cutoff),
        )
        extra = ExtraStats(language_stats=_language_stats(language_body), calendar=calendar)

        await self._cache_set(key, extra.to_json_dict())
        return extra

    async def fetch_full_profile(self, username: str) -> UserProfileResponse:
        emit_event("profile_request", username=username)
        bundle, extra = await asyncio.gather(
            self.fetch_user_data(username),
            self.fetch_extra_stats(username),
        )
        return UserProfileResponse.from_parts(bundle, extra)


__all__ = ["DEFAULT_TTL_SECONDS", "ProfileAggregator", "UpstreamClient"]
