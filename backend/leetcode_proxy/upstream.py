"""Async client for the LeetCode GraphQL endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .errors import MalformedResponseError, UpstreamUnavailableError
from .queries import LANGUAGE_STATS_QUERY, USER_CALENDAR_QUERY, USER_PROFILE_QUERY
from .telemetry import emit_event

logger = logging.getLogger(__name__)

# LeetCode rejects requests without a browser-like agent and a same-site referer.
UPSTREAM_HEADERS = {
    "Content-Type": "application/json",
    "Referer": "https://leetcode.com",
    "User-Agent": "Mozilla/5.0",
}


def _operation_name(document: str) -> str:
    head = document.strip().split("(", 1)[0]
    parts = head.split()
    return parts[1] if len(parts) > 1 else "anonymous"


class LeetCodeClient:
    def __init__(
        self,
        graphql_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.graphql_url = graphql_url
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def query(self, document: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """POST one GraphQL document and return the decoded JSON body."""
        operation = _operation_name(document)
        emit_event("upstream_query", operation=operation, variables=variables)
        try:
            response = await self._client.post(
                self.graphql_url,
                json={"query": document, "variables": variables},
                headers=UPSTREAM_HEADERS,
            )
        except httpx.HTTPError as exc:
            emit_event("upstream_failure", operation=operation, error=str(exc))
            raise UpstreamUnavailableError(f"LeetCode request failed: {exc}") from exc

        if response.is_error:
            errors = _graphql_errors(response)
            emit_event("upstream_failure", operation=operation, status_code=response.status_code)
            raise UpstreamUnavailableError(
                f"LeetCode returned HTTP {response.status_code} for {operation}",
                upstream_status=response.status_code,
                graphql_errors=errors,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError(f"LeetCode returned a non-JSON body for {operation}") from exc
        if not isinstance(body, dict):
            raise MalformedResponseError(f"LeetCode returned an unexpected body for {operation}")

        if body.get("errors"):
            logger.warning("GraphQL errors for %s: %s", operation, body["errors"][:3])
        return body

    async def fetch_profile_bundle(self, username: str) -> Dict[str, Any]:
        return await self.query(USER_PROFILE_QUERY, {"username": username})

    async def fetch_language_stats(self, username: str) -> Dict[str, Any]:
        return await self.query(LANGUAGE_STATS_QUERY, {"username": username})

    async def fetch_calendar(self, username: str, year: int) -> Dict[str, Any]:
        return await self.query(USER_CALENDAR_QUERY, {"username": username, "year": year})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _graphql_errors(response: httpx.Response) -> list[Any]:
    try:
        body = response.json()
    except ValueError:
        return []
    if isinstance(body, dict) and isinstance(body.get("errors"), list):
        return body["errors"]
    return []


__all__ = ["LeetCodeClient", "UPSTREAM_HEADERS"]
