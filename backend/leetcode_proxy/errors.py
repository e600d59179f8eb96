"""Error kinds raised along the aggregation path and their HTTP statuses."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    CACHE_UNAVAILABLE = "cache_unavailable"
    MALFORMED_RESPONSE = "malformed_response"


class ProxyError(RuntimeError):
    """Base class for failures surfaced to HTTP callers."""

    kind: ErrorKind = ErrorKind.UPSTREAM_UNAVAILABLE
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UserNotFoundError(ProxyError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404

    def __init__(self, username: str) -> None:
        super().__init__(f'User "{username}" not found')
        self.username = username


class UpstreamUnavailableError(ProxyError):
    kind = ErrorKind.UPSTREAM_UNAVAILABLE
    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        upstream_status: Optional[int] = None,
        graphql_errors: Optional[List[Any]] = None,
    ) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.graphql_errors = graphql_errors or []


class MalformedResponseError(ProxyError):
    kind = ErrorKind.MALFORMED_RESPONSE
    status_code = 502


class CacheUnavailableError(ProxyError):
    kind = ErrorKind.CACHE_UNAVAILABLE
    status_code = 500


__all__ = [
    "CacheUnavailableError",
    "ErrorKind",
    "MalformedResponseError",
    "ProxyError",
    "UpstreamUnavailableError",
    "UserNotFoundError",
]
