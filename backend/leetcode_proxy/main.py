import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .aggregator import ProfileAggregator
from .cache import MemoryCache, RedisCache
from .config import Settings, get_settings
from .errors import ProxyError, UpstreamUnavailableError
from .logging_config import configure_logging
from .upstream import LeetCodeClient
from .user_routes import get_aggregator, router as user_router

configure_logging()
logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Error fetching full user data"


def _build_cache(settings: Settings):
    if settings.redis_url:
        return RedisCache(settings.redis_url)
    logger.warning("UPSTASH_REDIS_URL is not set; using the in-process memory cache")
    return MemoryCache()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    cache = _build_cache(settings)
    await cache.connect()
    client = LeetCodeClient(settings.graphql_url, timeout=settings.upstream_timeout_seconds)
    app.state.aggregator = ProfileAggregator(client, cache, ttl_seconds=settings.cache_ttl_seconds)
    try:
        yield
    finally:
        await client.aclose()
        await cache.close()
        app.state.aggregator = None


settings_snapshot = get_settings()
logger.info("Backend starting with LeetCode GraphQL URL: %s", settings_snapshot.graphql_url)
logger.info("Redis cache configured: %s", bool(settings_snapshot.redis_url))

app = FastAPI(title="LeetCode Profile Proxy", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings_snapshot.cors_origin],
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)
app.include_router(user_router)


@app.exception_handler(ProxyError)
async def proxy_error_handler(request: Request, exc: ProxyError) -> PlainTextResponse:
    if isinstance(exc, UpstreamUnavailableError) and exc.graphql_errors:
        logger.error("GraphQL error (%s): %s %s", exc.kind.value, exc.message, exc.graphql_errors)
    else:
        logger.error("Profile request failed (%s): %s", exc.kind.value, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.exception("Unhandled error while serving %s", request.url.path)
    return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)


@app.get("/healthz")
def health(request: Request, settings: Settings = Depends(get_settings)) -> Dict[str, str]:
    aggregator = getattr(request.app.state, "aggregator", None)
    backend = getattr(aggregator.cache, "backend", "unknown") if aggregator else ("redis" if settings.redis_url else "memory")
    return {"status": "ok", "cache": backend}


__all__ = ["app", "get_aggregator", "lifespan"]
