import os
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    redis_url: Optional[str] = Field(None, alias="UPSTASH_REDIS_URL")
    graphql_url: str = Field("https://leetcode.com/graphql", alias="LEETCODE_GRAPHQL_URL")
    cors_origin: str = Field("http://localhost:5173", alias="LEETCODE_PROXY_CORS_ORIGIN")
    cache_ttl_seconds: int = Field(3600, gt=0, alias="LEETCODE_PROXY_CACHE_TTL")
    upstream_timeout_seconds: Optional[float] = Field(None, gt=0, alias="LEETCODE_PROXY_UPSTREAM_TIMEOUT")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid backend configuration: {exc}") from exc
