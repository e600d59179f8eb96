import os
from logging.config import dictConfig

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# httpx logs every upstream request at INFO; keep it quiet unless debugging.
UPSTREAM_HTTP_LOGGERS = ("httpx", "httpcore")


def configure_logging() -> None:
    """Install the root handler; levels come from LEETCODE_PROXY_* variables."""
    level = os.getenv("LEETCODE_PROXY_LOG_LEVEL", "INFO").upper()
    http_level = "DEBUG" if os.getenv("LEETCODE_PROXY_DEBUG_HTTP", "0") == "1" else "WARNING"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": DEFAULT_LOG_FORMAT}},
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {name: {"level": http_level} for name in UPSTREAM_HTTP_LOGGERS},
            "root": {"handlers": ["default"], "level": level},
        }
    )
