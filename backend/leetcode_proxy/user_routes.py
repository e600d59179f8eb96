"""Public profile endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from .aggregator import ProfileAggregator

router = APIRouter(tags=["user"])
logger = logging.getLogger(__name__)


def get_aggregator(request: Request) -> ProfileAggregator:
    aggregator = getattr(request.app.state, "aggregator", None)
    if aggregator is None:
        raise RuntimeError("Profile aggregator is not initialised.")
    return aggregator


@router.get("/user/{username}")
async def get_user(username: str, aggregator: ProfileAggregator = Depends(get_aggregator)) -> Dict[str, Any]:
    result = await aggregator.fetch_full_profile(username)
    logger.debug(
        "Served profile for %s (languages=%d, calendar_days=%d)",
        username,
        len(result.language_stats),
        len(result.calendar),
    )
    return result.to_json_dict()
