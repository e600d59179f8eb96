from __future__ import annotations

import json
import os
from collections import Counter
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

os.environ["UPSTASH_REDIS_URL"] = ""

from leetcode_proxy.aggregator import ProfileAggregator  # noqa: E402
from leetcode_proxy.cache import MemoryCache  # noqa: E402
from leetcode_proxy.telemetry import TelemetryEvent, clear_listeners, register_listener  # noqa: E402

REFERENCE_TODAY = date(2024, 6, 15)


def day_timestamp(year: int, month: int, day: int) -> str:
    return str(int(datetime(year, month, day, tzinfo=timezone.utc).timestamp()))


def sample_bundle(username: str) -> Dict[str, Any]:
    return {
        "matchedUser": {
            "username": username,
            "profile": {
                "realName": "Alice Liddell",
                "userAvatar": "https://assets.leetcode.com/users/alice/avatar.png",
                "ranking": 10423,
                "countryName": "United Kingdom",
                "reputation": 12,
                "aboutMe": "",
                "school": "Oxford",
                "websites": ["https://alice.dev"],
                "skillTags": ["python", "graphs"],
                "company": None,
                "jobTitle": None,
            },
            "submitStatsGlobal": {
                "acSubmissionNum": [
                    {"difficulty": "All", "count": 412, "submissions": 930},
                    {"difficulty": "Easy", "count": 180, "submissions": 301},
                ],
                "totalSubmissionNum": [
                    {"difficulty": "All", "count": 450, "submissions": 1402},
                ],
            },
        },
        "userContestRanking": {
            "attendedContestsCount": 2,
            "rating": 1734.5,
            "globalRanking": 40210,
            "topPercentage": 12.4,
            "badge": None,
        },
        "userContestRankingHistory": [
            {
                "attended": True,
                "trendDirection": "UP",
                "problemsSolved": 3,
                "totalProblems": 4,
                "finishTimeInSeconds": 3120,
                "rating": 1650.2,
                "ranking": 2210,
                "contest": {"title": "Weekly Contest 390", "startTime": 1710642600},
            },
            {
                "attended": True,
                "trendDirection": "UP",
                "problemsSolved": 4,
                "totalProblems": 4,
                "finishTimeInSeconds": 2800,
                "rating": 1734.5,
                "ranking": 980,
                "contest": {"title": "Weekly Contest 391", "startTime": 1711247400},
            },
        ],
    }


def sample_calendars() -> Dict[int, Dict[str, int]]:
    return {
        2023: {
            day_timestamp(2023, 12, 31): 2,
            day_timestamp(2023, 5, 31): 7,
            day_timestamp(2023, 6, 1): 3,
        },
        2024: {
            day_timestamp(2024, 6, 15): 1,
            day_timestamp(2024, 1, 1): 4,
            day_timestamp(2024, 3, 10): 5,
        },
    }


class FakeLeetCodeClient:
    """Stands in for LeetCodeClient and counts calls per query."""

    def __init__(self, users: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        self.users = users or {}
        self.calls: Counter = Counter()

    def add_user(
        self,
        username: str,
        *,
        languages: Optional[List[Dict[str, Any]]] = None,
        calendars: Optional[Dict[int, Any]] = None,
    ) -> None:
        self.users[username] = {
            "bundle": sample_bundle(username),
            "languages": languages if languages is not None else [
                {"languageName": "Python3", "problemsSolved": 301},
                {"languageName": "C++", "problemsSolved": 77},
            ],
            "calendars": calendars if calendars is not None else sample_calendars(),
        }

    async def fetch_profile_bundle(self, username: str) -> Dict[str, Any]:
        self.calls["profile"] += 1
        user = self.users.get(username)
        if user is None:
            return {
                "data": {"matchedUser": None, "userContestRanking": None, "userContestRankingHistory": None},
                "errors": [{"message": "That user does not exist."}],
            }
        return {"data": user["bundle"]}

    async def fetch_language_stats(self, username: str) -> Dict[str, Any]:
        self.calls["languages"] += 1
        user = self.users.get(username)
        if user is None:
            return {"data": {"matchedUser": None}}
        return {"data": {"matchedUser": {"languageProblemCount": user["languages"]}}}

    async def fetch_calendar(self, username: str, year: int) -> Dict[str, Any]:
        self.calls[f"calendar:{year}"] += 1
        user = self.users.get(username)
        if user is None:
            return {"data": {"matchedUser": None}}
        calendar = user["calendars"].get(year, {})
        if isinstance(calendar, dict):
            calendar = json.dumps(calendar)
        return {"data": {"matchedUser": {"userCalendar": {"submissionCalendar": calendar}}}}


@pytest.fixture
def fake_client() -> FakeLeetCodeClient:
    client = FakeLeetCodeClient()
    client.add_user("alice")
    return client


@pytest.fixture
def memory_cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def aggregator(fake_client: FakeLeetCodeClient, memory_cache: MemoryCache) -> ProfileAggregator:
    return ProfileAggregator(fake_client, memory_cache, today=lambda: REFERENCE_TODAY)


@pytest.fixture
def events():
    collected: List[TelemetryEvent] = []
    clear_listeners()
    register_listener(collected.append)
    yield collected
    clear_listeners()
