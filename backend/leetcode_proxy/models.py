"""Pydantic shapes for the upstream payload and the aggregated response."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class UpstreamModel(BaseModel):
    """Base for models that speak LeetCode's camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Profile(UpstreamModel):
    real_name: Optional[str] = None
    user_avatar: Optional[str] = None
    ranking: Optional[int] = None
    country_name: Optional[str] = None
    reputation: Optional[int] = None
    about_me: Optional[str] = None
    school: Optional[str] = None
    websites: Optional[List[str]] = None
    skill_tags: Optional[List[str]] = None
    company: Optional[str] = None
    job_title: Optional[str] = None


class SubmissionCount(UpstreamModel):
    difficulty: str
    count: int = 0
    submissions: int = 0


class SubmitStats(UpstreamModel):
    ac_submission_num: List[SubmissionCount] = Field(default_factory=list)
    total_submission_num: List[SubmissionCount] = Field(default_factory=list)


class ContestBadge(UpstreamModel):
    name: Optional[str] = None
    expired: Optional[bool] = None
    hover_text: Optional[str] = None
    icon: Optional[str] = None


class ContestRanking(UpstreamModel):
    attended_contests_count: Optional[int] = None
    rating: Optional[float] = None
    global_ranking: Optional[int] = None
    top_percentage: Optional[float] = None
    badge: Optional[ContestBadge] = None


class ContestInfo(UpstreamModel):
    title: Optional[str] = None
    start_time: Optional[int] = None


class ContestHistoryEntry(UpstreamModel):
    attended: Optional[bool] = None
    trend_direction: Optional[str] = None
    problems_solved: Optional[int] = None
    total_problems: Optional[int] = None
    finish_time_in_seconds: Optional[int] = None
    rating: Optional[float] = None
    ranking: Optional[int] = None
    contest: Optional[ContestInfo] = None


class MatchedUser(UpstreamModel):
    username: str
    profile: Optional[Profile] = None
    submit_stats_global: Optional[SubmitStats] = None


class UserBundle(UpstreamModel):
    """The ``data`` envelope of the combined profile and contest query."""

    matched_user: MatchedUser
    user_contest_ranking: Optional[ContestRanking] = None
    user_contest_ranking_history: List[ContestHistoryEntry] = Field(default_factory=list)

    @field_validator("user_contest_ranking_history", mode="before")
    @classmethod
    def _null_history(cls, value: Any) -> Any:
        return [] if value is None else value


class LanguageStat(UpstreamModel):
    language: str
    problems_solved: int = 0


class CalendarEntry(UpstreamModel):
    date: str
    count: int


class ExtraStats(UpstreamModel):
    language_stats: List[LanguageStat] = Field(default_factory=list)
    calendar: List[CalendarEntry] = Field(default_factory=list)


class UserProfileResponse(UpstreamModel):
    username: str
    profile: Optional[Profile] = None
    submit_stats_global: Optional[SubmitStats] = None
    user_contest_ranking: Optional[ContestRanking] = None
    user_contest_ranking_history: List[ContestHistoryEntry] = Field(default_factory=list)
    language_stats: List[LanguageStat] = Field(default_factory=list)
    calendar: List[CalendarEntry] = Field(default_factory=list)

    @classmethod
    def from_parts(cls, bundle: UserBundle, extra: ExtraStats) -> "UserProfileResponse":
        user = bundle.matched_user
        return cls(
            username=user.username,
            profile=user.profile,
            submit_stats_global=user.submit_stats_global,
            user_contest_ranking=bundle.user_contest_ranking,
            user_contest_ranking_history=list(bundle.user_contest_ranking_history),
            language_stats=list(extra.language_stats),
            calendar=list(extra.calendar),
        )


__all__ = [
    "CalendarEntry",
    "ContestBadge",
    "ContestHistoryEntry",
    "ContestInfo",
    "ContestRanking",
    "ExtraStats",
    "LanguageStat",
    "MatchedUser",
    "Profile",
    "SubmissionCount",
    "SubmitStats",
    "UserBundle",
    "UserProfileResponse",
]
