"""Submission calendar normalisation for the trailing twelve-month window.

LeetCode returns ``submissionCalendar`` as a JSON-encoded object mapping the
unix timestamp of a UTC day to the number of submissions on that day. One
payload covers a single calendar year, so the rolling window is stitched from
the previous and the current year.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .errors import MalformedResponseError
from .models import CalendarEntry

CalendarPayload = Union[str, Mapping[str, Any], None]


def rolling_window_cutoff(today: date) -> date:
    """First day of the month one year before ``today``."""
    # Feb 29 lands on Feb 1 of the prior year; there is no rollover into March.
    return date(today.year - 1, today.month, 1)


def _parse_payload(submission_calendar: CalendarPayload) -> Mapping[str, Any]:
    if submission_calendar is None or submission_calendar == "":
        return {}
    if isinstance(submission_calendar, str):
        try:
            parsed = json.loads(submission_calendar)
        except ValueError as exc:
            raise MalformedResponseError(f"Unparseable submission calendar: {exc}") from exc
    else:
        parsed = submission_calendar
    if not isinstance(parsed, Mapping):
        raise MalformedResponseError("Submission calendar is not a timestamp mapping.")
    return parsed


def _utc_date(timestamp: str) -> date:
    try:
        seconds = int(timestamp)
    except (TypeError, ValueError) as exc:
        raise MalformedResponseError(f"Invalid calendar timestamp: {timestamp!r}") from exc
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError) as exc:
        raise MalformedResponseError(f"Calendar timestamp out of range: {timestamp!r}") from exc


def _submission_count(timestamp: str, count: Any) -> int:
    try:
        return int(count)
    except (TypeError, ValueError) as exc:
        raise MalformedResponseError(f"Invalid submission count for {timestamp!r}: {count!r}") from exc


def normalize_calendar(submission_calendar: CalendarPayload, cutoff: date) -> List[CalendarEntry]:
    """Convert one year's calendar into date-sorted entries on or after ``cutoff``."""
    parsed = _parse_payload(submission_calendar)
    kept = []
    for timestamp, count in parsed.items():
        day = _utc_date(timestamp)
        if day < cutoff:
            continue
        kept.append((day, _submission_count(timestamp, count)))
    kept.sort(key=lambda item: item[0])
    return [CalendarEntry(date=day.isoformat(), count=count) for day, count in kept]


def merge_calendars(*parts: Iterable[CalendarEntry]) -> List[CalendarEntry]:
    """Concatenate normalised years; a date repeated in a later part replaces the earlier one."""
    by_date: Dict[str, CalendarEntry] = {}
    for part in parts:
        for entry in part:
            by_date[entry.date] = entry
    return [by_date[key] for key in sorted(by_date)]


def calendar_from_response(body: Mapping[str, Any]) -> Optional[Any]:
    """Pull ``submissionCalendar`` out of a calendar query body, if present."""
    data = body.get("data") or {}
    user = data.get("matchedUser") or {}
    calendar = user.get("userCalendar") or {}
    return calendar.get("submissionCalendar")


__all__ = [
    "calendar_from_response",
    "merge_calendars",
    "normalize_calendar",
    "rolling_window_cutoff",
]
