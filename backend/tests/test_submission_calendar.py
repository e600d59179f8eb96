from __future__ import annotations

import json
from datetime import date, datetime, timezone

import pytest

from conftest import day_timestamp
from leetcode_proxy.errors import MalformedResponseError
from leetcode_proxy.models import CalendarEntry
from leetcode_proxy.submission_calendar import (
    calendar_from_response,
    merge_calendars,
    normalize_calendar,
    rolling_window_cutoff,
)


def test_rolling_window_cutoff_is_first_of_month_one_year_back() -> None:
    assert rolling_window_cutoff(date(2024, 6, 15)) == date(2023, 6, 1)
    assert rolling_window_cutoff(date(2024, 2, 29)) == date(2023, 2, 1)
    assert rolling_window_cutoff(date(2025, 1, 1)) == date(2024, 1, 1)


def test_single_timestamp_maps_to_its_utc_date() -> None:
    # 23:59:59 UTC still belongs to the same calendar day.
    late = int(datetime(2024, 3, 10, 23, 59, 59, tzinfo=timezone.utc).timestamp())
    entries = normalize_calendar({str(late): 9}, date(2024, 1, 1))
    assert entries == [CalendarEntry(date="2024-03-10", count=9)]


def test_parses_json_string_and_sorts_ascending() -> None:
    payload = json.dumps(
        {
            day_timestamp(2024, 5, 2): 1,
            day_timestamp(2024, 1, 20): 4,
            day_timestamp(2024, 3, 7): 2,
        }
    )
    entries = normalize_calendar(payload, date(2024, 1, 1))
    assert [entry.date for entry in entries] == ["2024-01-20", "2024-03-07", "2024-05-02"]
    assert [entry.count for entry in entries] == [4, 2, 1]


def test_cutoff_is_inclusive() -> None:
    payload = {
        day_timestamp(2023, 5, 31): 7,
        day_timestamp(2023, 6, 1): 3,
    }
    entries = normalize_calendar(payload, rolling_window_cutoff(date(2024, 6, 15)))
    assert [entry.date for entry in entries] == ["2023-06-01"]


@pytest.mark.parametrize("payload", [None, "", "{}", {}])
def test_empty_payloads_yield_no_entries(payload) -> None:
    assert normalize_calendar(payload, date(2023, 6, 1)) == []


def test_unparseable_payload_raises_malformed_response() -> None:
    with pytest.raises(MalformedResponseError):
        normalize_calendar("{not json", date(2023, 6, 1))
    with pytest.raises(MalformedResponseError):
        normalize_calendar("[1, 2]", date(2023, 6, 1))
    with pytest.raises(MalformedResponseError):
        normalize_calendar({"yesterday": 1}, date(2023, 6, 1))


def test_concatenated_years_stay_sorted() -> None:
    cutoff = rolling_window_cutoff(date(2024, 6, 15))
    last_year = normalize_calendar({day_timestamp(2023, 12, 31): 2, day_timestamp(2023, 7, 4): 1}, cutoff)
    this_year = normalize_calendar({day_timestamp(2024, 6, 1): 5, day_timestamp(2024, 1, 1): 3}, cutoff)
    merged = merge_calendars(last_year, this_year)
    dates = [entry.date for entry in merged]
    assert dates == ["2023-07-04", "2023-12-31", "2024-01-01", "2024-06-01"]
    assert dates == sorted(dates)


def test_merge_keeps_later_part_for_repeated_dates() -> None:
    first = [CalendarEntry(date="2024-01-01", count=1)]
    second = [CalendarEntry(date="2024-01-01", count=6), CalendarEntry(date="2024-01-02", count=2)]
    merged = merge_calendars(first, second)
    assert merged == [CalendarEntry(date="2024-01-01", count=6), CalendarEntry(date="2024-01-02", count=2)]


def test_calendar_from_response_tolerates_missing_user() -> None:
    assert calendar_from_response({"data": {"matchedUser": None}}) is None
    assert calendar_from_response({"data": None}) is None
    body = {"data": {"matchedUser": {"userCalendar": {"submissionCalendar": "{}"}}}}
    assert calendar_from_response(body) == "{}"


@pytest.mark.parametrize(
    "payload",
    [
        {"99999999999999999": 1},
        {day_timestamp(2024, 1, 1): "many"},
        {day_timestamp(2024, 1, 1): None},
    ],
    ids=["timestamp-out-of-range", "non-numeric-count", "null-count"],
)
def test_unusable_calendar_values_raise_malformed_response(payload) -> None:
    with pytest.raises(MalformedResponseError):
        normalize_calendar(payload, date(2023, 6, 1))
