from datetime import datetime, timedelta, timezone

import pytest

from newrelic_cli.exceptions import TimeValidationError
from newrelic_cli.models.responses import Deployment
from newrelic_cli.time_utils import TimeParser, filter_by_time, parse_deployment_timestamp, parse_flexible_time


def test_today_is_local_midnight():
    today = parse_flexible_time("today")
    now = datetime.now().astimezone()
    assert (today.hour, today.minute, today.second) == (0, 0, 0)
    assert today.date() == now.date()


def test_yesterday_is_one_calendar_day_before_today():
    base = datetime(2024, 3, 10, 15, 30)
    today = parse_flexible_time("today", base)
    yesterday = parse_flexible_time("Yesterday", base)
    assert (yesterday.year, yesterday.month, yesterday.day) == (2024, 3, 9)
    assert (today.year, today.month, today.day) == (2024, 3, 10)


def test_days_ago_is_calendar_based():
    base = datetime(2024, 3, 10, 12, 0)
    result = parse_flexible_time("7 days ago", base)
    assert (result.year, result.month, result.day) == (2024, 3, 3)
    assert (result.hour, result.minute) == (12, 0)


def test_hours_ago_is_duration_based():
    result = parse_flexible_time("2 hours ago")
    expected = datetime.now().astimezone() - timedelta(hours=2)
    assert abs((result - expected).total_seconds()) < 1


def test_month_arithmetic_rolls_overflowing_days_forward():
    base = datetime(2023, 3, 31, 9, 0)
    result = parse_flexible_time("1 month ago", base)
    assert (result.month, result.day) == (3, 3)


@pytest.mark.parametrize("value, expected", [
    ("2024-01-15", datetime(2024, 1, 15, tzinfo=timezone.utc)),
    ("2024-01-15T10:30:00Z", datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)),
    ("2024-01-15 10:30:00", datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)),
    ("01/15/2024", datetime(2024, 1, 15, tzinfo=timezone.utc)),
    ("Jan 15, 2024", datetime(2024, 1, 15, tzinfo=timezone.utc)),
])
def test_absolute_formats_without_zone_are_utc(value, expected):
    assert parse_flexible_time(value) == expected


def test_rfc3339_keeps_offset_and_accepts_nanoseconds():
    result = parse_flexible_time("2024-01-15T10:30:00.123456789+02:00")
    assert result.utcoffset() == timedelta(hours=2)
    assert result.microsecond == 123456


def test_empty_string_is_rejected():
    with pytest.raises(TimeValidationError, match="empty time string"):
        parse_flexible_time("   ")


def test_garbage_is_rejected():
    with pytest.raises(TimeValidationError, match="unable to parse time: not a date"):
        parse_flexible_time("not a date")


@pytest.mark.parametrize("value", [
    "2100 years ago",
    "99999999 days ago",
    "99999999999999 hours ago",
    "999999999999 months ago",
])
def test_out_of_range_offsets_are_rejected(value):
    with pytest.raises(TimeValidationError, match=f"unable to parse time: {value}"):
        parse_flexible_time(value)


@pytest.mark.parametrize("value", ["2024-1-5", "1/5/2024", "2024-01-15 9:05:00"])
def test_absolute_formats_require_zero_padding(value):
    with pytest.raises(TimeValidationError, match="unable to parse time"):
        parse_flexible_time(value)


def test_padded_absolute_formats():
    assert parse_flexible_time("01/05/2024") == datetime(2024, 1, 5, tzinfo=timezone.utc)
    assert parse_flexible_time("2024-01-15 09:05:00") == datetime(2024, 1, 15, 9, 5, tzinfo=timezone.utc)
    assert parse_flexible_time("Jan 5, 2024") == datetime(2024, 1, 5, tzinfo=timezone.utc)


def test_deployment_timestamp_parser_ignores_keywords():
    with pytest.raises(TimeValidationError, match="unable to parse deployment timestamp"):
        parse_deployment_timestamp("yesterday")
    assert parse_deployment_timestamp("2024-01-15T10:30:00+00:00").day == 15


def deployments(*timestamps):
    return [Deployment(id=i, timestamp=ts) for i, ts in enumerate(timestamps)]


def test_filter_by_time_bounds_are_inclusive():
    records = deployments("2024-01-01T00:00:00Z", "2024-01-15T00:00:00Z", "2024-02-01T00:00:00Z")
    since = datetime(2024, 1, 1, tzinfo=timezone.utc)
    until = datetime(2024, 1, 15, tzinfo=timezone.utc)
    kept = filter_by_time(records, since, until)
    assert [r.id for r in kept] == [0, 1]


def test_filter_by_time_keeps_unparseable_timestamps():
    records = deployments("garbage", "2020-01-01T00:00:00Z")
    since = datetime(2024, 1, 1, tzinfo=timezone.utc)
    kept = filter_by_time(records, since=since)
    assert [r.timestamp for r in kept] == ["garbage"]


def test_filter_by_time_without_bounds_passes_everything():
    records = deployments("garbage", "2020-01-01T00:00:00Z")
    assert filter_by_time(records) == records


def test_to_epoch_seconds():
    assert TimeParser.to_epoch_seconds(datetime(2024, 1, 1, tzinfo=timezone.utc)) == 1704067200
