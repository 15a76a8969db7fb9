from datetime import datetime, timezone
import os
import time

import pytest

from run_import.exceptions import ParseError
from run_import.timestamps import date_range_to_timestamp, day_end, day_start


def test_date_range_to_timestamp():
    date_range = "2021-07-10 09:05:06 - 2021-07-10 10:10:43"
    assert date_range_to_timestamp(date_range) == 1625907906


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="tzset is not available")
@pytest.mark.parametrize("tz", ["America/New_York", "Asia/Tokyo", "Europe/London"])
def test_date_range_ignores_host_timezone(monkeypatch, tz):
    monkeypatch.setenv("TZ", tz)
    time.tzset()
    try:
        assert date_range_to_timestamp("2021-07-10 09:05:06 - 2021-07-10 10:10:43") == 1625907906
    finally:
        monkeypatch.undo()
        time.tzset()


def test_date_range_offset_is_ignored():
    assert date_range_to_timestamp("2021-07-10 09:05:06+01:00 - 2021-07-10 10:10:43+01:00") == 1625907906


@pytest.mark.parametrize(
    "date_range",
    [
        "2021-07-10 09:05:06",
        "2021-07-10 09:05:06 - 2021-07-10 10:10:43 - 2021-07-10 11:00:00",
        "yesterday - today",
        "2021-07-10 - 2021-07-10 10:10:43",
        "",
    ],
)
def test_date_range_invalid(date_range):
    with pytest.raises(ParseError):
        date_range_to_timestamp(date_range)


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        date_range_to_timestamp("not a range")


def test_day_bounds():
    timestamp = date_range_to_timestamp("2021-10-04 08:07:18 - 2021-10-04 08:40:04")

    assert day_start(timestamp) == datetime(2021, 10, 4, tzinfo=timezone.utc)
    assert day_end(timestamp) == datetime(2021, 10, 4, 23, 59, 59, 999000, tzinfo=timezone.utc)
    assert day_start(timestamp).isoformat(timespec="milliseconds") == "2021-10-04T00:00:00.000+00:00"
    assert day_end(timestamp).isoformat(timespec="milliseconds") == "2021-10-04T23:59:59.999+00:00"
