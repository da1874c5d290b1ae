from datetime import date, datetime, timedelta, timezone

import pytest

from daily_commit_checker.date_window import (
    civil_date_of,
    compute_window,
    parse_timestamp,
    parse_utc_offset,
    today_in,
)

from .conftest import KST, NOW


def test_today_rolls_over_in_fixed_offset():
    assert today_in(KST, NOW) == date(2024, 3, 6)
    assert today_in(timezone.utc, NOW) == date(2024, 3, 5)


def test_naive_now_is_treated_as_utc():
    assert today_in(KST, datetime(2024, 3, 5, 23, 30)) == date(2024, 3, 6)


def test_window_spans_civil_day_with_offset():
    window = compute_window(KST, NOW)

    assert window.day == date(2024, 3, 6)
    assert window.start_iso == "2024-03-06T00:00:00+09:00"
    assert window.end_iso == "2024-03-06T23:59:59+09:00"
    assert window.tz is KST


def test_window_uses_current_time_by_default():
    before = datetime.now(timezone.utc).date()
    window = compute_window(timezone.utc)
    after = datetime.now(timezone.utc).date()
    assert window.day in {before, after}


def test_parse_timestamp_handles_zulu_and_naive():
    assert parse_timestamp("2024-03-06T01:00:00Z") == datetime(2024, 3, 6, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2024-03-06T01:00:00").tzinfo == timezone.utc


def test_civil_date_of_crosses_midnight():
    assert civil_date_of("2024-03-05T16:00:00Z", KST) == date(2024, 3, 6)
    assert civil_date_of("2024-03-05T14:59:59Z", KST) == date(2024, 3, 5)


@pytest.mark.parametrize(
    "text, offset",
    [
        ("+09:00", timedelta(hours=9)),
        ("+0900", timedelta(hours=9)),
        ("UTC+9", timedelta(hours=9)),
        ("-05:30", timedelta(hours=-5, minutes=-30)),
        ("UTC", timedelta(0)),
        ("z", timedelta(0)),
    ],
)
def test_parse_utc_offset(text, offset):
    assert parse_utc_offset(text).utcoffset(None) == offset


def test_parse_iana_zone():
    tz = parse_utc_offset("Asia/Seoul")
    assert datetime(2024, 3, 6, tzinfo=tz).utcoffset() == timedelta(hours=9)


@pytest.mark.parametrize("text", ["+25:00", "Mars/Olympus", "tomorrow"])
def test_parse_utc_offset_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_utc_offset(text)
