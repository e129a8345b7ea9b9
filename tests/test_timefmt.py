from datetime import date, datetime, timezone, timedelta

import pytest

from peluqueria.timefmt import (
    date_portion,
    format_display_date,
    parse_time,
    parse_timestamp,
    to_12h,
    to_24h,
)


@pytest.mark.parametrize("value, expected", [
    ("09:09", "09:09 a. m."),
    ("00:15", "12:15 a. m."),
    ("12:00", "12:00 p. m."),
    ("15:30", "03:30 p. m."),
    ("23:59", "11:59 p. m."),
    ("9:05 PM", "09:05 p. m."),
])
def test_to_12h(value, expected):
    assert to_12h(value) == expected


@pytest.mark.parametrize("value, expected", [
    ("09:09 a. m.", "09:09"),
    ("12:15 a. m.", "00:15"),
    ("12:40 p. m.", "12:40"),
    ("3:30 p.m.", "15:30"),
    ("03:30 p. m.", "15:30"),
    ("18:45", "18:45"),
])
def test_to_24h(value, expected):
    assert to_24h(value) == expected


def test_edit_form_time_survives_the_wire_format():
    assert to_24h(to_12h("09:09")) == "09:09"


@pytest.mark.parametrize("value", ["", "nueve", "24:00", "13:00 p. m.", "10:75"])
def test_invalid_times(value):
    assert parse_time(value) is None
    with pytest.raises(ValueError):
        to_12h(value)


def test_parse_timestamp_normalizes_to_naive_utc():
    assert parse_timestamp("2025-11-10T16:33:25Z") == datetime(2025, 11, 10, 16, 33, 25)
    assert parse_timestamp("2025-11-10T11:33:25-05:00") == datetime(2025, 11, 10, 16, 33, 25)
    aware = datetime(2025, 11, 10, 1, 0, tzinfo=timezone(timedelta(hours=2)))
    assert parse_timestamp(aware) == datetime(2025, 11, 9, 23, 0)


def test_parse_timestamp_accepts_dates():
    assert parse_timestamp("2025-11-10") == datetime(2025, 11, 10)
    assert parse_timestamp(date(2025, 11, 10)) == datetime(2025, 11, 10)


@pytest.mark.parametrize("value", [None, "", "no es fecha", "0001-01-01T00:00:00"])
def test_parse_timestamp_rejects(value):
    assert parse_timestamp(value) is None


def test_date_portion_and_display():
    assert date_portion("2025-11-10T16:33:25Z") == "2025-11-10"
    assert date_portion(None) is None
    assert format_display_date("2025-11-10T09:09:00") == "10/11/2025"
    assert format_display_date("") == "-"
