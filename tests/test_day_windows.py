from __future__ import annotations

from datetime import date, datetime

from core.days import clip_to_day, days_in_month, each_day_inclusive, each_day_of_month
from core.formatting import WHOLE_DAY, window_label
from core.interval_parser import parse_interval
from core.models import Interval


def test_each_day_inclusive_single_day() -> None:
    assert list(each_day_inclusive(date(2025, 11, 17), date(2025, 11, 17))) == [date(2025, 11, 17)]


def test_each_day_inclusive_crosses_month_and_year() -> None:
    days = list(each_day_inclusive(date(2025, 12, 30), date(2026, 1, 2)))
    assert days == [
        date(2025, 12, 30),
        date(2025, 12, 31),
        date(2026, 1, 1),
        date(2026, 1, 2),
    ]


def test_each_day_inclusive_over_dst_switches() -> None:
    # Last Sunday of March and October in central Europe.
    spring = list(each_day_inclusive(date(2025, 3, 29), date(2025, 3, 31)))
    autumn = list(each_day_inclusive(date(2025, 10, 25), date(2025, 10, 27)))
    assert [d.day for d in spring] == [29, 30, 31]
    assert [d.day for d in autumn] == [25, 26, 27]


def test_each_day_inclusive_empty_when_reversed() -> None:
    assert list(each_day_inclusive(date(2025, 11, 18), date(2025, 11, 17))) == []


def test_month_lengths() -> None:
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2025, 2) == 28
    assert days_in_month(2025, 11) == 30
    assert len(list(each_day_of_month(2025, 12))) == 31


def test_clip_to_day_returns_overlap() -> None:
    interval = parse_interval("17.11.2025 09:00 - 18.11.2025 16:00")
    start, end = clip_to_day(interval, date(2025, 11, 17))
    assert start == datetime(2025, 11, 17, 9, 0)
    assert end.strftime("%H:%M") == "23:59"
    assert clip_to_day(interval, date(2025, 11, 19)) is None


def test_untimed_days_are_whole_day() -> None:
    interval = parse_interval("17.11.2025 - 20.11.2025")
    labels = [window_label(interval, day) for day in each_day_inclusive(interval.start_day, interval.end_day)]
    assert labels == [WHOLE_DAY] * 4


def test_timed_range_labels_per_day() -> None:
    interval = parse_interval("17.11.2025 09:00 - 18.11.2025 16:00")
    assert window_label(interval, date(2025, 11, 17)) == "09:00–23:59"
    assert window_label(interval, date(2025, 11, 18)) == "00:00–16:00"


def test_full_middle_day_collapses_to_whole_day() -> None:
    interval = parse_interval("17.11.2025 09:00 - 19.11.2025 16:00")
    assert window_label(interval, date(2025, 11, 18)) == WHOLE_DAY


def test_explicit_all_day_window_collapses_to_whole_day() -> None:
    interval = parse_interval("17.11.2025 00:00 - 17.11.2025 23:59")
    assert interval.has_explicit_times
    assert window_label(interval, date(2025, 11, 17)) == WHOLE_DAY


def test_same_day_shorthand_label() -> None:
    interval = parse_interval("17.11.2025 09:00 - 16:00")
    assert window_label(interval, date(2025, 11, 17)) == "09:00–16:00"


def test_single_instant_label() -> None:
    interval = parse_interval("17.11.2025 09:00")
    assert window_label(interval, date(2025, 11, 17)) == "09:00–09:00"


def test_timed_interval_outside_day_has_no_label() -> None:
    interval = Interval(
        start=datetime(2025, 11, 17, 9, 0),
        end=datetime(2025, 11, 17, 10, 0),
        has_explicit_times=True,
    )
    assert window_label(interval, date(2025, 11, 18)) is None
