from __future__ import annotations

import asyncio
from collections import Counter
from datetime import date

import pytest

from core.aggregator import AbsenceAggregator
from core.errors import DayRecordError
from core.interval_parser import parse_interval


class FakeDayStore:
    def __init__(self, fail_on: "date | None" = None) -> None:
        self.handles: dict[tuple[int, int, int], int] = {}
        self.ensure_calls: Counter = Counter()
        self.created = 0
        self.lines: dict[int, list[str]] = {}
        self.fail_on = fail_on

    async def ensure_day(self, year: int, month: int, day: int) -> int:
        if self.fail_on == date(year, month, day):
            raise RuntimeError("message deleted")
        key = (year, month, day)
        self.ensure_calls[key] += 1
        if key not in self.handles:
            self.created += 1
            self.handles[key] = 1000 + self.created
            self.lines[self.handles[key]] = []
        return self.handles[key]

    async def append_line(self, handle: int, text: str) -> None:
        self.lines[handle].append(text)

    async def get(self, handle: int) -> str:
        return "\n".join(self.lines[handle])

    def lines_for(self, year: int, month: int, day: int) -> list[str]:
        return self.lines[self.handles[(year, month, day)]]


def test_single_day_is_written_once() -> None:
    store = FakeDayStore()
    entries = asyncio.run(
        AbsenceAggregator(store).aggregate(parse_interval("17.11.2025"), "@anna", "Arzttermin")
    )
    assert [entry.day for entry in entries] == [date(2025, 11, 17)]
    assert store.lines_for(2025, 11, 17) == ["• @anna — ganztägig (Grund: Arzttermin)"]


def test_timed_two_day_range_gets_clipped_labels() -> None:
    store = FakeDayStore()
    interval = parse_interval("17.11.2025 09:00 - 18.11.2025 16:00")
    asyncio.run(AbsenceAggregator(store).aggregate(interval, "@anna", "Urlaub"))
    assert store.lines_for(2025, 11, 17) == ["• @anna — 09:00–23:59 (Grund: Urlaub)"]
    assert store.lines_for(2025, 11, 18) == ["• @anna — 00:00–16:00 (Grund: Urlaub)"]


def test_untimed_range_writes_every_day() -> None:
    store = FakeDayStore()
    entries = asyncio.run(
        AbsenceAggregator(store).aggregate(parse_interval("17.11.2025 - 20.11.2025"), "@ben", "")
    )
    assert [entry.day.day for entry in entries] == [17, 18, 19, 20]
    assert all(entry.label == "ganztägig" for entry in entries)
    assert store.lines_for(2025, 11, 19) == ["• @ben — ganztägig (Grund: —)"]


def test_same_day_shorthand() -> None:
    store = FakeDayStore()
    entries = asyncio.run(
        AbsenceAggregator(store).aggregate(parse_interval("17.11.2025 09:00 - 16:00"), "@ben", "Schule")
    )
    assert [(entry.day.day, entry.label) for entry in entries] == [(17, "09:00–16:00")]


def test_ensure_day_called_once_per_day_even_when_repeated() -> None:
    store = FakeDayStore()
    aggregator = AbsenceAggregator(store)
    interval = parse_interval("30.11.2025 - 02.12.2025")

    asyncio.run(aggregator.aggregate(interval, "@anna", "Urlaub"))
    assert set(store.ensure_calls) == {(2025, 11, 30), (2025, 12, 1), (2025, 12, 2)}
    assert all(count == 1 for count in store.ensure_calls.values())
    assert store.created == 3

    asyncio.run(aggregator.aggregate(interval, "@anna", "Urlaub"))
    # Records are reused; only the lines are appended again.
    assert store.created == 3
    assert len(store.lines_for(2025, 12, 1)) == 2


def test_failure_keeps_earlier_days_and_stops() -> None:
    store = FakeDayStore(fail_on=date(2025, 11, 19))
    interval = parse_interval("17.11.2025 - 20.11.2025")

    with pytest.raises(DayRecordError) as excinfo:
        asyncio.run(AbsenceAggregator(store).aggregate(interval, "@anna", "Urlaub"))

    assert excinfo.value.day == date(2025, 11, 19)
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert (2025, 11, 17) in store.handles
    assert (2025, 11, 18) in store.handles
    assert (2025, 11, 20) not in store.handles
