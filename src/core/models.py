"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional

from core.errors import EndBeforeStartError

# Telegram message id of a posted day record.
RecordHandle = int


@dataclass(frozen=True)
class Interval:
    """A validated absence period in naive local wall-clock time."""

    start: datetime
    end: datetime
    has_explicit_times: bool

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise EndBeforeStartError("Ende liegt vor dem Beginn.")

    @property
    def start_day(self) -> date:
        return self.start.date()

    @property
    def end_day(self) -> date:
        return self.end.date()


@dataclass(frozen=True)
class MonthKey:
    """Lookup key for one month of day records, rendered as ``YYYY-MM``."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @classmethod
    def of(cls, day: date) -> "MonthKey":
        return cls(day.year, day.month)

    @classmethod
    def parse(cls, value: str) -> "MonthKey":
        year_part, sep, month_part = value.strip().partition("-")
        if not sep or len(year_part) != 4 or len(month_part) != 2:
            raise ValueError(f"Invalid month key: {value!r}")
        return cls(int(year_part), int(month_part))


@dataclass
class AbsenceState:
    """Durable process-wide state, loaded and saved as a whole.

    - month_maps: ``YYYY-MM`` -> day of month -> record handle
    - last_panel_message_id: instruction panel currently shown
    - last_message_ids: highest announcement id processed per source
    """

    month_maps: Dict[str, Dict[int, RecordHandle]] = field(default_factory=dict)
    last_panel_message_id: Optional[int] = None
    last_message_ids: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class Submission:
    """What a member asked for: raw interval text, who, and why."""

    raw_interval: str
    reporter: str
    reason: str


@dataclass(frozen=True)
class SubmissionContext:
    """Minimal announcement message context used by the processor."""

    source_key: str
    chat_id: int
    message_id: int
    date: datetime
    text: str
    reporter: str


@dataclass(frozen=True)
class DayEntry:
    """One line written into the record of one calendar day."""

    day: date
    label: str
    line: str
