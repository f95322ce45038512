"""Absence interval parsing (core domain).

Accepted forms, German day-first notation with fixed field widths:

- ``TT.MM.JJJJ``
- ``TT.MM.JJJJ - TT.MM.JJJJ``
- ``TT.MM.JJJJ HH:MM - TT.MM.JJJJ HH:MM`` (either time may be omitted)
- ``TT.MM.JJJJ HH:MM - HH:MM`` (same day)

A missing start time means 00:00, a missing end time means 23:59.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, Optional

from core.errors import (
    EndBeforeStartError,
    IndefiniteNotAllowedError,
    MalformedInputError,
)
from core.models import Interval

DEFAULT_INDEFINITE_MARKERS = ("unbestimmt", "unbefristet", "unendlich")

_DATE = r"([0-9]{2})\.([0-9]{2})\.([0-9]{4})"
_TIME = r"([0-9]{2}):([0-9]{2})"

RANGE_PATTERN = re.compile(
    rf"^{_DATE}(?: {_TIME})?\s*-\s*(?:{_DATE}(?: {_TIME})?|{_TIME})$"
)
SINGLE_PATTERN = re.compile(rf"^{_DATE}(?: {_TIME})?$")


def normalize_interval_text(raw: str) -> str:
    """Trim and collapse whitespace runs to single spaces."""

    return re.sub(r"\s+", " ", raw).strip()


def contains_indefinite_marker(raw: str, markers: Iterable[str] = DEFAULT_INDEFINITE_MARKERS) -> bool:
    lowered = raw.lower()
    return any(marker.lower() in lowered for marker in markers if marker)


def _instant(day: str, month: str, year: str, hour: Optional[str], minute: Optional[str],
             default_hour: int, default_minute: int) -> datetime:
    try:
        return datetime(
            int(year),
            int(month),
            int(day),
            int(hour) if hour is not None else default_hour,
            int(minute) if minute is not None else default_minute,
        )
    except ValueError as exc:
        # 31.02., month 13, 24:00 and friends are not real instants.
        raise MalformedInputError(f"Ungültiges Datum: {exc}") from exc


def _parse_range(match: re.Match) -> Interval:
    d1, mo1, y1, h1, mi1, d2, mo2, y2, h2, mi2, h_only, mi_only = match.groups()
    start = _instant(d1, mo1, y1, h1, mi1, 0, 0)

    if d2 is not None:
        end = _instant(d2, mo2, y2, h2, mi2, 23, 59)
        has_times = h1 is not None or h2 is not None
    else:
        end = _instant(d1, mo1, y1, h_only, mi_only, 23, 59)
        has_times = True

    if end < start:
        raise EndBeforeStartError("Ende liegt vor dem Beginn.")
    return Interval(start=start, end=end, has_explicit_times=has_times)


def _parse_single(match: re.Match) -> Interval:
    day, month, year, hour, minute = match.groups()
    start = _instant(day, month, year, hour, minute, 0, 0)
    if hour is None:
        end = start.replace(hour=23, minute=59)
    else:
        # A single timed instant keeps start == end.
        end = start
    return Interval(start=start, end=end, has_explicit_times=hour is not None)


def parse_interval(raw: str, indefinite_markers: Iterable[str] = DEFAULT_INDEFINITE_MARKERS) -> Interval:
    """Parse free-text absence wording into a validated Interval.

    Raises IndefiniteNotAllowedError when a marker word appears anywhere in
    the text (checked before the grammar), MalformedInputError when no
    grammar matches, and EndBeforeStartError for reversed ranges.
    """

    if contains_indefinite_marker(raw or "", indefinite_markers):
        raise IndefiniteNotAllowedError("Unbestimmte Zeiträume sind nicht erlaubt.")

    text = normalize_interval_text(raw or "")

    range_match = RANGE_PATTERN.match(text)
    if range_match:
        return _parse_range(range_match)

    single_match = SINGLE_PATTERN.match(text)
    if single_match:
        return _parse_single(single_match)

    raise MalformedInputError(f"Ungültiges Format: {text!r}")
