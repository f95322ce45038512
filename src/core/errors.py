"""Error types raised by the core.

Parse errors are user-recoverable and never reach the store layer. Day
record errors wrap whatever the channel or state store raised for one day.
"""

from __future__ import annotations

from datetime import date


class AbmeldungError(Exception):
    """Base class for all domain errors."""


class IntervalParseError(AbmeldungError, ValueError):
    """Raw interval text was rejected before any store call."""

    kind = "parse_error"


class MalformedInputError(IntervalParseError):
    """Text matches none of the supported date/time grammars."""

    kind = "malformed_input"


class EndBeforeStartError(IntervalParseError):
    """The range is well formed but ends before it starts."""

    kind = "end_before_start"


class IndefiniteNotAllowedError(IntervalParseError):
    """Text contains a word meaning "indefinite" or "forever"."""

    kind = "indefinite_not_allowed"


class DayRecordError(AbmeldungError):
    """Fetching, creating, or editing the record of one day failed."""

    def __init__(self, day: date, message: str = "") -> None:
        super().__init__(message or f"Day record update failed for {day.isoformat()}")
        self.day = day


class RecordMissingError(AbmeldungError, LookupError):
    """A registered handle no longer resolves to a message."""

    def __init__(self, handle: int) -> None:
        super().__init__(f"Record {handle} no longer exists")
        self.handle = handle
