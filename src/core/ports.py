"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for state, chat, and day-record adapters
so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import AbsenceState, RecordHandle


class StateStore(Protocol):
    """Whole-value persistence of the durable absence state."""

    def load(self) -> AbsenceState:
        ...

    def save(self, state: AbsenceState) -> None:
        ...


class ChannelPort(Protocol):
    """Message operations on one chat."""

    async def post(self, text: str, reply_to: Optional[int] = None) -> RecordHandle:
        ...

    async def read(self, handle: RecordHandle) -> str:
        ...

    async def edit(self, handle: RecordHandle, text: str) -> None:
        ...

    async def delete(self, handle: RecordHandle) -> None:
        ...


class DayRecordStore(Protocol):
    """Idempotent per-day records the aggregator writes into."""

    async def ensure_day(self, year: int, month: int, day: int) -> RecordHandle:
        ...

    async def append_line(self, handle: RecordHandle, text: str) -> None:
        ...

    async def get(self, handle: RecordHandle) -> str:
        ...
