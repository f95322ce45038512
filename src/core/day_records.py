"""Day-record bookkeeping on top of a digest chat.

Implements the DayRecordStore port: one message per calendar day, created
lazily and registered in the month maps of the durable state.
"""

from __future__ import annotations

import logging
from datetime import date

from core.days import each_day_of_month
from core.formatting import append_to_record, day_record_text
from core.models import MonthKey, RecordHandle
from core.ports import ChannelPort, StateStore

LOGGER = logging.getLogger(__name__)


class DayRecordBook:
    """Maps (year, month, day) to digest messages, creating them on demand."""

    def __init__(self, channel: ChannelPort, state_store: StateStore) -> None:
        self._channel = channel
        self._state_store = state_store

    async def ensure_month(self, year: int, month: int) -> None:
        """Create records for every day of the month that has none yet."""

        for day in each_day_of_month(year, month):
            await self._register(day)

    async def ensure_day(self, year: int, month: int, day: int) -> RecordHandle:
        """Return the day's handle, creating the record once if needed.

        A month touched for the first time is scaffolded completely before
        the requested day is returned.
        """

        target = date(year, month, day)
        key = str(MonthKey.of(target))
        if key not in self._state_store.load().month_maps:
            LOGGER.info("Scaffolding digest month %s", key)
            await self.ensure_month(year, month)
        return await self._register(target)

    async def get(self, handle: RecordHandle) -> str:
        return await self._channel.read(handle)

    async def append_line(self, handle: RecordHandle, text: str) -> None:
        content = await self.get(handle)
        await self._channel.edit(handle, append_to_record(content, text))

    async def _register(self, day: date) -> RecordHandle:
        key = str(MonthKey.of(day))
        existing = self._state_store.load().month_maps.get(key, {}).get(day.day)
        if existing is not None:
            return existing

        handle = await self._channel.post(day_record_text(day))

        # Reload: the post may have taken a while and the map must be saved
        # after every single new entry.
        state = self._state_store.load()
        month_map = state.month_maps.setdefault(key, {})
        handle = month_map.setdefault(day.day, handle)
        self._state_store.save(state)
        LOGGER.info("Created day record %s for %s", handle, day.isoformat())
        return handle
