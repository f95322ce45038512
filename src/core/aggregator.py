"""Daily aggregation of one absence interval into per-day records."""

from __future__ import annotations

import logging
from typing import List

from core.days import each_day_inclusive
from core.errors import DayRecordError
from core.formatting import absence_line, window_label
from core.models import DayEntry, Interval
from core.ports import DayRecordStore

LOGGER = logging.getLogger(__name__)


class AbsenceAggregator:
    """Writes one absence line into the record of every day it covers."""

    def __init__(self, store: DayRecordStore) -> None:
        self._store = store

    async def aggregate(self, interval: Interval, reporter: str, reason: str) -> List[DayEntry]:
        """Append the absence to each covered day, ascending.

        Days are committed one at a time. The first failing day raises
        DayRecordError; days before it stay written and days after it are
        not attempted.
        """

        written: List[DayEntry] = []
        for day in each_day_inclusive(interval.start_day, interval.end_day):
            label = window_label(interval, day)
            if label is None:
                continue

            line = absence_line(reporter, label, reason)
            try:
                handle = await self._store.ensure_day(day.year, day.month, day.day)
                await self._store.append_line(handle, line)
            except DayRecordError:
                raise
            except Exception as exc:
                raise DayRecordError(day) from exc

            written.append(DayEntry(day=day, label=label, line=line))
            LOGGER.debug("Appended absence of %s to %s (%s)", reporter, day.isoformat(), label)

        return written
