"""Core submission processing pipeline.

This module is integration-agnostic. It only relies on ports for state,
chat messages and day records, enabling other frontends without changes
here.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Set, Tuple

from core.aggregator import AbsenceAggregator
from core.config import SubmissionConfig
from core.errors import DayRecordError, IntervalParseError
from core.formatting import (
    FAILURE_REPLY,
    PANEL_TEXT,
    SUCCESS_REPLY,
    entry_summary,
    rejection_reply,
)
from core.interval_parser import parse_interval
from core.models import DayEntry, Interval, Submission, SubmissionContext
from core.ports import ChannelPort, StateStore

LOGGER = logging.getLogger(__name__)


def split_submission_text(text: str) -> Tuple[str, str]:
    """First line is the interval, everything below it is the reason."""

    first, _, rest = text.strip().partition("\n")
    return first.strip(), " ".join(rest.split())


class AbsenceProcessor:
    """Orchestrates parsing, announcement replies, and daily aggregation."""

    def __init__(
        self,
        aggregator: AbsenceAggregator,
        announcements: ChannelPort,
        state_store: StateStore,
        config: SubmissionConfig,
    ) -> None:
        self._aggregator = aggregator
        self._announcements = announcements
        self._state_store = state_store
        self._config = config
        self._lock = asyncio.Lock()
        # Ids at or below the startup high-water mark were handled before a restart.
        self._restart_marks: Dict[str, int] = dict(state_store.load().last_message_ids)
        self._handled: Set[Tuple[str, int]] = set()

    async def submit(self, submission: Submission) -> Tuple[Interval, List[DayEntry]]:
        """Parse and aggregate one submission.

        Raises IntervalParseError before touching any store, or
        DayRecordError if a day could not be written.
        """

        interval = parse_interval(submission.raw_interval, self._config.indefinite_markers)
        entries = await self._aggregator.aggregate(interval, submission.reporter, submission.reason)
        return interval, entries

    async def refresh_panel(self) -> None:
        """Replace the instruction panel so it stays the newest message."""

        if not self._config.panel_enabled:
            return

        previous = self._state_store.load().last_panel_message_id
        if previous is not None:
            try:
                await self._announcements.delete(previous)
            except Exception:
                LOGGER.warning("Could not delete previous panel %s", previous)

        handle = await self._announcements.post(PANEL_TEXT)
        state = self._state_store.load()
        state.last_panel_message_id = handle
        self._state_store.save(state)

    async def handle(self, context: SubmissionContext) -> Optional[bool]:
        """Process one announcement message.

        Returns True when accepted, False when rejected, None when skipped.
        """

        if context.source_key not in self._config.allowed_sources:
            return None

        if not context.text.strip():
            return None

        async with self._lock:
            if self._already_handled(context):
                return None

            try:
                return await self._process(context)
            finally:
                self._mark_processed(context)

    async def _process(self, context: SubmissionContext) -> bool:
        raw_interval, reason = split_submission_text(context.text)
        submission = Submission(raw_interval=raw_interval, reporter=context.reporter, reason=reason)
        try:
            interval, entries = await self.submit(submission)
        except IntervalParseError as exc:
            LOGGER.info("Rejected submission %s (%s)", context.message_id, exc.kind)
            await self._announcements.post(rejection_reply(exc), reply_to=context.message_id)
            return False
        except DayRecordError as exc:
            LOGGER.exception("Aggregation failed on %s", exc.day.isoformat())
            await self._announcements.post(FAILURE_REPLY, reply_to=context.message_id)
            return False

        LOGGER.info("Absence of %s recorded on %s day(s)", context.reporter, len(entries))
        await self._announcements.post(entry_summary(context.reporter, interval, reason))
        await self.refresh_panel()
        await self._announcements.post(SUCCESS_REPLY, reply_to=context.message_id)
        return True

    def _already_handled(self, context: SubmissionContext) -> bool:
        if (context.source_key, context.message_id) in self._handled:
            return True
        return context.message_id <= self._restart_marks.get(context.source_key, 0)

    def _mark_processed(self, context: SubmissionContext) -> None:
        self._handled.add((context.source_key, context.message_id))
        state = self._state_store.load()
        last_id = state.last_message_ids.get(context.source_key) or 0
        # Handlers may finish out of order; the stored mark only moves forward.
        state.last_message_ids[context.source_key] = max(last_id, context.message_id)
        self._state_store.save(state)
