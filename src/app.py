"""Application entry point for the abmeldung bot."""

from __future__ import annotations

import argparse
import logging
import os
import re
from datetime import date
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from art import tprint
from dotenv import load_dotenv
from telethon import events, utils

import settings
from adapters.sqlite_state_store import SQLiteStateStore
from adapters.telegram_channel import TelegramChannel
from adapters.telegram_mapper import build_context
from core.aggregator import AbsenceAggregator
from core.config import SubmissionConfig
from core.day_records import DayRecordBook
from core.days import each_day_inclusive
from core.errors import IntervalParseError
from core.formatting import absence_line, describe_interval, rejection_reply, window_label
from core.interval_parser import parse_interval
from core.models import MonthKey
from core.processor import AbsenceProcessor
from core.source_keys import entity_ref, expand_source_key_variants, source_key_for
from session import authorize, build_client

NAME = "ABMELDUNG"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = [os.getenv(name) for name in redact_cfg.get("patterns", [])]
    return sorted({value for value in values if value}, key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter = _RedactingFormatter(
        _collect_redaction_values(config),
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/abmeldung.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        file_handler = RotatingFileHandler(
            path,
            maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
            backupCount=int(file_cfg.get("backup_count", 5)),
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _open_state_store() -> SQLiteStateStore:
    state_store = SQLiteStateStore(settings.DB_PATH)
    state_store.init_db()
    return state_store


async def _resolve(client, source_key: str):
    return await client.get_entity(entity_ref(source_key))


def _announcement_sources(entity) -> set[str]:
    """Every source key an incoming announcement may carry."""

    peer_id = utils.get_peer_id(entity)
    sources = set(settings.ANNOUNCEMENT_VARIANTS)
    sources.update(expand_source_key_variants(source_key_for(peer_id)))
    username = getattr(entity, "username", None)
    if username:
        sources.add(source_key_for(peer_id, username))
    return sources


async def _catch_up_scan(client, entity, processor: AbsenceProcessor, state_store: SQLiteStateStore,
                         sources: set[str]) -> None:
    """Feed announcements posted while offline through the processor."""

    if not settings.CATCH_UP_ENABLED:
        return

    tracked = state_store.load().last_message_ids
    if not any(source in tracked for source in sources):
        LOGGER.info("Catch-up skipped: announcement chat has no processed messages yet")
        return

    me = await client.get_me()
    if getattr(me, "bot", False):
        LOGGER.info("Catch-up skipped: bot accounts cannot read chat history")
        return

    messages = []
    try:
        async for message in client.iter_messages(entity, limit=settings.CATCH_UP_MESSAGES):
            messages.append(message)
    except Exception:
        LOGGER.exception("Catch-up scan failed, continuing with live updates")
        return

    accepted = 0
    for message in reversed(messages):
        if message.out:
            continue
        context = await build_context(message)
        if await processor.handle(context):
            accepted += 1

    LOGGER.info("Catch-up scan complete: messages=%s, accepted=%s", len(messages), accepted)


def _run() -> None:
    _print_banner()
    _configure_logging()

    LOGGER.info("Starting abmeldung")
    state_store = _open_state_store()

    client = build_client()
    client.loop.run_until_complete(client.connect())
    client.loop.run_until_complete(authorize(client))

    announcement_entity = client.loop.run_until_complete(_resolve(client, settings.ANNOUNCEMENT_SOURCE))
    digest_entity = client.loop.run_until_complete(_resolve(client, settings.DIGEST_SOURCE))
    sources = _announcement_sources(announcement_entity)

    book = DayRecordBook(TelegramChannel(client, digest_entity), state_store)
    processor = AbsenceProcessor(
        aggregator=AbsenceAggregator(book),
        announcements=TelegramChannel(client, announcement_entity, parse_mode="html"),
        state_store=state_store,
        config=SubmissionConfig(
            allowed_sources=frozenset(sources),
            indefinite_markers=settings.INDEFINITE_MARKERS,
            panel_enabled=settings.PANEL_ENABLED,
        ),
    )

    if settings.SCAFFOLD_CURRENT_MONTH:
        today = date.today()
        client.loop.run_until_complete(book.ensure_month(today.year, today.month))
        LOGGER.info("Digest month %s is in place", MonthKey.of(today))

    client.loop.run_until_complete(processor.refresh_panel())
    client.loop.run_until_complete(
        _catch_up_scan(client, announcement_entity, processor, state_store, sources)
    )

    @client.on(events.NewMessage(chats=announcement_entity, incoming=True))
    async def handler(event) -> None:
        try:
            context = await build_context(event.message)
            await processor.handle(context)
        except Exception:
            LOGGER.exception("Error while processing announcement")

    LOGGER.info("Client connected. Listening for announcements...")
    client.run_until_disconnected()


def _scaffold(month: Optional[str]) -> None:
    _print_banner()
    _configure_logging()
    key = MonthKey.parse(month) if month else MonthKey.of(date.today())
    state_store = _open_state_store()
    client = build_client()

    async def _run_scaffold() -> None:
        await client.connect()
        await authorize(client)
        digest_entity = await _resolve(client, settings.DIGEST_SOURCE)
        book = DayRecordBook(TelegramChannel(client, digest_entity), state_store)
        await book.ensure_month(key.year, key.month)
        print(f"Digest month {key} is in place.")
        await client.disconnect()

    client.loop.run_until_complete(_run_scaffold())


def _preview(raw_interval: str, reporter: str, reason: str) -> int:
    """Print what a submission would write, without touching Telegram."""

    try:
        interval = parse_interval(raw_interval, settings.INDEFINITE_MARKERS)
    except IntervalParseError as exc:
        print(re.sub(r"</?(?:b|code)>", "", rejection_reply(exc)))
        return 1

    print(describe_interval(interval))
    for day in each_day_inclusive(interval.start_day, interval.end_day):
        label = window_label(interval, day)
        if label is None:
            continue
        print(f"{day.isoformat()}  {absence_line(reporter, label, reason)}")
    return 0


def _dialog_type(dialog: Any) -> str:
    if getattr(dialog, "is_channel", False):
        entity = getattr(dialog, "entity", None)
        if getattr(entity, "megagroup", False):
            return "group"
        return "channel"
    if getattr(dialog, "is_group", False):
        return "group"
    return "chat"


def _discover() -> None:
    _print_banner()
    client = build_client()

    async def _run_discover() -> None:
        await client.connect()
        await authorize(client)
        async for dialog in client.iter_dialogs():
            if dialog.is_user:
                continue
            username = getattr(dialog.entity, "username", None)
            print(f"{_dialog_type(dialog)} | {dialog.name} | {source_key_for(dialog.id, username)}")
        await client.disconnect()

    client.loop.run_until_complete(_run_discover())


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="abmeldung")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the bot")
    scaffold = subparsers.add_parser("scaffold", help="Create the digest messages of a month")
    scaffold.add_argument("--month", help="Month as YYYY-MM (default: current month)")
    preview = subparsers.add_parser("preview", help="Show how an announcement would be recorded")
    preview.add_argument("period", help="Absence period, e.g. \"17.11.2025 09:00 - 16:00\"")
    preview.add_argument("--reason", default="")
    preview.add_argument("--reporter", default="@you")
    subparsers.add_parser("discover", help="List groups and channels with their source keys")

    args = parser.parse_args(argv)
    if args.command == "scaffold":
        _scaffold(args.month)
        return 0
    if args.command == "preview":
        return _preview(args.period, args.reporter, args.reason)
    if args.command == "discover":
        _discover()
        return 0
    _run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
