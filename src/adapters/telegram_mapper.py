"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

from typing import Optional

from telethon.tl.custom import Message

from core.models import SubmissionContext
from core.source_keys import source_key_for


def source_key_from_message(message: Message) -> str:
    """Normalize a source key using a single rule enforced across the app."""

    chat = getattr(message, "chat", None)
    username = getattr(chat, "username", None)
    if isinstance(username, str) and username:
        return source_key_for(message.chat_id, username)
    return source_key_for(message.chat_id)


def reporter_label(sender, fallback_id: Optional[int]) -> str:
    """Plain-text name of whoever posted the announcement."""

    username = getattr(sender, "username", None)
    if isinstance(username, str) and username:
        return f"@{username}"

    first = getattr(sender, "first_name", None)
    last = getattr(sender, "last_name", None)
    name = " ".join(part for part in (first, last) if part)
    if name:
        return name

    title = getattr(sender, "title", None)
    if title:
        return str(title)
    return f"id {fallback_id}" if fallback_id is not None else "unbekannt"


async def build_context(message: Message) -> SubmissionContext:
    """Build a core SubmissionContext from a Telethon Message."""

    sender = await message.get_sender()
    return SubmissionContext(
        source_key=source_key_from_message(message),
        chat_id=message.chat_id,
        message_id=message.id,
        date=message.date,
        text=message.raw_text or "",
        reporter=reporter_label(sender, getattr(message, "sender_id", None)),
    )
