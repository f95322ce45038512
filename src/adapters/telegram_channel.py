"""Telegram chat adapter.

Implements the core ChannelPort on top of a Telethon client for one chat.
"""

from __future__ import annotations

from typing import Optional, Union

from core.errors import RecordMissingError


class TelegramChannel:
    """Post, read, edit and delete messages in a single chat."""

    def __init__(self, client, entity: Union[str, int], parse_mode: Optional[str] = None) -> None:
        self._client = client
        self._entity = entity
        self._parse_mode = parse_mode

    async def post(self, text: str, reply_to: Optional[int] = None) -> int:
        message = await self._client.send_message(
            self._entity,
            text,
            reply_to=reply_to,
            parse_mode=self._parse_mode,
            link_preview=False,
        )
        return message.id

    async def read(self, handle: int) -> str:
        message = await self._client.get_messages(self._entity, ids=handle)
        if message is None:
            raise RecordMissingError(handle)
        return message.raw_text or ""

    async def edit(self, handle: int, text: str) -> None:
        await self._client.edit_message(
            self._entity,
            handle,
            text,
            parse_mode=self._parse_mode,
            link_preview=False,
        )

    async def delete(self, handle: int) -> None:
        await self._client.delete_messages(self._entity, [handle])
