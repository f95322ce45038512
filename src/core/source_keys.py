"""Helpers for working with chat source keys.

A source key is either ``@username`` (lower-cased) or ``chat_id:<id>``.
"""

from __future__ import annotations

from typing import Optional, Union

CHAT_ID_PREFIX = "chat_id:"


def source_key_for(chat_id: int, username: Optional[str] = None) -> str:
    """Normalize a chat into its source key, preferring the public username."""

    if username:
        return f"@{username.lower()}"
    return f"{CHAT_ID_PREFIX}{chat_id}"


def entity_ref(source_key: str) -> Union[str, int]:
    """Turn a source key into something ``client.get_entity`` accepts."""

    if source_key.startswith("@"):
        return source_key
    if source_key.startswith(CHAT_ID_PREFIX):
        return int(source_key[len(CHAT_ID_PREFIX):])
    raise ValueError(f"source key must start with @ or {CHAT_ID_PREFIX}: {source_key!r}")


def _chat_id_variants(raw_chat_id: int) -> set[int]:
    """Peer id, bare chat id and channel id spellings of the same chat."""

    variants: set[int] = {raw_chat_id}
    if raw_chat_id >= 0:
        variants.add(-raw_chat_id)
        variants.add(-1000000000000 - raw_chat_id)
        return variants

    raw_text = str(raw_chat_id)
    if raw_text.startswith("-100") and raw_text[4:].isdigit():
        variants.add(int(raw_text[4:]))
    else:
        variants.add(-raw_chat_id)
    return variants


def expand_source_key_variants(source_key: str) -> set[str]:
    """Expand a ``chat_id:`` key to every equivalent spelling."""

    if not source_key.startswith(CHAT_ID_PREFIX):
        return {source_key}
    try:
        raw_chat_id = int(source_key[len(CHAT_ID_PREFIX):])
    except ValueError:
        return {source_key}
    return {f"{CHAT_ID_PREFIX}{variant}" for variant in _chat_id_variants(raw_chat_id)}
