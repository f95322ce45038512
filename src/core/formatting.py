"""Canonical text formats shared by the digest and announcement chats.

The German wording matches the digests already posted by the bot; keep it
byte-for-byte stable.
"""

from __future__ import annotations

import html
from datetime import date, datetime
from typing import Optional

from core.days import clip_to_day
from core.errors import (
    EndBeforeStartError,
    IndefiniteNotAllowedError,
    IntervalParseError,
)
from core.models import Interval

WHOLE_DAY = "ganztägig"
WINDOW_SEPARATOR = "–"
DAY_HEADER = "— Abmeldungen für diesen Tag —"
DAY_PLACEHOLDER = "(Einträge werden automatisch ergänzt.)"
EMPTY_REASON = "—"

WEEKDAYS = ("Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag")

SUCCESS_REPLY = "Abwesenheit eingetragen. Danke!"
FAILURE_REPLY = "Fehler beim Eintragen. Bitte probiere es erneut."
INDEFINITE_REPLY = "Bitte einen <b>konkreten</b> Abmeldezeitraum angeben (kein „unbestimmt“)."
END_BEFORE_START_REPLY = "Ende liegt vor dem Beginn."
MALFORMED_REPLY = "\n".join(
    [
        "Ungültiges Zeitraum-Format. Beispiele:",
        "• <code>17.11.2025</code>",
        "• <code>17.11.2025 09:00 - 17.11.2025 16:00</code>",
        "• <code>17.11.2025 - 20.11.2025</code>",
        "• <code>17.11.2025 09:00 - 16:00</code>",
    ]
)

PANEL_TEXT = "\n".join(
    [
        "<b>ABMELDUNG</b>",
        "Hier für einen bestimmten Zeitraum abmelden.",
        "",
        "Nachricht senden: erste Zeile der Zeitraum, darunter der Grund.",
        "• <code>17.11.2025</code>",
        "• <code>17.11.2025 - 20.11.2025</code>",
        "• <code>17.11.2025 09:00 - 18.11.2025 16:00</code>",
        "• <code>17.11.2025 09:00 - 16:00</code>",
        "",
        "<b>WICHTIG:</b>",
        "• Abmeldungen sind <b>NICHT</b> zum Ausnutzen gedacht!",
        "• Abmeldungen sind <b>so früh es geht</b> einzutragen.",
    ]
)


def german_date(day: date) -> str:
    return day.strftime("%d.%m.%Y")


def clock(value: datetime) -> str:
    return value.strftime("%H:%M")


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def day_record_text(day: date) -> str:
    """Initial content of a freshly created day record."""

    return "\n".join(
        [
            f"📅 {weekday_name(day)}, {german_date(day)}",
            DAY_HEADER,
            DAY_PLACEHOLDER,
        ]
    )


def window_label(interval: Interval, day: date) -> Optional[str]:
    """Label the part of ``interval`` that falls on ``day``.

    Returns None when a timed interval does not touch the day at all.
    """

    if not interval.has_explicit_times:
        return WHOLE_DAY

    clipped = clip_to_day(interval, day)
    if clipped is None:
        return None
    start, end = clipped
    start_text, end_text = clock(start), clock(end)
    if start_text == "00:00" and end_text == "23:59":
        return WHOLE_DAY
    return f"{start_text}{WINDOW_SEPARATOR}{end_text}"


def absence_line(reporter: str, label: str, reason: str) -> str:
    return f"• {reporter} — {label} (Grund: {reason or EMPTY_REASON})"


def append_to_record(content: str, line: str) -> str:
    """Add ``line`` below the existing record content."""

    if DAY_HEADER in content:
        return content + "\n" + line
    return (content + "\n" + line).strip()


def describe_interval(interval: Interval) -> str:
    """Human-readable range for the announcement summary."""

    if interval.has_explicit_times:
        return (
            f"{german_date(interval.start)} {clock(interval.start)} - "
            f"{german_date(interval.end)} {clock(interval.end)}"
        )
    if interval.start_day == interval.end_day:
        return f"{german_date(interval.start)} ({WHOLE_DAY})"
    return f"{german_date(interval.start)} - {german_date(interval.end)} ({WHOLE_DAY})"


def entry_summary(reporter: str, interval: Interval, reason: str) -> str:
    """HTML summary posted to the announcement chat."""

    return "\n".join(
        [
            "• <b>Name:</b> " + html.escape(reporter),
            "• <b>Zeitraum:</b> " + html.escape(describe_interval(interval)),
            "• <b>Grund:</b> " + (html.escape(reason) or EMPTY_REASON),
        ]
    )


def rejection_reply(error: IntervalParseError) -> str:
    """Translate a parse error into the reply shown to the member."""

    if isinstance(error, IndefiniteNotAllowedError):
        return INDEFINITE_REPLY
    if isinstance(error, EndBeforeStartError):
        return END_BEFORE_START_REPLY
    return MALFORMED_REPLY
