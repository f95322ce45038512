from __future__ import annotations

from datetime import date

from core.errors import EndBeforeStartError, IndefiniteNotAllowedError, MalformedInputError
from core.formatting import (
    DAY_HEADER,
    END_BEFORE_START_REPLY,
    INDEFINITE_REPLY,
    MALFORMED_REPLY,
    absence_line,
    append_to_record,
    day_record_text,
    describe_interval,
    entry_summary,
    rejection_reply,
    weekday_name,
)
from core.interval_parser import parse_interval


def test_day_record_text() -> None:
    assert day_record_text(date(2025, 11, 23)) == (
        "📅 Sonntag, 23.11.2025\n"
        "— Abmeldungen für diesen Tag —\n"
        "(Einträge werden automatisch ergänzt.)"
    )


def test_weekday_names() -> None:
    assert weekday_name(date(2025, 11, 17)) == "Montag"
    assert weekday_name(date(2026, 1, 1)) == "Donnerstag"


def test_absence_line_uses_dash_for_missing_reason() -> None:
    assert absence_line("@anna", "ganztägig", "") == "• @anna — ganztägig (Grund: —)"
    assert absence_line("Anna B", "09:00–16:00", "Arzt") == "• Anna B — 09:00–16:00 (Grund: Arzt)"


def test_append_to_record() -> None:
    content = f"📅 Montag, 17.11.2025\n{DAY_HEADER}"
    assert append_to_record(content, "• x") == content + "\n• x"
    assert append_to_record("  ", "• x") == "• x"


def test_describe_interval_variants() -> None:
    assert describe_interval(parse_interval("17.11.2025")) == "17.11.2025 (ganztägig)"
    assert describe_interval(parse_interval("17.11.2025 - 20.11.2025")) == "17.11.2025 - 20.11.2025 (ganztägig)"
    assert describe_interval(parse_interval("17.11.2025 09:00 - 16:00")) == "17.11.2025 09:00 - 17.11.2025 16:00"


def test_entry_summary_escapes_html() -> None:
    summary = entry_summary("<Anna & Ben>", parse_interval("17.11.2025"), "a*b __c__ <i>")
    assert summary.splitlines() == [
        "• <b>Name:</b> &lt;Anna &amp; Ben&gt;",
        "• <b>Zeitraum:</b> 17.11.2025 (ganztägig)",
        "• <b>Grund:</b> a*b __c__ &lt;i&gt;",
    ]


def test_entry_summary_without_reason() -> None:
    summary = entry_summary("@anna", parse_interval("17.11.2025"), "")
    assert summary.splitlines()[-1] == "• <b>Grund:</b> —"


def test_rejection_replies() -> None:
    assert rejection_reply(MalformedInputError("x")) == MALFORMED_REPLY
    assert rejection_reply(EndBeforeStartError("x")) == END_BEFORE_START_REPLY
    assert rejection_reply(IndefiniteNotAllowedError("x")) == INDEFINITE_REPLY
    assert MALFORMED_REPLY.startswith("Ungültiges Zeitraum-Format. Beispiele:")
