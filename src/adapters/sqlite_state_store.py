"""SQLite state adapter.

Implements the core StateStore port using a simple SQLite database.
"""

from __future__ import annotations

import sqlite3

from core.models import AbsenceState

_PANEL_KEY = "last_panel_message_id"


class SQLiteStateStore:
    """Thin SQLite wrapper that satisfies the StateStore contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - month_days: digest message id per (YYYY-MM, day of month)
        - sources_state: per-source last processed announcement id
        - meta: single-value settings such as the current panel message
        """

        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS month_days (
                    month_key TEXT NOT NULL,
                    day INTEGER NOT NULL,
                    handle INTEGER NOT NULL,
                    PRIMARY KEY (month_key, day)
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS sources_state (
                    source_key TEXT PRIMARY KEY,
                    last_message_id INTEGER NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS meta (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
                """
            )

    def load(self) -> AbsenceState:
        """Read the complete state."""

        state = AbsenceState()
        with self._connect() as conn:
            for row in conn.execute("SELECT month_key, day, handle FROM month_days ORDER BY month_key, day"):
                state.month_maps.setdefault(row["month_key"], {})[int(row["day"])] = int(row["handle"])
            for row in conn.execute("SELECT source_key, last_message_id FROM sources_state"):
                state.last_message_ids[row["source_key"]] = int(row["last_message_id"])
            row = conn.execute("SELECT value FROM meta WHERE key = ?", (_PANEL_KEY,)).fetchone()
        if row is not None and row["value"] is not None:
            state.last_panel_message_id = int(row["value"])
        return state

    def save(self, state: AbsenceState) -> None:
        """Replace the stored state with ``state`` in one transaction."""

        month_rows = [
            (month_key, day, handle)
            for month_key, month_map in state.month_maps.items()
            for day, handle in month_map.items()
        ]
        with self._connect() as conn:
            conn.execute("DELETE FROM month_days")
            conn.executemany(
                "INSERT INTO month_days (month_key, day, handle) VALUES (?, ?, ?)",
                month_rows,
            )
            conn.execute("DELETE FROM sources_state")
            conn.executemany(
                "INSERT INTO sources_state (source_key, last_message_id) VALUES (?, ?)",
                list(state.last_message_ids.items()),
            )
            conn.execute(
                """
                INSERT INTO meta (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (
                    _PANEL_KEY,
                    None if state.last_panel_message_id is None else str(state.last_panel_message_id),
                ),
            )
