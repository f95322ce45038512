from __future__ import annotations

from adapters.sqlite_state_store import SQLiteStateStore
from core.models import AbsenceState


def _store(tmp_path) -> SQLiteStateStore:
    store = SQLiteStateStore(str(tmp_path / "state.db"))
    store.init_db()
    return store


def test_empty_database_loads_empty_state(tmp_path) -> None:
    state = _store(tmp_path).load()
    assert state == AbsenceState()


def test_save_and_load_full_state(tmp_path) -> None:
    store = _store(tmp_path)
    state = AbsenceState(
        month_maps={"2025-11": {1: 101, 17: 117}, "2025-12": {31: 231}},
        last_panel_message_id=42,
        last_message_ids={"@abmeldungen": 99},
    )
    store.save(state)

    loaded = store.load()
    assert loaded == state
    assert isinstance(next(iter(loaded.month_maps["2025-11"])), int)


def test_save_replaces_previous_value(tmp_path) -> None:
    store = _store(tmp_path)
    store.save(AbsenceState(month_maps={"2025-11": {1: 101}}, last_panel_message_id=1))
    store.save(AbsenceState(month_maps={"2025-12": {2: 202}}, last_panel_message_id=None))

    loaded = store.load()
    assert loaded.month_maps == {"2025-12": {2: 202}}
    assert loaded.last_panel_message_id is None


def test_init_db_is_repeatable(tmp_path) -> None:
    store = _store(tmp_path)
    store.save(AbsenceState(last_message_ids={"chat_id:-100123": 5}))
    store.init_db()
    assert store.load().last_message_ids == {"chat_id:-100123": 5}
