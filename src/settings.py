"""Static configuration for abmeldung.

All user-editable settings (chats, parser markers, digest, catch-up,
logging) live in a single JSON file for quick edits without touching
Python. Secrets stay in .env.
"""

import json
import os

from core.interval_parser import DEFAULT_INDEFINITE_MARKERS
from core.source_keys import expand_source_key_variants

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.environ.get("ABMELDUNG_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Announcements are read from one chat, the day-by-day digest is kept in another.
_channels = _CONFIG.get("channels", {})
ANNOUNCEMENT_SOURCE = _channels.get("announcements")
DIGEST_SOURCE = _channels.get("digest")
if not ANNOUNCEMENT_SOURCE or not DIGEST_SOURCE:
    raise ValueError("channels.announcements and channels.digest must be set in config.json")
ANNOUNCEMENT_VARIANTS = expand_source_key_variants(ANNOUNCEMENT_SOURCE)

# Extra words that mark an announcement as open-ended, on top of the defaults.
_parser = _CONFIG.get("parser", {})
INDEFINITE_MARKERS = tuple(DEFAULT_INDEFINITE_MARKERS) + tuple(
    marker.lower() for marker in _parser.get("extra_indefinite_markers", []) if marker
)

_digest = _CONFIG.get("digest", {})
SCAFFOLD_CURRENT_MONTH = bool(_digest.get("scaffold_current_month", True))

_panel = _CONFIG.get("panel", {})
PANEL_ENABLED = bool(_panel.get("enabled", True))

# Catch-up scan settings for startup backfill.
_catch_up = _CONFIG.get("catch_up", {})
CATCH_UP_ENABLED = bool(_catch_up.get("enabled", False))
CATCH_UP_MESSAGES = int(_catch_up.get("messages", 50))

# Where to store the SQLite database.
_storage = _CONFIG.get("storage", {})
DB_PATH = _storage.get("db_path") or os.path.join(os.path.dirname(__file__), "abmeldung.db")
if not os.path.isabs(DB_PATH):
    DB_PATH = os.path.join(PROJECT_ROOT, DB_PATH)

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
