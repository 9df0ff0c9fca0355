"""Static configuration for ackbot.

Process-level settings (storage path, dedup window, defaults, logging) live
in a single JSON file for quick edits without touching Python. Runtime
settings changed from chat (reply toggle, photo replies) live in the SQLite
settings store instead.
"""

import json
import os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def project_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite settings database.
_storage = _CONFIG.get("storage", {})
DB_PATH = project_path(_storage.get("db_path", "ackbot.db"))

# In-memory dedup controls.
# - DEDUP_WINDOW_SECONDS: how long a handled message suppresses redelivery
# - DEDUP_MAX_ENTRIES: soft bound before the oldest half is evicted
_dedup = _CONFIG.get("dedup", {})
DEDUP_WINDOW_SECONDS = float(_dedup.get("window_seconds", 30))
DEDUP_MAX_ENTRIES = int(_dedup.get("max_entries", 1000))

# Defaults used until the first command writes the settings store.
_defaults = _CONFIG.get("defaults", {})
DEFAULT_REPLY_ENABLED = bool(_defaults.get("reply_enabled", True))
DEFAULT_REPLY_MESSAGE = str(_defaults.get("reply_message", "1"))

# Single-instance guard.
_instance = _CONFIG.get("instance", {})
PID_FILE = project_path(_instance.get("pid_file", "ackbot.pid"))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
