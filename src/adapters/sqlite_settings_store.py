"""SQLite settings store adapter.

Implements the core SettingsStorePort using a simple SQLite database that
the bot and the config panel share.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Optional

from core.config import BotSettings, Pic2Rule


class SQLiteSettingsStore:
    """Thin SQLite wrapper that satisfies the SettingsStorePort contract."""

    def __init__(self, db_path: str, defaults: Optional[BotSettings] = None) -> None:
        self._db_path = db_path
        self._defaults = defaults or BotSettings()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - settings: scalar settings as key/value rows
        - pic2_rules: one photo-reply rule per chat
        """

        with self._connect() as conn:
            # Fields:
            # - key: setting name (reply_enabled, reply_message)
            # - value: text-encoded value; booleans are "1"/"0"
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            # Fields:
            # - chat_id: decimal chat id as typed in /pic2 on (PRIMARY KEY)
            # - enabled: 1/0
            # - target_user: @username or decimal user id
            # - reply_message: text sent as a reply to matching photos
            # - updated_at: last time the rule was written
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS pic2_rules (
                    chat_id TEXT PRIMARY KEY,
                    enabled INTEGER NOT NULL,
                    target_user TEXT NOT NULL,
                    reply_message TEXT NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
                """
            )

    def load(self) -> BotSettings:
        """Return stored settings, falling back to defaults for missing keys."""

        with self._connect() as conn:
            scalar_rows = conn.execute("SELECT key, value FROM settings").fetchall()
            rule_rows = conn.execute(
                "SELECT chat_id, enabled, target_user, reply_message FROM pic2_rules ORDER BY rowid"
            ).fetchall()

        scalars = {row["key"]: row["value"] for row in scalar_rows}
        reply_enabled = self._defaults.reply_enabled
        if "reply_enabled" in scalars:
            reply_enabled = scalars["reply_enabled"] == "1"

        return BotSettings(
            reply_enabled=reply_enabled,
            reply_message=scalars.get("reply_message", self._defaults.reply_message),
            pic2_settings={
                row["chat_id"]: Pic2Rule(
                    enabled=bool(row["enabled"]),
                    target_user=row["target_user"],
                    reply_message=row["reply_message"],
                )
                for row in rule_rows
            },
        )

    def save(self, settings: BotSettings) -> None:
        """Replace the stored record with ``settings`` in one transaction."""

        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                [
                    ("reply_enabled", "1" if settings.reply_enabled else "0"),
                    ("reply_message", settings.reply_message),
                ],
            )
            conn.execute("DELETE FROM pic2_rules")
            conn.executemany(
                """
                INSERT INTO pic2_rules (chat_id, enabled, target_user, reply_message, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (chat_id, int(rule.enabled), rule.target_user, rule.reply_message, now)
                    for chat_id, rule in settings.pic2_settings.items()
                ],
            )
