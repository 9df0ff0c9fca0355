"""Telegram client factory for ackbot.

We explicitly manage the client's lifecycle (connect/run_until_disconnected)
so it is obvious when the session is created and when it ends. This avoids
implicit context-manager behavior for a long-running bot.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from telethon import TelegramClient

PLACEHOLDERS = {"YOUR_API_ID", "YOUR_API_HASH", "YOUR_PHONE_NUMBER"}

# Telethon reconnects on its own; redelivered updates are absorbed by the
# dedup store.
CONNECTION_RETRIES = 5


def _credential(name: str) -> str:
    value = (os.getenv(name) or "").strip()
    if not value or value in PLACEHOLDERS:
        raise RuntimeError(f"Missing {name} in environment (update .env)")
    return value


def build_client() -> TelegramClient:
    """Create a Telethon client from environment variables.

    We read API_ID/API_HASH via python-dotenv to keep secrets out of the repo.
    The session name defaults to "ackbot" to create a local .session file.
    """

    load_dotenv()

    api_id = _credential("API_ID")
    api_hash = _credential("API_HASH")
    session_name = os.getenv("SESSION_NAME", "ackbot")

    if not api_id.isdigit():
        raise RuntimeError("API_ID must be numeric")

    logging.getLogger(__name__).info("Initializing Telegram client")

    return TelegramClient(
        session_name,
        int(api_id),
        api_hash,
        connection_retries=CONNECTION_RETRIES,
    )
