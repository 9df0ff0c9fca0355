"""Action executors: the only place the core talks back to the transport.

Sends are fire-and-report. A failed delivery is logged and dropped; we never
retry, because a lost reply is better than a duplicate one.
"""

from __future__ import annotations

import logging
from typing import Callable

from core.config import BotSettings, SettingsState
from core.models import InboundMessage
from core.ports import SettingsStorePort, TransportPort

LOGGER = logging.getLogger(__name__)


class ActionExecutor:
    """Sends replies and applies settings mutations."""

    def __init__(self, transport: TransportPort, state: SettingsState, store: SettingsStorePort) -> None:
        self._transport = transport
        self._state = state
        self._store = store

    async def _reply(self, message: InboundMessage, text: str, html: bool) -> bool:
        try:
            await self._transport.send_message(
                message.chat_id,
                text,
                reply_to=message.message_id,
                html=html,
            )
        except Exception:
            LOGGER.exception("Failed to send reply for %s", message.identity)
            return False
        return True

    async def acknowledge_transaction(self, message: InboundMessage) -> bool:
        text = self._state.current.reply_message
        sent = await self._reply(message, text, html=False)
        if sent:
            LOGGER.info("Replied to transaction %s with %r", message.identity, text)
        return sent

    async def send_command_result(self, message: InboundMessage, text: str) -> bool:
        return await self._reply(message, text, html=True)

    async def send_photo_reply(self, message: InboundMessage, text: str) -> bool:
        sent = await self._reply(message, text, html=False)
        if sent:
            LOGGER.info("Photo reply sent for %s", message.identity)
        return sent

    def update_settings(self, mutate: Callable[[BotSettings], None]) -> BotSettings:
        """Apply a mutation to the live settings, then persist them.

        A failed save keeps the in-memory change; it is lost on restart.
        """

        settings = self._state.current
        mutate(settings)
        try:
            self._store.save(settings)
        except Exception:
            LOGGER.exception("Failed to persist settings")
        return settings
