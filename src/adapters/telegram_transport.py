"""Telethon implementation of the core TransportPort."""

from __future__ import annotations

from typing import Optional

from adapters.telegram_mapper import chat_info_from_entity, profile_from_entity
from core.models import ChatInfo, ProfileInfo
from core.ports import MessageNotFoundError


class TelethonTransport:
    """Transport adapter that talks to Telegram through a user session."""

    def __init__(self, client) -> None:
        self._client = client

    async def send_message(
        self, chat_id: int, text: str, reply_to: Optional[int] = None, html: bool = False
    ) -> None:
        # parse_mode=None sends the text verbatim.
        await self._client.send_message(
            chat_id,
            text,
            reply_to=reply_to,
            parse_mode="html" if html else None,
            link_preview=False,
        )

    async def get_message_sender(self, chat_id: int, message_id: int) -> Optional[ProfileInfo]:
        messages = await self._client.get_messages(chat_id, ids=[message_id])
        message = messages[0] if messages else None
        if message is None:
            raise MessageNotFoundError(f"message {message_id} not found in {chat_id}")
        sender = await message.get_sender()
        if sender is None:
            return None
        return profile_from_entity(sender)

    async def get_chat_info(self, chat_id: int) -> ChatInfo:
        entity = await self._client.get_entity(chat_id)
        return chat_info_from_entity(chat_id, entity)

    async def get_me(self) -> ProfileInfo:
        me = await self._client.get_me()
        return profile_from_entity(me)
