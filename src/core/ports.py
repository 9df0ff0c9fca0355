"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the messaging transport and the
settings store so that the core can be exercised with fakes in tests.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.config import BotSettings
from core.models import ChatInfo, ProfileInfo


class MessageNotFoundError(LookupError):
    """Raised by a transport when a referenced message does not exist."""


class TransportPort(Protocol):
    """Messaging operations required by the core pipeline."""

    async def send_message(
        self, chat_id: int, text: str, reply_to: Optional[int] = None, html: bool = False
    ) -> None:
        ...

    async def get_message_sender(self, chat_id: int, message_id: int) -> Optional[ProfileInfo]:
        """Return the sender of a message, None if it has none.

        Raises MessageNotFoundError when the message itself is missing.
        """
        ...

    async def get_chat_info(self, chat_id: int) -> ChatInfo:
        ...

    async def get_me(self) -> ProfileInfo:
        ...


class SettingsStorePort(Protocol):
    """Persistence for the runtime BotSettings record."""

    def load(self) -> BotSettings:
        ...

    def save(self, settings: BotSettings) -> None:
        ...
