"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class EventIdentity:
    """(chat_id, message_id) pair identifying one inbound notification."""

    chat_id: int
    message_id: int

    def __str__(self) -> str:
        return f"{self.chat_id}_{self.message_id}"


@dataclass(frozen=True)
class SenderInfo:
    id: int
    username: Optional[str] = None


@dataclass(frozen=True)
class InboundMessage:
    """Minimal message view used by the core processing pipeline."""

    chat_id: int
    message_id: int
    text: str
    is_outgoing: bool = False
    sender: Optional[SenderInfo] = None
    has_photo: bool = False
    reply_to_message_id: Optional[int] = None

    @property
    def identity(self) -> EventIdentity:
        return EventIdentity(self.chat_id, self.message_id)


@dataclass(frozen=True)
class ProfileInfo:
    """User profile fields reported by /id and logged at startup."""

    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    phone: Optional[str] = None
    bot: bool = False
    verified: bool = False
    premium: bool = False

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class ChatKind(str, Enum):
    PRIVATE = "private"
    CHANNEL = "channel"
    SUPERGROUP = "supergroup"
    GROUP = "group"


@dataclass(frozen=True)
class ChatInfo:
    chat_id: int
    kind: ChatKind
    title: Optional[str] = None
    username: Optional[str] = None
