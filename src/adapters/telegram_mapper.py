"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from telethon.tl.custom import Message
from telethon.tl.types import (
    DocumentAttributeAnimated,
    DocumentAttributeSticker,
    MessageMediaDocument,
    MessageMediaPhoto,
)

from core.models import ChatInfo, ChatKind, InboundMessage, ProfileInfo, SenderInfo

LOGGER = logging.getLogger(__name__)


def has_photo(message: Message) -> bool:
    """Return True only for genuine image attachments.

    Stickers are images at the transport level (webp documents) but never
    count as photos. Link previews with a thumbnail do not count either.
    """

    media = getattr(message, "media", None)
    if isinstance(media, MessageMediaPhoto):
        return getattr(media, "photo", None) is not None
    if isinstance(media, MessageMediaDocument):
        document = getattr(media, "document", None)
        mime_type = getattr(document, "mime_type", "") or ""
        if not mime_type.startswith("image/"):
            return False
        attributes = getattr(document, "attributes", None) or []
        return not any(
            isinstance(attr, (DocumentAttributeSticker, DocumentAttributeAnimated))
            for attr in attributes
        )
    return False


def _reply_to_message_id(message: Message) -> Optional[int]:
    reply_to = getattr(message, "reply_to", None)
    if not reply_to:
        return None
    # In forum topics every post carries reply_to pointing at the topic root;
    # only reply_to_top_id tells a real reply apart from a plain topic post.
    if getattr(reply_to, "forum_topic", False) and not getattr(reply_to, "reply_to_top_id", None):
        return None
    return getattr(reply_to, "reply_to_msg_id", None)


async def _sender_info(message: Message) -> Optional[SenderInfo]:
    try:
        sender = await message.get_sender()
    except Exception:
        LOGGER.debug("Could not resolve sender for %s/%s", message.chat_id, message.id, exc_info=True)
        return None
    if sender is None:
        return None
    username = getattr(sender, "username", None)
    return SenderInfo(id=int(sender.id), username=username if isinstance(username, str) else None)


async def build_inbound(message: Message) -> InboundMessage:
    """Build a core InboundMessage from a Telethon Message."""

    return InboundMessage(
        chat_id=int(message.chat_id),
        message_id=int(message.id),
        text=message.raw_text or "",
        is_outgoing=bool(getattr(message, "out", False)),
        sender=await _sender_info(message),
        has_photo=has_photo(message),
        reply_to_message_id=_reply_to_message_id(message),
    )


def profile_from_entity(entity: Any) -> ProfileInfo:
    """Map a Telethon User (or Channel acting as sender) to ProfileInfo."""

    return ProfileInfo(
        id=int(entity.id),
        first_name=getattr(entity, "first_name", None) or getattr(entity, "title", None),
        last_name=getattr(entity, "last_name", None),
        username=getattr(entity, "username", None),
        phone=getattr(entity, "phone", None),
        bot=bool(getattr(entity, "bot", False)),
        verified=bool(getattr(entity, "verified", False)),
        premium=bool(getattr(entity, "premium", False)),
    )


def chat_kind(entity: Any) -> ChatKind:
    if getattr(entity, "broadcast", False):
        return ChatKind.CHANNEL
    if getattr(entity, "megagroup", False):
        return ChatKind.SUPERGROUP
    if getattr(entity, "title", None):
        return ChatKind.GROUP
    return ChatKind.PRIVATE


def chat_info_from_entity(chat_id: int, entity: Any) -> ChatInfo:
    return ChatInfo(
        chat_id=chat_id,
        kind=chat_kind(entity),
        title=getattr(entity, "title", None),
        username=getattr(entity, "username", None),
    )
