from __future__ import annotations

import asyncio

from telethon.tl.types import (
    DocumentAttributeAnimated,
    DocumentAttributeImageSize,
    DocumentAttributeSticker,
    InputStickerSetEmpty,
    MessageMediaDocument,
    MessageMediaPhoto,
    MessageMediaWebPage,
    PhotoEmpty,
    WebPageEmpty,
)

from adapters.telegram_mapper import build_inbound, chat_info_from_entity, chat_kind, has_photo, profile_from_entity
from core.models import ChatKind


class DummySender:
    def __init__(self, user_id: int, username: "str | None" = None) -> None:
        self.id = user_id
        self.username = username


class DummyDocument:
    def __init__(self, mime_type: str, attributes: list) -> None:
        self.mime_type = mime_type
        self.attributes = attributes


class DummyReply:
    def __init__(
        self,
        forum_topic: bool,
        reply_to_top_id: "int | None",
        reply_to_msg_id: "int | None",
    ) -> None:
        self.forum_topic = forum_topic
        self.reply_to_top_id = reply_to_top_id
        self.reply_to_msg_id = reply_to_msg_id


class DummyMessage:
    def __init__(
        self,
        *,
        chat_id: int = -100123,
        message_id: int = 10,
        text: "str | None" = "hello",
        out: bool = False,
        media=None,
        reply_to=None,
        sender=None,
        sender_error: "Exception | None" = None,
    ) -> None:
        self.chat_id = chat_id
        self.id = message_id
        self.raw_text = text
        self.out = out
        self.media = media
        self.reply_to = reply_to
        self._sender = sender
        self._sender_error = sender_error

    async def get_sender(self):
        if self._sender_error is not None:
            raise self._sender_error
        return self._sender


class DummyEntity:
    def __init__(self, **fields) -> None:
        for key, value in fields.items():
            setattr(self, key, value)


def _document(mime_type: str, *attributes) -> MessageMediaDocument:
    return MessageMediaDocument(document=DummyDocument(mime_type, list(attributes)))


def test_has_photo_for_photo_media() -> None:
    assert has_photo(DummyMessage(media=MessageMediaPhoto(photo=PhotoEmpty(id=1))))
    assert not has_photo(DummyMessage(media=MessageMediaPhoto(photo=None)))


def test_has_photo_for_image_document() -> None:
    media = _document("image/png", DocumentAttributeImageSize(w=10, h=10))
    assert has_photo(DummyMessage(media=media))


def test_stickers_and_animations_are_not_photos() -> None:
    sticker = _document("image/webp", DocumentAttributeSticker(alt=":)", stickerset=InputStickerSetEmpty()))
    animated = _document("image/gif", DocumentAttributeAnimated())
    assert not has_photo(DummyMessage(media=sticker))
    assert not has_photo(DummyMessage(media=animated))


def test_non_image_media_is_not_photo() -> None:
    assert not has_photo(DummyMessage(media=_document("video/mp4")))
    assert not has_photo(DummyMessage(media=MessageMediaWebPage(webpage=WebPageEmpty(id=1))))
    assert not has_photo(DummyMessage(media=None))


def test_build_inbound_maps_fields() -> None:
    message = DummyMessage(
        out=True,
        media=MessageMediaPhoto(photo=PhotoEmpty(id=1)),
        sender=DummySender(456, "bob"),
    )

    inbound = asyncio.run(build_inbound(message))

    assert inbound.chat_id == -100123
    assert inbound.message_id == 10
    assert inbound.text == "hello"
    assert inbound.is_outgoing
    assert inbound.has_photo
    assert inbound.sender.id == 456
    assert inbound.sender.username == "bob"
    assert inbound.reply_to_message_id is None


def test_build_inbound_tolerates_missing_text_and_sender() -> None:
    message = DummyMessage(text=None, sender_error=ValueError("no entity"))

    inbound = asyncio.run(build_inbound(message))

    assert inbound.text == ""
    assert inbound.sender is None


def test_reply_id_for_plain_reply() -> None:
    message = DummyMessage(reply_to=DummyReply(forum_topic=False, reply_to_top_id=None, reply_to_msg_id=7))
    assert asyncio.run(build_inbound(message)).reply_to_message_id == 7


def test_forum_topic_post_is_not_a_reply() -> None:
    message = DummyMessage(reply_to=DummyReply(forum_topic=True, reply_to_top_id=None, reply_to_msg_id=555))
    assert asyncio.run(build_inbound(message)).reply_to_message_id is None


def test_reply_inside_forum_topic() -> None:
    message = DummyMessage(reply_to=DummyReply(forum_topic=True, reply_to_top_id=555, reply_to_msg_id=777))
    assert asyncio.run(build_inbound(message)).reply_to_message_id == 777


def test_chat_kind() -> None:
    assert chat_kind(DummyEntity(broadcast=True, title="News")) is ChatKind.CHANNEL
    assert chat_kind(DummyEntity(broadcast=False, megagroup=True, title="Team")) is ChatKind.SUPERGROUP
    assert chat_kind(DummyEntity(title="Family")) is ChatKind.GROUP
    assert chat_kind(DummyEntity(first_name="Ann")) is ChatKind.PRIVATE


def test_chat_info_and_profile_from_entity() -> None:
    info = chat_info_from_entity(-100123, DummyEntity(megagroup=True, title="Team", username="team"))
    assert info.kind is ChatKind.SUPERGROUP
    assert info.title == "Team"
    assert info.username == "team"

    profile = profile_from_entity(DummyEntity(id=789, first_name="Ann", last_name=None, bot=True))
    assert profile.id == 789
    assert profile.full_name == "Ann"
    assert profile.bot
    assert not profile.premium
