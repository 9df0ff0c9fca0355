from __future__ import annotations

import asyncio

import pytest

from adapters.telegram_transport import TelethonTransport
from core.models import ChatKind
from core.ports import MessageNotFoundError


class DummyUser:
    def __init__(self, user_id: int, first_name: str, username: "str | None" = None) -> None:
        self.id = user_id
        self.first_name = first_name
        self.last_name = None
        self.username = username


class DummyFetched:
    def __init__(self, sender) -> None:
        self._sender = sender

    async def get_sender(self):
        return self._sender


class DummyChannel:
    def __init__(self, title: str) -> None:
        self.title = title
        self.broadcast = True
        self.username = None


class DummyClient:
    def __init__(self) -> None:
        self.sent: list[tuple[tuple, dict]] = []
        self.messages: dict[int, DummyFetched] = {}

    async def send_message(self, *args, **kwargs) -> None:
        self.sent.append((args, kwargs))

    async def get_messages(self, chat_id: int, ids: list[int]):
        return [self.messages.get(message_id) for message_id in ids]

    async def get_entity(self, chat_id: int):
        return DummyChannel("News")

    async def get_me(self):
        return DummyUser(1, "Me", "me")


def test_send_message_parse_mode() -> None:
    client = DummyClient()
    transport = TelethonTransport(client)

    async def scenario() -> None:
        await transport.send_message(-100123, "1", reply_to=10)
        await transport.send_message(-100123, "<b>status</b>", reply_to=11, html=True)

    asyncio.run(scenario())

    plain, formatted = client.sent
    assert plain[0] == (-100123, "1")
    assert plain[1]["reply_to"] == 10
    assert plain[1]["parse_mode"] is None
    assert formatted[1]["parse_mode"] == "html"


def test_get_message_sender() -> None:
    client = DummyClient()
    client.messages[7] = DummyFetched(DummyUser(789, "Ann", "ann"))
    client.messages[8] = DummyFetched(None)
    transport = TelethonTransport(client)

    profile = asyncio.run(transport.get_message_sender(-100123, 7))
    assert profile.id == 789
    assert profile.username == "ann"

    assert asyncio.run(transport.get_message_sender(-100123, 8)) is None

    with pytest.raises(MessageNotFoundError):
        asyncio.run(transport.get_message_sender(-100123, 9))


def test_get_chat_info_and_me() -> None:
    transport = TelethonTransport(DummyClient())

    info = asyncio.run(transport.get_chat_info(-100123))
    assert info.chat_id == -100123
    assert info.kind is ChatKind.CHANNEL
    assert info.title == "News"

    me = asyncio.run(transport.get_me())
    assert me.full_name == "Me"
