from __future__ import annotations

import asyncio

from core import replies
from core.config import BotSettings, Pic2Rule
from core.matchers import Command
from core.models import ChatInfo, ChatKind, ProfileInfo
from fakes import make_bot, message


def _send(bot, text: str, **kwargs) -> str:
    asyncio.run(bot.processor.handle(message(text, **kwargs)))
    return bot.transport.sent[-1].text


def test_reply_toggle_reports_state() -> None:
    bot = make_bot()

    text = _send(bot, "/1")

    assert "ON" in text
    assert bot.store.saves == []


def test_reply_toggle_off_and_on_persists() -> None:
    bot = make_bot()

    assert _send(bot, "/1 off", message_id=1) == replies.REPLY_DISABLED
    assert not bot.state.current.reply_enabled
    assert bot.store.saves[-1].reply_enabled is False

    assert _send(bot, "/1 ON", message_id=2) == replies.REPLY_ENABLED
    assert bot.state.current.reply_enabled
    assert len(bot.store.saves) == 2


def test_reply_toggle_rejects_other_args() -> None:
    bot = make_bot()

    assert _send(bot, "/1 maybe") == replies.REPLY_USAGE
    assert bot.state.current.reply_enabled
    assert bot.store.saves == []


def test_reply_toggle_survives_save_failure() -> None:
    bot = make_bot()
    bot.store.fail_save = True

    assert _send(bot, "/1 off") == replies.REPLY_DISABLED
    assert not bot.state.current.reply_enabled


def test_status_reports_settings_and_uptime() -> None:
    settings = BotSettings(
        reply_message="ok",
        pic2_settings={
            "1": Pic2Rule(enabled=True, target_user="@a", reply_message="x"),
            "2": Pic2Rule(enabled=False, target_user="@b", reply_message="y"),
        },
    )
    bot = make_bot(settings)
    bot.clock.now += 2 * 3600 + 5 * 60 + 7

    text = _send(bot, "/status")

    assert "2h 5m" in text
    assert "1 active" in text
    assert '"ok"' in text
    assert bot.transport.sent[-1].html is True


def test_help_text() -> None:
    bot = make_bot()

    assert _send(bot, "/help") == replies.HELP


def test_id_without_reply_describes_chat() -> None:
    bot = make_bot()
    bot.transport.chats[-100123] = ChatInfo(
        chat_id=-100123, kind=ChatKind.SUPERGROUP, title="Shop_team", username="shop"
    )

    text = _send(bot, "/id")

    assert "<code>-100123</code>" in text
    assert "Shop_team" in text
    assert "@shop" in text
    assert "Supergroup" in text


def test_id_falls_back_when_chat_lookup_fails() -> None:
    bot = make_bot()

    assert _send(bot, "/id") == replies.chat_fallback(-100123)


def test_id_as_reply_describes_sender() -> None:
    bot = make_bot()
    bot.transport.senders[7] = ProfileInfo(
        id=789, first_name="Ann", last_name="Lee", username="ann", phone="84901", premium=True
    )

    text = _send(bot, "/id", reply_to_message_id=7)

    assert "<code>789</code>" in text
    assert "Ann Lee" in text
    assert "@ann" in text
    assert "+84901" in text
    assert "Premium" in text
    assert "Bot: yes" not in text


def test_id_reply_to_missing_message() -> None:
    bot = make_bot()

    assert _send(bot, "/id", reply_to_message_id=7) == replies.REPLIED_MESSAGE_NOT_FOUND


def test_id_reply_without_sender() -> None:
    bot = make_bot()
    bot.transport.senders[7] = None

    assert _send(bot, "/id", reply_to_message_id=7) == replies.REPLIED_SENDER_UNKNOWN


def test_pic2_round_trip() -> None:
    bot = make_bot()

    enabled = _send(bot, "/pic2 on -100555 @alice Great photo!", message_id=1)
    rule = bot.state.current.pic2_settings["-100555"]
    assert rule == Pic2Rule(enabled=True, target_user="@alice", reply_message="Great photo!")
    assert "<code>-100555</code>" in enabled
    assert bot.store.saves

    listing = _send(bot, "/pic2 list", message_id=2)
    assert "<code>-100555</code>" in listing
    assert "@alice" in listing
    assert '"Great photo!"' in listing

    removed = _send(bot, "/pic2 off -100555", message_id=3)
    assert removed == replies.pic2_disabled("-100555")
    assert bot.state.current.pic2_settings == {}

    assert _send(bot, "/pic2 list", message_id=4) == replies.PIC2_EMPTY_LIST


def test_pic2_on_replaces_existing_rule() -> None:
    bot = make_bot()

    _send(bot, "/pic2 on -100555 @alice first", message_id=1)
    _send(bot, "/pic2 on -100555 12345 second", message_id=2)

    assert bot.state.current.pic2_settings == {
        "-100555": Pic2Rule(enabled=True, target_user="12345", reply_message="second")
    }


def test_pic2_validation_errors() -> None:
    bot = make_bot()

    assert _send(bot, "/pic2", message_id=1) == replies.PIC2_USAGE
    assert _send(bot, "/pic2 on -100555 @alice", message_id=2) == replies.PIC2_USAGE
    assert _send(bot, "/pic2 on chat @alice hi", message_id=3) == replies.PIC2_INVALID_CHAT
    assert _send(bot, "/pic2 on -100555 alice hi", message_id=4) == replies.PIC2_INVALID_USER
    assert _send(bot, "/pic2 off", message_id=5) == replies.PIC2_USAGE
    assert _send(bot, "/pic2 maybe", message_id=6) == replies.PIC2_USAGE
    assert bot.state.current.pic2_settings == {}
    assert bot.store.saves == []


def test_pic2_off_missing_rule() -> None:
    bot = make_bot()

    assert _send(bot, "/pic2 off -100555") == replies.pic2_missing("-100555")
    assert bot.store.saves == []


def test_unknown_command_is_ignored() -> None:
    bot = make_bot()

    asyncio.run(bot.processor.handle(message("/weather today")))

    assert bot.transport.sent == []


def test_handler_failure_sends_apology() -> None:
    bot = make_bot()
    commands = bot.processor._commands

    async def boom(args, msg):
        raise RuntimeError("broken")

    commands._handlers[Command("/status").kind] = boom

    handled = asyncio.run(commands.dispatch(Command("/status"), message("/status")))

    assert handled
    assert bot.transport.sent[-1].text == replies.GENERIC_ERROR
