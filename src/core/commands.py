"""Chat command sub-router.

Commands are the bot's only control plane. Each known command gets exactly
one reply, including on internal failure; unknown commands are ignored so
that text which merely starts with "/" does not produce noise.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from core import replies
from core.actions import ActionExecutor
from core.config import BotSettings, Pic2Rule, SettingsState
from core.matchers import Command, CommandKind, is_valid_chat_id, is_valid_user_ref
from core.models import InboundMessage
from core.ports import MessageNotFoundError, TransportPort

LOGGER = logging.getLogger(__name__)


class CommandRouter:
    """Dispatch parsed commands to their handlers."""

    def __init__(
        self,
        actions: ActionExecutor,
        transport: TransportPort,
        state: SettingsState,
        started_at: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._actions = actions
        self._transport = transport
        self._state = state
        self._clock = clock
        self._started_at = clock() if started_at is None else started_at
        self._handlers = {
            CommandKind.REPLY_TOGGLE: self._handle_reply_toggle,
            CommandKind.STATUS: self._handle_status,
            CommandKind.HELP: self._handle_help,
            CommandKind.ID: self._handle_id,
            CommandKind.PIC2: self._handle_pic2,
        }

    @property
    def settings(self) -> BotSettings:
        return self._state.current

    async def dispatch(self, command: Command, message: InboundMessage) -> bool:
        """Run a command; return False when the command is unknown."""

        handler = self._handlers.get(command.kind)
        if handler is None:
            LOGGER.debug("Ignoring unknown command %s", command.name)
            return False

        try:
            text = await handler(command.args, message)
        except Exception:
            LOGGER.exception("Command %s failed for %s", command.name, message.identity)
            text = replies.GENERIC_ERROR
        await self._actions.send_command_result(message, text)
        return True

    async def _handle_reply_toggle(self, args: tuple[str, ...], message: InboundMessage) -> str:
        if not args:
            return replies.reply_state(self.settings)

        action = args[0].lower()
        if action not in {"on", "off"}:
            return replies.REPLY_USAGE

        enabled = action == "on"

        def _set(settings: BotSettings) -> None:
            settings.reply_enabled = enabled

        self._actions.update_settings(_set)
        LOGGER.info("Transaction replies turned %s", action.upper())
        return replies.REPLY_ENABLED if enabled else replies.REPLY_DISABLED

    async def _handle_status(self, args: tuple[str, ...], message: InboundMessage) -> str:
        return replies.status(self.settings, self._clock() - self._started_at)

    async def _handle_help(self, args: tuple[str, ...], message: InboundMessage) -> str:
        return replies.HELP

    async def _handle_id(self, args: tuple[str, ...], message: InboundMessage) -> str:
        if message.reply_to_message_id is not None:
            return await self._describe_replied_user(message)
        return await self._describe_chat(message.chat_id)

    async def _describe_replied_user(self, message: InboundMessage) -> str:
        try:
            sender = await self._transport.get_message_sender(message.chat_id, message.reply_to_message_id)
        except MessageNotFoundError:
            return replies.REPLIED_MESSAGE_NOT_FOUND
        except Exception:
            LOGGER.exception("Failed to load replied user in %s", message.chat_id)
            return replies.REPLIED_USER_FAILED
        if sender is None:
            return replies.REPLIED_SENDER_UNKNOWN
        return replies.profile(sender)

    async def _describe_chat(self, chat_id: int) -> str:
        try:
            info = await self._transport.get_chat_info(chat_id)
        except Exception:
            LOGGER.exception("Failed to load chat info for %s", chat_id)
            return replies.chat_fallback(chat_id)
        return replies.chat(info)

    async def _handle_pic2(self, args: tuple[str, ...], message: InboundMessage) -> str:
        if not args:
            return replies.PIC2_USAGE

        action = args[0].lower()
        if action == "on":
            return self._pic2_on(args[1:])
        if action == "off":
            return self._pic2_off(args[1:])
        if action == "list":
            return replies.pic2_list(self.settings.pic2_settings)
        return replies.PIC2_USAGE

    def _pic2_on(self, args: tuple[str, ...]) -> str:
        if len(args) < 3:
            return replies.PIC2_USAGE
        raw_chat_id, target_user = args[0], args[1]
        if not is_valid_chat_id(raw_chat_id):
            return replies.PIC2_INVALID_CHAT
        chat_id = str(int(raw_chat_id))
        if not is_valid_user_ref(target_user):
            return replies.PIC2_INVALID_USER

        rule = Pic2Rule(enabled=True, target_user=target_user, reply_message=" ".join(args[2:]))

        def _upsert(settings: BotSettings) -> None:
            settings.pic2_settings[chat_id] = rule

        self._actions.update_settings(_upsert)
        LOGGER.info("Photo reply set for chat %s (user %s)", chat_id, target_user)
        return replies.pic2_enabled(chat_id, rule)

    def _pic2_off(self, args: tuple[str, ...]) -> str:
        if not args:
            return replies.PIC2_USAGE
        if not is_valid_chat_id(args[0]):
            return replies.PIC2_INVALID_CHAT
        chat_id = str(int(args[0]))
        if chat_id not in self.settings.pic2_settings:
            return replies.pic2_missing(chat_id)

        def _remove(settings: BotSettings) -> None:
            settings.pic2_settings.pop(chat_id, None)

        self._actions.update_settings(_remove)
        LOGGER.info("Photo reply removed for chat %s", chat_id)
        return replies.pic2_disabled(chat_id)
