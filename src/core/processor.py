"""Core message processing pipeline.

This module is integration-agnostic. It only relies on ports for the
transport and settings store, so the whole decision path runs against fakes
in tests.

The processor enforces a strict order for every inbound message:
1) Skip identities already handled within the window or still in flight
2) Mark the identity in flight
3) Commands: always live, even self-sent and with replies switched off
4) Photo trigger for the chat, independent of the reply toggle
5) Reply toggle gate
6) Transaction notification reply, own outgoing notices included
7) Everything else is dropped
8) Release the in-flight mark and trim the dedup store
"""

from __future__ import annotations

import logging
from enum import Enum

from core.actions import ActionExecutor
from core.commands import CommandRouter
from core.config import SettingsState
from core.dedup import DedupNamespace, DedupStore
from core.matchers import (
    extract_account_info,
    extract_amount,
    is_target_user,
    is_transaction_message,
    parse_command,
)
from core.models import InboundMessage

LOGGER = logging.getLogger(__name__)


class Outcome(str, Enum):
    SKIPPED = "skipped"
    DISPATCHED = "dispatched"
    DROPPED = "dropped"


class MessageProcessor:
    """Classifies one inbound message and fires at most one reaction."""

    def __init__(
        self,
        dedup: DedupStore,
        state: SettingsState,
        actions: ActionExecutor,
        commands: CommandRouter,
    ) -> None:
        self._dedup = dedup
        self._state = state
        self._actions = actions
        self._commands = commands

    async def handle(self, message: InboundMessage) -> Outcome:
        """Process one message through the core pipeline."""

        identity = message.identity
        if self._dedup.should_skip(identity):
            LOGGER.debug("Skip duplicate message %s", identity)
            return Outcome.SKIPPED

        try:
            # No await between should_skip and the in-flight mark.
            with self._dedup.in_flight(identity) as acquired:
                if not acquired:
                    return Outcome.SKIPPED
                return await self._classify(message)
        finally:
            removed = self._dedup.evict_if_oversize()
            if removed:
                LOGGER.debug("Dedup store trimmed by %s records", removed)

    async def _classify(self, message: InboundMessage) -> Outcome:
        identity = message.identity

        command = parse_command(message.text)
        if command is not None:
            self._dedup.mark_handled(identity)
            await self._commands.dispatch(command, message)
            return Outcome.DISPATCHED

        photo_replied = await self._evaluate_photo_trigger(message)

        if not self._state.current.reply_enabled:
            return Outcome.DISPATCHED if photo_replied else Outcome.DROPPED

        if is_transaction_message(message.text):
            self._dedup.mark_handled(identity)
            await self._reply_transaction(message)
            return Outcome.DISPATCHED

        # Ordinary text, including our own outgoing chatter, gets no reaction.
        return Outcome.DISPATCHED if photo_replied else Outcome.DROPPED

    async def _evaluate_photo_trigger(self, message: InboundMessage) -> bool:
        rule = self._state.current.pic2_settings.get(str(message.chat_id))
        if rule is None or not rule.enabled:
            return False
        if not message.has_photo:
            return False
        if message.sender is None:
            LOGGER.debug("Photo in %s without a resolvable sender", message.chat_id)
            return False
        if not is_target_user(message.sender, rule.target_user):
            return False
        if not self._dedup.claim(message.identity, DedupNamespace.PIC2):
            LOGGER.info("Photo reply already sent for %s", message.identity)
            return False
        return await self._actions.send_photo_reply(message, rule.reply_message)

    async def _reply_transaction(self, message: InboundMessage) -> None:
        amount = extract_amount(message.text)
        account = extract_account_info(message.text)
        origin = " (own message)" if message.is_outgoing else ""
        LOGGER.info(
            "Transaction detected%s: +%s from %s - %s",
            origin,
            amount,
            account.bank,
            account.account,
        )

        if not self._dedup.claim(message.identity, DedupNamespace.REPLY):
            LOGGER.info("Transaction %s already replied", message.identity)
            return
        await self._actions.acknowledge_transaction(message)
