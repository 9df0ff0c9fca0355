"""Validation helpers for settings editing."""

from __future__ import annotations

from dataclasses import dataclass

from core.matchers import is_valid_chat_id, is_valid_user_ref


@dataclass
class RuleInput:
    chat_id: str | None
    target_user: str | None
    reply_message: str | None
    error: str | None = None


def parse_rule_input(raw_chat_id: str, raw_user: str, raw_message: str) -> RuleInput:
    """Validate a photo-reply form the same way /pic2 on does."""

    chat_id = raw_chat_id.strip()
    target_user = raw_user.strip()
    reply_message = " ".join(raw_message.split())

    if not is_valid_chat_id(chat_id):
        return RuleInput(None, None, None, "chat_id must be a number, e.g. -1001234567890")
    if not is_valid_user_ref(target_user):
        return RuleInput(None, None, None, "user must be @username or a numeric id")
    if not reply_message:
        return RuleInput(None, None, None, "message is required")
    return RuleInput(str(int(chat_id)), target_user, reply_message)


def validate_user_ref(raw_user: str) -> str | None:
    """Return an error message for an invalid user reference, else None."""

    if is_valid_user_ref(raw_user.strip()):
        return None
    return "user must be @username or a numeric id"
