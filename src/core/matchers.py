"""Text classification helpers (core domain).

Bank credit notifications look like this (one field per line, any order):

    Tiền vào: +2,000 đ
    Tài khoản: 20918031 tại ACB
    Lúc: 2025-07-20 11:10:22
    Nội dung CK: ...

A message only counts as a transaction when all four markers are present.
A missed notification costs nothing, an unwanted reply is visible to others.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re
import unicodedata
from typing import Optional

from core.models import SenderInfo

UNKNOWN = "unknown"

AMOUNT_RE = re.compile(r"Tiền\s+vào\s*:\s*\+\s*(\d[\d.,]*)", re.IGNORECASE)
ACCOUNT_RE = re.compile(r"Tài\s+khoản\s*:\s*([\w.\-]+)\s+tại\s+([^\s,;]+)", re.IGNORECASE)
TIMESTAMP_RE = re.compile(r"Lúc\s*:\s*\d{4}-\d{2}-\d{2}\s+\d{1,2}:\d{2}(?::\d{2})?", re.IGNORECASE)
CONTENT_RE = re.compile(r"Nội\s+dung\s+CK\s*:", re.IGNORECASE)

_CHAT_ID_RE = re.compile(r"^-?[0-9]+$")
_USER_ID_RE = re.compile(r"^[0-9]+$")


class CommandKind(str, Enum):
    REPLY_TOGGLE = "/1"
    STATUS = "/status"
    HELP = "/help"
    ID = "/id"
    PIC2 = "/pic2"
    UNKNOWN = ""


_COMMAND_KINDS = {kind.value: kind for kind in CommandKind if kind is not CommandKind.UNKNOWN}


@dataclass(frozen=True)
class Command:
    """A parsed chat command: lower-cased name with its slash, plus raw args."""

    name: str
    args: tuple[str, ...] = ()

    @property
    def kind(self) -> CommandKind:
        return _COMMAND_KINDS.get(self.name, CommandKind.UNKNOWN)


@dataclass(frozen=True)
class AccountInfo:
    bank: str
    account: str


def _normalize(text: str) -> str:
    # Clients may send decomposed Vietnamese diacritics; patterns are NFC.
    return unicodedata.normalize("NFC", text or "")


def is_transaction_message(text: str) -> bool:
    """Return True only when every bank-credit marker is present."""

    normalized = _normalize(text)
    if not normalized.strip():
        return False
    return all(
        pattern.search(normalized)
        for pattern in (AMOUNT_RE, ACCOUNT_RE, TIMESTAMP_RE, CONTENT_RE)
    )


def extract_amount(text: str) -> str:
    """Return the incoming amount exactly as written, e.g. ``"2,000"``."""

    match = AMOUNT_RE.search(_normalize(text))
    if not match:
        return UNKNOWN
    return match.group(1).rstrip(".,")


def extract_account_info(text: str) -> AccountInfo:
    match = ACCOUNT_RE.search(_normalize(text))
    if not match:
        return AccountInfo(bank=UNKNOWN, account=UNKNOWN)
    return AccountInfo(bank=match.group(2), account=match.group(1))


def parse_command(text: str) -> Optional[Command]:
    """Parse ``/name arg1 arg2`` into a Command; None for ordinary text."""

    if not text or not text.startswith("/"):
        return None
    parts = text.split()
    return Command(name=parts[0].lower(), args=tuple(parts[1:]))


def is_target_user(sender: Optional[SenderInfo], target_user: str) -> bool:
    """Match a sender against ``@username`` or a decimal user id.

    Usernames compare case-insensitively, mirroring how Telegram resolves them.
    """

    if sender is None or not target_user:
        return False
    if target_user.startswith("@"):
        if not sender.username:
            return False
        return sender.username.lower() == target_user[1:].lower()
    return target_user == str(sender.id)


def is_valid_chat_id(value: str) -> bool:
    return bool(_CHAT_ID_RE.match(value or ""))


def is_valid_user_ref(value: str) -> bool:
    if not value:
        return False
    if value.startswith("@"):
        return len(value) > 1
    return bool(_USER_ID_RE.match(value))
