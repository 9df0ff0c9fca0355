from __future__ import annotations

import unicodedata

import pytest

from core.matchers import (
    UNKNOWN,
    CommandKind,
    extract_account_info,
    extract_amount,
    is_target_user,
    is_transaction_message,
    is_valid_chat_id,
    is_valid_user_ref,
    parse_command,
)
from core.models import SenderInfo
from fakes import TRANSACTION_TEXT

LINES = TRANSACTION_TEXT.split("\n")


def test_transaction_detected_with_all_markers() -> None:
    assert is_transaction_message(TRANSACTION_TEXT)


def test_transaction_detected_in_any_order() -> None:
    shuffled = "\n".join([LINES[3], LINES[1], LINES[0], LINES[2]])
    assert is_transaction_message(shuffled)


@pytest.mark.parametrize("missing", range(4))
def test_transaction_requires_every_marker(missing: int) -> None:
    text = "\n".join(line for index, line in enumerate(LINES) if index != missing)
    assert not is_transaction_message(text)


def test_single_marker_is_not_a_transaction() -> None:
    assert not is_transaction_message("Tiền vào: +2,000 đ")
    assert not is_transaction_message("")


def test_outgoing_amount_is_not_incoming() -> None:
    text = TRANSACTION_TEXT.replace("Tiền vào: +2,000 đ", "Tiền ra: -2,000 đ")
    assert not is_transaction_message(text)


def test_decomposed_diacritics_are_normalized() -> None:
    assert is_transaction_message(unicodedata.normalize("NFD", TRANSACTION_TEXT))


def test_extract_amount_keeps_separators() -> None:
    assert extract_amount(TRANSACTION_TEXT) == "2,000"
    assert extract_amount("Tiền vào: +1.250.000 đ") == "1.250.000"
    assert extract_amount("hello") == UNKNOWN


def test_extract_account_info() -> None:
    info = extract_account_info(TRANSACTION_TEXT)
    assert info.account == "20918031"
    assert info.bank == "ACB"


def test_extract_account_info_missing_fields() -> None:
    info = extract_account_info("Tiền vào: +2,000 đ")
    assert info.account == UNKNOWN
    assert info.bank == UNKNOWN


def test_parse_command() -> None:
    command = parse_command("/1 on")
    assert command is not None
    assert command.name == "/1"
    assert command.args == ("on",)
    assert command.kind is CommandKind.REPLY_TOGGLE


def test_parse_command_lowercases_name_only() -> None:
    command = parse_command("/PIC2   on -100123 @Bob  Hi There")
    assert command is not None
    assert command.name == "/pic2"
    assert command.args == ("on", "-100123", "@Bob", "Hi", "There")
    assert command.kind is CommandKind.PIC2


def test_parse_command_non_command() -> None:
    assert parse_command("hello") is None
    assert parse_command("") is None
    assert parse_command(" /1 on") is None


def test_parse_command_unknown_kind() -> None:
    command = parse_command("/weather today")
    assert command is not None
    assert command.kind is CommandKind.UNKNOWN


def test_is_target_user() -> None:
    alice = SenderInfo(id=123, username="alice")
    assert is_target_user(alice, "@alice")
    assert is_target_user(alice, "@Alice")
    assert is_target_user(alice, "123")
    assert not is_target_user(SenderInfo(id=456, username="bob"), "@alice")
    assert not is_target_user(SenderInfo(id=456, username=None), "@alice")
    assert not is_target_user(None, "@alice")


def test_chat_id_and_user_ref_validation() -> None:
    assert is_valid_chat_id("-100123")
    assert is_valid_chat_id("42")
    assert not is_valid_chat_id("chat")
    assert not is_valid_chat_id("-")
    assert is_valid_user_ref("@bob")
    assert is_valid_user_ref("123456")
    assert not is_valid_user_ref("@")
    assert not is_valid_user_ref("bob")
