"""User-visible reply texts.

Keeping formatting here prevents drift between command handlers and keeps
the wording consistent. Bodies are Telegram HTML; anything taken from user
input or profiles goes through ``html.escape`` before it is embedded.
"""

from __future__ import annotations

import html

from core.config import BotSettings, Pic2Rule
from core.models import ChatInfo, ChatKind, ProfileInfo

GENERIC_ERROR = "❌ Something went wrong while handling this command."

REPLY_USAGE = "❗ Usage: /1 on or /1 off"
REPLY_ENABLED = "✅ Transaction replies are ON"
REPLY_DISABLED = "❌ Transaction replies are OFF"

PIC2_USAGE = "\n".join(
    [
        "📸 <b>Photo replies</b>",
        "",
        "/pic2 on &lt;chat_id&gt; &lt;@username|user_id&gt; &lt;message&gt;",
        "/pic2 off &lt;chat_id&gt;",
        "/pic2 list",
    ]
)
PIC2_INVALID_CHAT = "❗ chat_id must be a number, e.g. -1001234567890"
PIC2_INVALID_USER = "❗ User must be @username or a numeric user id"
PIC2_EMPTY_LIST = "📭 No photo replies configured. Use /pic2 on to add one."

REPLIED_MESSAGE_NOT_FOUND = "❌ The replied message could not be found"
REPLIED_SENDER_UNKNOWN = "❌ Could not resolve the sender of the replied message"
REPLIED_USER_FAILED = "❌ Could not load the replied user's info"

_CHAT_KIND_LABELS = {
    ChatKind.PRIVATE: "Private chat",
    ChatKind.CHANNEL: "Channel",
    ChatKind.SUPERGROUP: "Supergroup",
    ChatKind.GROUP: "Group",
}


def _code(value: object) -> str:
    return f"<code>{html.escape(str(value))}</code>"


def _on_off(enabled: bool) -> str:
    return "🟢 ON" if enabled else "🔴 OFF"


def reply_state(settings: BotSettings) -> str:
    state = "ON" if settings.reply_enabled else "OFF"
    return f"⚙️ Transaction replies: {state}\nUse /1 on to enable, /1 off to disable"


def format_uptime(seconds: float) -> str:
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    return f"{hours}h {remainder // 60}m"


def status(settings: BotSettings, uptime_seconds: float) -> str:
    lines = [
        "📊 <b>UserBot status</b>",
        "",
        "🤖 Bot: running",
        f"⚙️ Transaction replies: {_on_off(settings.reply_enabled)}",
        f"💬 Reply text: \"{html.escape(settings.reply_message)}\"",
        f"📸 Photo replies: {settings.active_pic2_count()} active",
        f"⏱️ Uptime: {format_uptime(uptime_seconds)}",
        "",
        "📝 Commands:",
        "/1 on - enable replies",
        "/1 off - disable replies",
        "/status - show status",
        "/id - show chat/user id",
        "/pic2 - photo replies",
        "/help - usage",
    ]
    return "\n".join(lines)


HELP = "\n".join(
    [
        "🤖 <b>Bank Transaction UserBot</b>",
        "",
        "<b>What it does:</b>",
        "Detects bank credit notifications and replies to them automatically.",
        "",
        "<b>Detected format:</b>",
        "- Tiền vào: +2,000 đ",
        "- Tài khoản: 20918031 tại ACB",
        "- Lúc: 2025-07-20 11:10:22",
        "- Nội dung CK: ...",
        "",
        "<b>Commands:</b>",
        "/1 on - enable transaction replies",
        "/1 off - disable transaction replies",
        "/1 - show current state",
        "/status - detailed status",
        "/id - id of the current chat",
        "/id (as a reply) - id of the replied user",
        "/pic2 on &lt;chat_id&gt; &lt;@user|id&gt; &lt;message&gt; - reply to a user's photos",
        "/pic2 off &lt;chat_id&gt; - remove a photo reply",
        "/pic2 list - list photo replies",
        "/help - this message",
        "",
        "⚠️ <b>Note:</b> only messages with every transaction field get a reply",
    ]
)


def profile(info: ProfileInfo) -> str:
    lines = ["👤 <b>User info</b>", "", f"🆔 User ID: {_code(info.id)}"]
    if info.full_name:
        lines.append(f"📝 Name: {html.escape(info.full_name)}")
    if info.username:
        lines.append(f"🔗 Username: @{html.escape(info.username)}")
    if info.phone:
        lines.append(f"📞 Phone: +{html.escape(info.phone)}")
    if info.bot:
        lines.append("🤖 Bot: yes")
    if info.verified:
        lines.append("✅ Verified: yes")
    if info.premium:
        lines.append("⭐ Premium: yes")
    return "\n".join(lines)


def chat(info: ChatInfo) -> str:
    lines = ["🆔 <b>Current chat</b>", "", f"📋 Chat ID: {_code(info.chat_id)}"]
    if info.title:
        lines.append(f"📝 Title: {html.escape(info.title)}")
    if info.username:
        lines.append(f"🔗 Username: @{html.escape(info.username)}")
    lines.append(f"📂 Type: {_CHAT_KIND_LABELS[info.kind]}")
    return "\n".join(lines)


def chat_fallback(chat_id: int) -> str:
    return f"❌ Could not load chat info\n\n📋 Chat ID: {_code(chat_id)}"


def pic2_enabled(chat_id: str, rule: Pic2Rule) -> str:
    return "\n".join(
        [
            "✅ Photo reply enabled",
            f"💬 Chat: {_code(chat_id)}",
            f"👤 User: {html.escape(rule.target_user)}",
            f"📝 Message: \"{html.escape(rule.reply_message)}\"",
        ]
    )


def pic2_disabled(chat_id: str) -> str:
    return f"🗑️ Photo reply removed for chat {_code(chat_id)}"


def pic2_missing(chat_id: str) -> str:
    return f"❗ No photo reply configured for chat {_code(chat_id)}"


def pic2_list(rules: dict[str, Pic2Rule]) -> str:
    if not rules:
        return PIC2_EMPTY_LIST
    lines = [f"📸 <b>Photo replies ({len(rules)})</b>"]
    for chat_id, rule in rules.items():
        lines.extend(
            [
                "",
                f"💬 Chat: {_code(chat_id)}",
                f"   Status: {_on_off(rule.enabled)}",
                f"   User: {html.escape(rule.target_user)}",
                f"   Message: \"{html.escape(rule.reply_message)}\"",
            ]
        )
    return "\n".join(lines)
