"""Application entry point for the ackbot userbot."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv
from telethon import events

import settings
from adapters.sqlite_settings_store import SQLiteSettingsStore
from adapters.telegram_mapper import build_inbound
from adapters.telegram_transport import TelethonTransport
from client import build_client
from core.actions import ActionExecutor
from core.commands import CommandRouter
from core.config import BotSettings, DedupConfig, SettingsState
from core.dedup import DedupStore
from core.processor import MessageProcessor, Outcome
from get_session import authorize, login
from instance_lock import InstanceLock, InstanceLockError

NAME = "ACKBOT"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _RedactingFormatter(logging.Formatter):
    """Mask the values of the given environment variables in every record."""

    def __init__(self, env_names: list[str]) -> None:
        super().__init__(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
        values = {os.getenv(name) for name in env_names}
        # Longest first so a secret containing another is masked whole.
        self._secrets = sorted((value for value in values if value), key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _rotating_file_handler(file_cfg: dict) -> RotatingFileHandler:
    path = settings.project_path(file_cfg.get("path", "logs/ackbot.log"))
    os.makedirs(os.path.dirname(path), exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
        backupCount=int(file_cfg.get("backup_count", 5)),
        encoding="utf-8",
    )


def _configure_logging() -> None:
    config = settings.LOGGING
    if not config.get("enabled", False):
        return

    level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)
    redact_cfg = config.get("redact", {})
    formatter = _RedactingFormatter(redact_cfg.get("patterns", []) if redact_cfg.get("enabled") else [])

    handlers: list[logging.Handler] = []
    if config.get("console", True):
        handlers.append(logging.StreamHandler())
    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        handlers.append(_rotating_file_handler(file_cfg))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers or None)
    # Telethon logs every reconnect at INFO; keep our own lines readable.
    logging.getLogger("telethon").setLevel(max(level, logging.WARNING))


def build_store() -> SQLiteSettingsStore:
    defaults = BotSettings(
        reply_enabled=settings.DEFAULT_REPLY_ENABLED,
        reply_message=settings.DEFAULT_REPLY_MESSAGE,
    )
    store = SQLiteSettingsStore(settings.DB_PATH, defaults=defaults)
    store.init_db()
    return store


def _install_signal_handlers(client, state: SettingsState) -> None:
    logger = logging.getLogger(__name__)
    loop = client.loop

    def _stop(signame: str) -> None:
        logger.info("Received %s, stopping", signame)
        asyncio.ensure_future(client.disconnect())

    def _reload() -> None:
        state.reload()
        logger.info("Settings reloaded from %s", settings.DB_PATH)

    try:
        loop.add_signal_handler(signal.SIGINT, _stop, "SIGINT")
        loop.add_signal_handler(signal.SIGTERM, _stop, "SIGTERM")
        if hasattr(signal, "SIGHUP"):
            loop.add_signal_handler(signal.SIGHUP, _reload)
    except NotImplementedError:
        # Windows event loops have no signal support; Ctrl+C still raises
        # KeyboardInterrupt in main().
        logger.debug("Signal handlers unavailable on this platform")


async def process_event(processor: MessageProcessor, message) -> Optional[Outcome]:
    """Map and process one Telethon message; errors are logged, never raised."""

    try:
        inbound = await build_inbound(message)
        return await processor.handle(inbound)
    except Exception:
        logging.getLogger(__name__).exception("Error while processing message")
        return None


def _serve() -> int:
    logger = logging.getLogger(__name__)

    store = build_store()
    state = SettingsState(store.load(), loader=store.load)
    logger.info(
        "Transaction replies: %s, photo replies: %s active",
        "ON" if state.current.reply_enabled else "OFF",
        state.current.active_pic2_count(),
    )

    try:
        client = build_client()
    except RuntimeError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    client.loop.run_until_complete(client.connect())
    client.loop.run_until_complete(authorize(client))
    if not client.loop.run_until_complete(client.is_user_authorized()):
        logger.error("Login failed; run `ackbot login` first")
        return 1

    transport = TelethonTransport(client)
    actions = ActionExecutor(transport, state, store)
    commands = CommandRouter(actions, transport, state)
    dedup = DedupStore(
        DedupConfig(
            window_seconds=settings.DEDUP_WINDOW_SECONDS,
            max_entries=settings.DEDUP_MAX_ENTRIES,
        )
    )
    processor = MessageProcessor(dedup=dedup, state=state, actions=actions, commands=commands)

    # Outgoing messages are needed too: commands typed from our own account and
    # self-forwarded transaction notices both go through the processor.
    @client.on(events.NewMessage())
    async def handler(event) -> None:
        await process_event(processor, event.message)

    me = client.loop.run_until_complete(transport.get_me())
    logger.info("Logged in as: %s (@%s)", me.full_name, me.username or "no_username")

    _install_signal_handlers(client, state)
    logger.info("Client connected. Listening for messages (duplicate protection active, pid %s)", os.getpid())
    client.run_until_disconnected()
    logger.info("Client disconnected")
    return 0


def _run() -> int:
    _print_banner()
    load_dotenv()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting ackbot")

    lock = InstanceLock(settings.PID_FILE)
    try:
        lock.acquire()
    except InstanceLockError as exc:
        logger.error("%s", exc)
        return 1

    try:
        return _serve()
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping")
        return 0
    finally:
        lock.release()


def _setup() -> None:
    _print_banner()
    from frontend.app import ConfigPanelApp

    ConfigPanelApp(build_store()).run()


def _login() -> None:
    _print_banner()
    asyncio.run(login())


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="ackbot")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the userbot")
    subparsers.add_parser("config", help="Launch the settings TUI")
    subparsers.add_parser("login", help="Create or refresh the Telegram session")

    args = parser.parse_args(argv)
    if args.command == "config":
        _setup()
        return
    if args.command == "login":
        _login()
        return

    try:
        code = _run()
    except Exception:
        logging.getLogger(__name__).exception("Fatal error")
        code = 1
    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
