"""Main Textual app for the ackbot settings panel."""

from __future__ import annotations

import sqlite3
from typing import Any, Callable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Center, Container, Horizontal, Vertical
from textual.widgets import Button, ContentSwitcher, Footer, Static, Tab, Tabs

from core.ports import SettingsStorePort

from .constants import TELEGRAM_BLUE
from .modals import ReloadConfirmScreen, UnsavedChangesScreen
from .state import ConfigState
from .tabs.guide import GuideTab
from .tabs.photo_rules import PhotoRulesTab
from .tabs.reply import ReplyTab

EDITABLE_TABS = (ReplyTab, PhotoRulesTab)


class ConfigPanelApp(App):
    """Edit the bot's runtime settings record through a SettingsStorePort.

    Edits mutate ``config_state.data`` in place and only reach the store on
    save; the running bot sees them after a reload signal or restart.
    """

    BINDINGS = [
        ("ctrl+s", "save_config", "Save"),
        ("ctrl+r", "reload_config", "Reload"),
        ("q", "request_quit", "Quit"),
        ("ctrl+c", "request_quit", "Quit"),
    ]

    CSS_PATH = "app.tcss"

    def __init__(self, store: SettingsStorePort, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.store = store
        self.config_state = ConfigState()

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static("bank transaction auto-reply", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static("", id="header-summary", classes="subtle")
                    yield Static("", id="header-status")
                    yield Horizontal(
                        Button("Save", id="save-btn"),
                        Button("Reload", id="reload-btn"),
                        id="header-actions",
                    )

        with Container(id="tabs-bar"):
            with Center(id="tabs-center"):
                yield Tabs(
                    Tab("Reply", id="reply"),
                    Tab("Photo rules", id="photo"),
                    Tab("Guide", id="guide"),
                    id="tabs",
                )

        with ContentSwitcher(id="content", initial="reply"):
            yield ReplyTab(id="reply")
            yield PhotoRulesTab(id="photo")
            yield GuideTab(id="guide")
        yield Footer()

    def on_mount(self) -> None:
        self._load_config()

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        if event.tab.id:
            self.query_one("#content", ContentSwitcher).current = event.tab.id

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-btn":
            self.action_save_config()
        elif event.button.id == "reload-btn":
            self.action_reload_config()

    def action_save_config(self) -> None:
        self._save_config()

    def action_reload_config(self) -> None:
        if not self.config_state.dirty:
            self._load_config()
            return
        self.push_screen(ReloadConfirmScreen(), self._after_choice(self._load_config, "reload"))

    def action_request_quit(self) -> None:
        if not self.config_state.dirty:
            self.exit()
            return
        self.push_screen(UnsavedChangesScreen(), self._after_choice(self.exit, "discard"))

    def _after_choice(self, proceed: Callable[[], Any], skip_save: str) -> Callable[[str | None], None]:
        """Build a modal callback: "save" saves then proceeds, ``skip_save`` just proceeds."""

        def _callback(choice: str | None) -> None:
            if choice == "save":
                if self._save_config():
                    proceed()
            elif choice == skip_save:
                proceed()

        return _callback

    def _load_config(self) -> None:
        try:
            self.config_state.data = self.store.load()
            self.config_state.error = None
        except sqlite3.Error as exc:
            self.config_state.data = None
            self.config_state.error = f"settings error: {exc}"
        self.config_state.dirty = False
        self._refresh_header()
        for tab_type in EDITABLE_TABS:
            self.query_one(tab_type).reload_from_config()

    def _save_config(self) -> bool:
        if self.config_state.data is None:
            self.config_state.error = "Nothing to save"
            self._refresh_header()
            return False
        try:
            self.store.save(self.config_state.data)
        except sqlite3.Error as exc:
            self.config_state.error = f"save failed: {exc}"
            self._refresh_header()
            return False
        self.config_state.dirty = False
        self.config_state.error = None
        self._refresh_header()
        return True

    def mark_dirty(self) -> None:
        self.config_state.dirty = True
        self._refresh_header()

    def _refresh_header(self) -> None:
        data = self.config_state.data
        summary = self.query_one("#header-summary", Static)
        if data is None:
            summary.update("no settings loaded")
        else:
            replies_state = "on" if data.reply_enabled else "off"
            summary.update(f"replies {replies_state} | photo rules {data.active_pic2_count()} active")

        status = self.query_one("#header-status", Static)
        status.remove_class("status-loaded", "status-modified", "status-error")
        if self.config_state.error:
            status.update(self.config_state.error)
            status.add_class("status-error")
        elif self.config_state.dirty:
            status.update("settings: modified *")
            status.add_class("status-modified")
        else:
            status.update("settings: saved")
            status.add_class("status-loaded")

        self.query_one("#save-btn", Button).disabled = data is None or not self.config_state.dirty

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("ACK", TELEGRAM_BLUE),
            ("BOT > Settings Panel", "bold"),
        )
