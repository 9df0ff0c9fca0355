"""Transaction reply tab: toggle, reply text, and a notification tester."""

from __future__ import annotations

from typing import Any

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Input, Static, Switch, TextArea

from core.matchers import extract_account_info, extract_amount, is_transaction_message


class ReplyTab(Container):
    """Edit reply_enabled / reply_message and test notification texts."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._loading_form = False

    def compose(self):
        with Vertical(id="reply-panel"):
            yield Static("Transaction replies", id="reply-title")
            yield Static("enabled", classes="form-label")
            yield Switch(value=True, id="reply-enabled")
            yield Static("reply message", classes="form-label")
            yield Input(placeholder="1", id="reply-message")
            yield Static("", id="reply-error", classes="settings-error")
            yield Static("Notification tester", id="reply-test-title")
            yield TextArea(id="reply-test-text")
            with Horizontal(id="reply-test-actions"):
                yield Button("Test", id="reply-test", variant="primary")
            yield Static("", id="reply-test-result")

    def on_mount(self) -> None:
        self.query_one("#reply-test-actions").styles.height = 3
        self.reload_from_config()

    def reload_from_config(self) -> None:
        data = self.app.config_state.data
        self._loading_form = True
        enabled = self.query_one("#reply-enabled", Switch)
        message = self.query_one("#reply-message", Input)
        if data is None:
            enabled.value = False
            enabled.disabled = True
            message.value = ""
            message.disabled = True
        else:
            enabled.value = data.reply_enabled
            enabled.disabled = False
            message.value = data.reply_message
            message.disabled = False
        self.query_one("#reply-error", Static).update("")
        self._loading_form = False

    @on(Switch.Changed, "#reply-enabled")
    def _on_enabled_changed(self, event: Switch.Changed) -> None:
        if self._loading_form or self.app.config_state.data is None:
            return
        self.app.config_state.data.reply_enabled = bool(event.value)
        self.app.mark_dirty()

    @on(Input.Changed, "#reply-message")
    def _on_message_changed(self, event: Input.Changed) -> None:
        if self._loading_form or self.app.config_state.data is None:
            return
        error = self.query_one("#reply-error", Static)
        if not event.value.strip():
            error.update("reply message cannot be empty")
            return
        error.update("")
        self.app.config_state.data.reply_message = event.value
        self.app.mark_dirty()

    @on(Button.Pressed, "#reply-test")
    def _on_test(self) -> None:
        text = self.query_one("#reply-test-text", TextArea).text
        result = self.query_one("#reply-test-result", Static)
        if not text.strip():
            result.update("Paste a notification to test.")
            return
        if not is_transaction_message(text):
            result.update("Not a transaction notification")
            return
        account = extract_account_info(text)
        result.update(
            f"Transaction: +{extract_amount(text)} to {account.account} at {account.bank}"
        )
