"""Modal dialogs for the Textual settings panel."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

from core.config import Pic2Rule

from .validators import parse_rule_input


class UnsavedChangesScreen(ModalScreen[str]):
    """Prompt when exiting with unsaved changes."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Unsaved changes", classes="modal-title"),
            Static("Save changes before exit?", classes="modal-body"),
            Horizontal(
                Button("Save", id="unsaved-save", variant="success"),
                Button("Discard", id="unsaved-discard", variant="error"),
                Button("Cancel", id="unsaved-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "unsaved-save":
            self.dismiss("save")
        elif event.button.id == "unsaved-discard":
            self.dismiss("discard")
        else:
            self.dismiss("cancel")


class ReloadConfirmScreen(ModalScreen[str]):
    """Prompt when reloading with unsaved changes."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Reload settings?", classes="modal-title"),
            Static("Unsaved changes will be lost.", classes="modal-body"),
            Horizontal(
                Button("Save", id="reload-save"),
                Button("Reload", id="reload-reload", variant="warning"),
                Button("Cancel", id="reload-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "reload-save":
            self.dismiss("save")
        elif event.button.id == "reload-reload":
            self.dismiss("reload")
        else:
            self.dismiss("cancel")


class AddRuleScreen(ModalScreen[tuple[str, Pic2Rule] | None]):
    """Modal form for adding a photo reply rule."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Add photo reply", classes="modal-title"),
            Static("", id="add-error", classes="modal-error"),
            Static("chat_id", classes="form-label"),
            Input(placeholder="-1001234567890", id="add-chat-id"),
            Static("user", classes="form-label"),
            Input(placeholder="@username or 123456789", id="add-user"),
            Static("message", classes="form-label"),
            Input(placeholder="Reply text", id="add-message"),
            Horizontal(
                Button("Add", id="add-confirm", variant="success"),
                Button("Cancel", id="add-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--form",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "add-cancel":
            self.dismiss(None)
            return
        if event.button.id != "add-confirm":
            return
        parsed = parse_rule_input(
            self.query_one("#add-chat-id", Input).value,
            self.query_one("#add-user", Input).value,
            self.query_one("#add-message", Input).value,
        )
        if parsed.error or parsed.chat_id is None:
            self.query_one("#add-error", Static).update(parsed.error or "invalid rule")
            return
        rule = Pic2Rule(enabled=True, target_user=parsed.target_user, reply_message=parsed.reply_message)
        self.dismiss((parsed.chat_id, rule))


class DeleteRuleScreen(ModalScreen[bool]):
    """Confirm deletion of a photo reply rule."""

    def __init__(self, chat_id: str) -> None:
        super().__init__()
        self._chat_id = chat_id

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Delete photo reply?", classes="modal-title"),
            Static(f"chat {self._chat_id}", classes="modal-body"),
            Horizontal(
                Button("Delete", id="delete-rule-confirm", variant="error"),
                Button("Cancel", id="delete-rule-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "delete-rule-confirm":
            self.dismiss(True)
        else:
            self.dismiss(False)
