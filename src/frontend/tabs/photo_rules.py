"""Photo rules tab implementation."""

from __future__ import annotations

from typing import Any, Optional

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Static, Switch

from core.config import Pic2Rule
from ..modals import AddRuleScreen, DeleteRuleScreen
from ..validators import validate_user_ref


class PhotoRulesTab(Container):
    """Photo rules tab for editing per-chat photo replies."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._loading_form = False
        self._current_chat_id: Optional[str] = None
        self._table_ready = False

    def compose(self):
        with Vertical(id="photo-panel"):
            with Horizontal(id="photo-body"):
                with Container(id="photo-left"):
                    yield DataTable(id="photo-table", cursor_type="row")
                with Container(id="photo-right"):
                    yield Static("Rule editor", id="photo-title")
                    yield Static("chat_id", classes="form-label")
                    yield Static("", id="photo-chat-id")
                    yield Static("enabled", classes="form-label")
                    yield Switch(value=True, id="photo-enabled")
                    yield Static("user (@username or id)", classes="form-label")
                    yield Input(placeholder="@username", id="photo-user")
                    yield Static("message", classes="form-label")
                    yield Input(placeholder="Reply text", id="photo-message")
                    yield Static("", id="photo-error", classes="settings-error")
            with Horizontal(id="photo-actions"):
                yield Button("Add rule", id="add-photo-rule", variant="success")
                yield Button("Delete rule", id="delete-photo-rule", variant="error")

    def on_mount(self) -> None:
        table = self.query_one("#photo-table", DataTable)
        table.add_column("enabled", key="enabled", width=8)
        table.add_column("chat_id", key="chat_id", width=18)
        table.add_column("user", key="user", width=20)
        table.add_column("message", key="message", width=30)
        table.zebra_stripes = True
        self._table_ready = True
        self.reload_from_config()
        self._set_form_state(None)

    def _get_rules(self) -> dict[str, Pic2Rule]:
        data = self.app.config_state.data
        if data is None:
            return {}
        return data.pic2_settings

    def reload_from_config(self) -> None:
        if not self._table_ready:
            return
        table = self.query_one("#photo-table", DataTable)
        table.clear()
        for chat_id, rule in self._get_rules().items():
            table.add_row(
                "yes" if rule.enabled else "no",
                chat_id,
                rule.target_user,
                rule.reply_message,
                key=chat_id,
            )
        if self._current_chat_id not in self._get_rules():
            self._current_chat_id = None
        self._set_form_state(self._current_chat_id)
        self._update_action_state()

    def _update_action_state(self) -> None:
        self.query_one("#delete-photo-rule", Button).disabled = self._current_chat_id is None
        self.query_one("#add-photo-rule", Button).disabled = self.app.config_state.data is None

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self._current_chat_id = self._coerce_row_key(event.row_key)
        self._set_form_state(self._current_chat_id)
        self._update_action_state()

    def _current_rule(self) -> Optional[Pic2Rule]:
        if self._current_chat_id is None:
            return None
        return self._get_rules().get(self._current_chat_id)

    @on(Switch.Changed, "#photo-enabled")
    def _on_enabled_changed(self, event: Switch.Changed) -> None:
        rule = self._current_rule()
        if self._loading_form or rule is None:
            return
        rule.enabled = bool(event.value)
        self.app.mark_dirty()
        self._update_table_cell("enabled", "yes" if rule.enabled else "no")

    @on(Input.Changed, "#photo-user")
    def _on_user_changed(self, event: Input.Changed) -> None:
        rule = self._current_rule()
        if self._loading_form or rule is None:
            return
        error = validate_user_ref(event.value)
        self.query_one("#photo-error", Static).update(error or "")
        if error:
            return
        rule.target_user = event.value.strip()
        self.app.mark_dirty()
        self._update_table_cell("user", rule.target_user)

    @on(Input.Changed, "#photo-message")
    def _on_message_changed(self, event: Input.Changed) -> None:
        rule = self._current_rule()
        if self._loading_form or rule is None:
            return
        message = " ".join(event.value.split())
        if not message:
            self.query_one("#photo-error", Static).update("message is required")
            return
        self.query_one("#photo-error", Static).update("")
        rule.reply_message = message
        self.app.mark_dirty()
        self._update_table_cell("message", message)

    @on(Button.Pressed, "#add-photo-rule")
    def _on_add_rule(self) -> None:
        self.app.push_screen(AddRuleScreen(), self._handle_add_rule)

    def _handle_add_rule(self, payload: tuple[str, Pic2Rule] | None) -> None:
        if payload is None or self.app.config_state.data is None:
            return
        chat_id, rule = payload
        self._get_rules()[chat_id] = rule
        self.app.mark_dirty()
        self._current_chat_id = chat_id
        self.reload_from_config()

    @on(Button.Pressed, "#delete-photo-rule")
    def _on_delete_rule(self) -> None:
        if self._current_chat_id is None:
            return
        self.app.push_screen(DeleteRuleScreen(self._current_chat_id), self._handle_delete_rule)

    def _handle_delete_rule(self, confirmed: bool | None) -> None:
        if not confirmed or self._current_chat_id is None:
            return
        self._get_rules().pop(self._current_chat_id, None)
        self.app.mark_dirty()
        self._current_chat_id = None
        self.reload_from_config()

    def _set_form_state(self, chat_id: Optional[str]) -> None:
        self._loading_form = True
        chat_label = self.query_one("#photo-chat-id", Static)
        enabled_toggle = self.query_one("#photo-enabled", Switch)
        user_input = self.query_one("#photo-user", Input)
        message_input = self.query_one("#photo-message", Input)
        rule = self._get_rules().get(chat_id) if chat_id is not None else None
        if rule is None:
            chat_label.update("-")
            enabled_toggle.value = False
            enabled_toggle.disabled = True
            user_input.value = ""
            user_input.disabled = True
            message_input.value = ""
            message_input.disabled = True
        else:
            chat_label.update(chat_id)
            enabled_toggle.value = rule.enabled
            enabled_toggle.disabled = False
            user_input.value = rule.target_user
            user_input.disabled = False
            message_input.value = rule.reply_message
            message_input.disabled = False
        self.query_one("#photo-error", Static).update("")
        self._loading_form = False

    def _update_table_cell(self, column_key: str, value: Any) -> None:
        table = self.query_one("#photo-table", DataTable)
        try:
            table.update_cell(self._current_chat_id, column_key, value)
        except Exception:
            self.reload_from_config()

    @staticmethod
    def _coerce_row_key(value: Any) -> str:
        if hasattr(value, "value"):
            return str(value.value)
        return str(value)
