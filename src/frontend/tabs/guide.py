"""Guide tab: the same usage text /help sends in chat."""

from __future__ import annotations

from telethon.extensions import html as telegram_html
from textual.containers import ScrollableContainer
from textual.widgets import Static

from core.replies import HELP

PANEL_NOTES = """

Settings panel
- Changes are written to the settings database on Save (ctrl+s).
- A running bot picks them up after `kill -HUP <pid>` or a restart.
"""


def guide_text() -> str:
    plain, _entities = telegram_html.parse(HELP)
    return plain + PANEL_NOTES


class GuideTab(ScrollableContainer):
    def compose(self):
        yield Static(guide_text(), id="guide-body", markup=False)
