"""State container for settings loading and dirty tracking."""

from __future__ import annotations

from dataclasses import dataclass

from core.config import BotSettings


@dataclass
class ConfigState:
    data: BotSettings | None = None
    dirty: bool = False
    error: str | None = None
