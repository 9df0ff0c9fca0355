"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

DEFAULT_REPLY_MESSAGE = "1"


@dataclass(frozen=True)
class DedupConfig:
    """Deduplication settings for the core pipeline."""

    window_seconds: float = 30.0
    max_entries: int = 1000


@dataclass
class Pic2Rule:
    """Per-chat photo trigger: reply to photos sent by one designated user."""

    enabled: bool
    target_user: str
    reply_message: str


@dataclass
class BotSettings:
    """Runtime settings mutated by chat commands and the config panel."""

    reply_enabled: bool = True
    reply_message: str = DEFAULT_REPLY_MESSAGE
    pic2_settings: dict[str, Pic2Rule] = field(default_factory=dict)

    def active_pic2_count(self) -> int:
        return sum(1 for rule in self.pic2_settings.values() if rule.enabled)


class SettingsState:
    """Owner of the live BotSettings record.

    The processor and the command router share one instance by reference, so
    a mutation made by a command is visible to the next event immediately.
    """

    def __init__(self, settings: BotSettings, loader: Optional[Callable[[], BotSettings]] = None) -> None:
        self._settings = settings
        self._loader = loader

    @property
    def current(self) -> BotSettings:
        return self._settings

    def reload(self) -> bool:
        """Re-read settings from the loader; return False when no loader is set."""

        if self._loader is None:
            return False
        self._settings = self._loader()
        return True
