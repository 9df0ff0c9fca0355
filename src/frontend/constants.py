"""Shared constants for the Textual UI."""

from __future__ import annotations

TELEGRAM_BLUE = "#2AABEE"
