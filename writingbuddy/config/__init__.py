"""Configuration package."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .manager import ConfigManager, WritingSettings
    from .paths import WritingBuddyPaths

__all__ = ["ConfigManager", "WritingSettings", "WritingBuddyPaths"]


def __getattr__(name: str) -> Any:
    if name in {"ConfigManager", "WritingSettings"}:
        from .manager import ConfigManager, WritingSettings

        return {"ConfigManager": ConfigManager, "WritingSettings": WritingSettings}[name]
    if name == "WritingBuddyPaths":
        from .paths import WritingBuddyPaths

        return WritingBuddyPaths
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
