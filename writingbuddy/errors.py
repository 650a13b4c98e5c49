from __future__ import annotations

from pathlib import Path


class WritingBuddyError(Exception):
    """Base class for errors reported to the user by the CLI."""


class ConfigError(WritingBuddyError):
    """Invalid or unreadable configuration. Fatal at startup."""


class EntryWriteError(WritingBuddyError):
    """The finished entry could not be appended to its markdown file."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"{path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause
