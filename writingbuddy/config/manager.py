from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape

from ..core.entry_writer import DEFAULT_FILE_PATTERN, DEFAULT_TITLE_PATTERN
from ..core.goals import normalize_target
from ..errors import ConfigError
from .paths import WritingBuddyPaths
from .resources import read_config_text

DEFAULT_CONFIG: Dict[str, Any] = {
    "title_string": DEFAULT_TITLE_PATTERN,
    "file_string": DEFAULT_FILE_PATTERN,
    "output_dir": ".",
    "backspace_active": True,
    "strict_mode": True,
    "word_goal": 0,
    "time_goal": 0,
    "keystroke_timeout": 0,
    "language": "auto",
    "debug": False,
}
STRING_KEYS = ("title_string", "file_string", "output_dir", "language")
BOOL_KEYS = ("backspace_active", "strict_mode")
GOAL_KEYS = ("word_goal", "time_goal", "keystroke_timeout")


@dataclass(frozen=True)
class WritingSettings:
    title_string: str
    file_string: str
    output_dir: Path
    backspace_active: bool
    strict_mode: bool
    word_goal: Optional[int]
    time_goal: Optional[int]
    keystroke_timeout: Optional[int]
    language: str
    debug: Any
    config_file: Optional[Path]


class ConfigManager:
    """Locates, creates and merges writingbuddy configuration files."""

    def __init__(self, paths: WritingBuddyPaths, console: Optional[Console] = None) -> None:
        self.paths = paths
        self.console = console or Console()

    def resolve_config_file(
        self,
        config_file: Optional[str] = None,
        *,
        initialize: bool = False,
    ) -> Path:
        """Pick the config file to read, creating it from the template when asked.

        An explicit path must exist unless ``initialize`` is set. Without one,
        the workspace file wins, then the global file, which is created on
        first use.
        """
        if config_file:
            path = Path(config_file).expanduser()
            if not path.is_absolute():
                path = self.paths.root / path
            if path.exists():
                return path
            if not initialize:
                raise ConfigError(f"Config file not found: {path}")
            self.create_config_file(path)
            return path
        if self.paths.config_file.exists():
            return self.paths.config_file
        if initialize:
            self.create_config_file(self.paths.config_file)
            return self.paths.config_file
        if not self.paths.global_config_file.exists():
            self.create_config_file(self.paths.global_config_file)
        return self.paths.global_config_file

    def create_config_file(self, path: Path) -> Path:
        """Write the default config template to ``path`` without overwriting."""
        if path.exists():
            return path
        template = read_config_text() or json.dumps(DEFAULT_CONFIG, indent=2) + "\n"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(template, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Could not create config file {path}: {exc.strerror or exc}") from exc
        self.console.print(f"[green]Created config file {escape(str(path))}[/green]")
        return path

    def load_settings(
        self,
        overrides: Optional[Dict[str, Any]] = None,
        *,
        config_file: Optional[str] = None,
        initialize: bool = False,
    ) -> WritingSettings:
        """Merge defaults, global config, the selected config file and CLI overrides."""
        selected = self.resolve_config_file(config_file, initialize=initialize)
        merged: Dict[str, Any] = dict(DEFAULT_CONFIG)
        if selected != self.paths.global_config_file and self.paths.global_config_file.exists():
            merged.update(self._read_config(self.paths.global_config_file, strict=False))
        merged.update(self._read_config(selected, strict=True))
        for key, value in (overrides or {}).items():
            if value is not None:
                merged[key] = value
        return self._build_settings(merged, selected)

    def _read_config(self, path: Path, *, strict: bool) -> Dict[str, Any]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            if strict:
                raise ConfigError(f"Could not read config file {path}: {exc}") from exc
            self.console.print(f"[yellow]Ignoring {escape(str(path))}: {escape(str(exc))}[/yellow]")
            return {}
        if not isinstance(data, dict):
            if strict:
                raise ConfigError(f"Config file {path} must contain a JSON object.")
            self.console.print(f"[yellow]Ignoring {escape(str(path))}: expected an object.[/yellow]")
            return {}
        cleaned: Dict[str, Any] = {}
        for key, value in data.items():
            if key.startswith("$"):
                continue
            if key not in DEFAULT_CONFIG:
                self.console.print(f"[yellow]Ignoring unknown key {escape(key)} in {escape(str(path))}.[/yellow]")
                continue
            cleaned[key] = value
        return cleaned

    def _build_settings(self, data: Dict[str, Any], config_file: Path) -> WritingSettings:
        for key in STRING_KEYS:
            if not isinstance(data[key], str):
                raise ConfigError(f"{key} must be a string, got {data[key]!r}")
        for key in BOOL_KEYS:
            if not isinstance(data[key], bool):
                raise ConfigError(f"{key} must be true or false, got {data[key]!r}")
        goals = {key: normalize_target(key, data[key]) for key in GOAL_KEYS}
        if not data["file_string"].strip():
            raise ConfigError("file_string must not be empty")

        output_dir = Path(data["output_dir"]).expanduser()
        if not output_dir.is_absolute():
            output_dir = self.paths.root / output_dir
        return WritingSettings(
            title_string=data["title_string"],
            file_string=data["file_string"],
            output_dir=output_dir,
            backspace_active=data["backspace_active"],
            strict_mode=data["strict_mode"],
            word_goal=goals["word_goal"],
            time_goal=goals["time_goal"],
            keystroke_timeout=goals["keystroke_timeout"],
            language=data["language"],
            debug=data["debug"],
            config_file=config_file,
        )
