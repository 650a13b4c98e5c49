from __future__ import annotations

import json
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config.paths import WritingBuddyPaths

LOG_LEVELS = ("error", "warn", "info", "debug")
LOG_LEVEL_PRIORITY = {level: idx for idx, level in enumerate(LOG_LEVELS)}


@dataclass(frozen=True)
class LogSelection:
    enabled_levels: frozenset[str]


def resolve_debug_config(raw: Any) -> LogSelection:
    enabled_levels: set[str] = set()

    def enable_all() -> None:
        enabled_levels.update(LOG_LEVELS)

    def enable_level(level: str) -> None:
        if level not in LOG_LEVEL_PRIORITY:
            return
        idx = LOG_LEVEL_PRIORITY[level]
        enabled_levels.update(LOG_LEVELS[: idx + 1])

    def handle_token(token: str) -> None:
        if token == "all":
            enable_all()
            return
        if token == "session":
            enable_level("info")
            return
        if token in LOG_LEVEL_PRIORITY:
            enable_level(token)

    def selection() -> LogSelection:
        return LogSelection(frozenset(enabled_levels))

    if raw is None or raw is False:
        return selection()
    if raw is True:
        enable_all()
        return selection()
    if isinstance(raw, str):
        cleaned = raw.strip().lower()
        if cleaned in {"", "none", "null", "off", "false", "0", "no", "n"}:
            return selection()
        if cleaned in {"true", "1", "yes", "y", "on"}:
            enable_all()
            return selection()
        handle_token(cleaned)
        return selection()
    if isinstance(raw, (list, tuple, set)):
        for item in raw:
            if not isinstance(item, str):
                continue
            cleaned = item.strip().lower()
            if cleaned:
                handle_token(cleaned)
        return selection()
    return selection()


class SessionLogger:
    """Write Markdown logs when debug logging is enabled."""

    def __init__(self, paths: WritingBuddyPaths, debug_config: Any) -> None:
        self.paths = paths
        self._session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self._started_at = datetime.now(timezone.utc)
        self._path: Path | None = None
        self.enabled = False
        self._enabled_levels: set[str] = set()
        self.configure(debug_config)

    @property
    def path(self) -> Path | None:
        return self._path

    def configure(self, debug_config: Any) -> None:
        selection = resolve_debug_config(debug_config)
        self._enabled_levels = set(selection.enabled_levels)
        self.enabled = bool(self._enabled_levels)

    def close(self) -> None:
        self.enabled = False

    def log_level(self, source: str, level: str, event: str, content: Any | None = None) -> None:
        if not self._level_enabled(level):
            return
        self._write(
            {
                "source": source,
                "event": event,
                "level": level,
                "content": content,
            }
        )

    def log_exception(self, source: str, exc: BaseException) -> None:
        if not self._level_enabled("error"):
            return
        location = None
        tb = exc.__traceback__
        if tb is not None:
            frames = traceback.extract_tb(tb)
            if frames:
                last = frames[-1]
                location = f"{last.filename}:{last.lineno} in {last.name}"
        trace_text = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        self.log_level(
            source,
            "error",
            "exception",
            {
                "type": type(exc).__name__,
                "message": str(exc),
                "location": location,
                "traceback": trace_text,
            },
        )

    def _level_enabled(self, level: str) -> bool:
        return self.enabled and level in self._enabled_levels

    def _ensure_path(self) -> None:
        if self._path is not None or not self.enabled:
            return
        logs_dir = self.paths.logs_dir
        logs_dir.mkdir(parents=True, exist_ok=True)
        self._path = logs_dir / f"writingbuddy_session_{self._session_id}.md"
        if not self._path.exists():
            self._path.write_text(self._header_text(), encoding="utf-8")

    def _header_text(self) -> str:
        return (
            "# writingbuddy Session Log\n\n"
            f"- Session: {self._session_id}\n"
            f"- Started: {self._started_at.isoformat()}\n\n"
            "---\n\n"
        )

    def _write(self, payload: dict[str, Any]) -> None:
        if not self.enabled:
            return
        try:
            self._ensure_path()
            if self._path is None:
                return
            timestamp = datetime.now(timezone.utc).isoformat()
            source = str(payload.get("source", ""))
            event = str(payload.get("event", ""))
            level = str(payload.get("level") or "info")
            header = f"## {timestamp} · {level}/{source} · {event}\n"
            content = payload.get("content", "")
            entry = f"{header}{self._format_content_block(content)}\n\n"
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(entry)
        except OSError:
            # Logging stops after the first failed write.
            self.close()

    def _format_content_block(self, content: Any) -> str:
        if isinstance(content, (dict, list)):
            body = json.dumps(content, indent=2, ensure_ascii=False)
            language = "json"
        else:
            body = "" if content is None else str(content)
            language = "markdown"
        body = body.rstrip()
        return f"```{language}\n{body}\n```"


_ACTIVE_LOGGER: SessionLogger | None = None


def set_active_logger(logger: SessionLogger | None) -> None:
    global _ACTIVE_LOGGER
    _ACTIVE_LOGGER = logger


def log_exception(source: str, exc: BaseException) -> None:
    logger = _ACTIVE_LOGGER
    if logger is not None:
        logger.log_exception(source, exc)


def log_warn(source: str, event: str, content: Any | None = None) -> None:
    logger = _ACTIVE_LOGGER
    if logger is not None:
        logger.log_level(source, "warn", event, content)


def log_info(source: str, event: str, content: Any | None = None) -> None:
    logger = _ACTIVE_LOGGER
    if logger is not None:
        logger.log_level(source, "info", event, content)

