from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from ..config.manager import ConfigManager, WritingSettings
from ..config.paths import WritingBuddyPaths
from ..core.entry_writer import (
    Entry,
    append_entry,
    format_pattern,
    format_write_error_message,
    resolve_entry_path,
)
from ..core.goals import Goals
from ..core.session import WritingSession
from ..core.session_log import (
    SessionLogger,
    log_exception,
    log_info,
    set_active_logger,
)
from ..errors import ConfigError, EntryWriteError
from ..i18n import Translator
from .app import WritingBuddyApp

EXIT_WRITE_FAILED = 1
EXIT_CONFIG_INVALID = 2
EXIT_UI_FAILED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="writingbuddy",
        description="writingbuddy - a distraction-free daily writing companion",
    )
    parser.add_argument("-v", "--version", action="store_true", help="Show version and exit")
    parser.add_argument(
        "-c",
        "--config-file",
        help="Path to a JSON config file. Defaults to ./writingbuddy.json, then ~/.writingbuddy/writingbuddy.json",
    )
    parser.add_argument(
        "-i",
        "--init-config",
        action="store_true",
        help="Create the config file from the default template if it does not exist",
    )
    parser.add_argument("--word-goal", type=int, metavar="WORDS", help="Words to write (0 disables)")
    parser.add_argument("--time-goal", type=int, metavar="SECONDS", help="Seconds to write (0 disables)")
    parser.add_argument(
        "--keystroke-timeout",
        type=int,
        metavar="SECONDS",
        help="Clear the text when typing pauses longer than this (0 disables)",
    )
    parser.add_argument(
        "--backspace",
        dest="backspace_active",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Allow deleting text while writing",
    )
    parser.add_argument(
        "--strict",
        dest="strict_mode",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Refuse to stop writing until the goals are met",
    )
    parser.add_argument("--title-pattern", help="strftime pattern for the entry title, e.g. '## %%Y-%%m-%%d'")
    parser.add_argument("--file-pattern", help="strftime pattern for the markdown file, e.g. '%%Y-%%m.md'")
    parser.add_argument("--output-dir", help="Directory the markdown file is written to")
    parser.add_argument("--language", help="UI language (en-US, de or auto)")
    parser.add_argument(
        "--debug",
        nargs="?",
        const="all",
        default=None,
        help="Write a debug log to ~/.writingbuddy/logs (all, session, error, warn, info, debug)",
    )
    return parser


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "word_goal": args.word_goal,
        "time_goal": args.time_goal,
        "keystroke_timeout": args.keystroke_timeout,
        "backspace_active": args.backspace_active,
        "strict_mode": args.strict_mode,
        "title_string": args.title_pattern,
        "file_string": args.file_pattern,
        "output_dir": args.output_dir,
        "language": args.language,
        "debug": args.debug,
    }


def build_session(settings: WritingSettings, now: datetime) -> WritingSession:
    return WritingSession(
        format_pattern(settings.title_string, now),
        goals=Goals(settings.word_goal, settings.time_goal),
        backspace_active=settings.backspace_active,
        strict_mode=settings.strict_mode,
        keystroke_timeout=settings.keystroke_timeout,
    )


def save_session(
    session: WritingSession,
    settings: WritingSettings,
    now: datetime,
    console: Console,
    translator: Translator,
) -> Optional[Path]:
    """Append the session text to its markdown file; nothing is written for empty text."""
    if not session.has_text():
        log_info("cli", "entry.skipped", "no text")
        return None
    path = resolve_entry_path(settings.output_dir, settings.file_string, now)
    console.print(f"{translator.get('storing-text')}{escape(str(path))}")
    append_entry(path, Entry(title=session.title, body=session.text, created_at=now))
    log_info("cli", "entry.saved", {"path": str(path), "words": session.word_count})
    return path


def run(
    argv: Optional[Sequence[str]] = None,
    *,
    root: Optional[Path] = None,
    console: Optional[Console] = None,
    app_factory: Any = WritingBuddyApp,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    console = console or Console()
    if args.version:
        from writingbuddy import __version__

        console.print(f"writingbuddy {__version__}")
        return 0

    paths = WritingBuddyPaths(root or Path.cwd())
    try:
        settings = ConfigManager(paths, console=console).load_settings(
            overrides_from_args(args),
            config_file=args.config_file,
            initialize=args.init_config,
        )
    except ConfigError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return EXIT_CONFIG_INVALID

    logger = SessionLogger(paths, settings.debug)
    set_active_logger(logger)
    try:
        translator = Translator.for_request(settings.language)
        now = datetime.now()
        session = build_session(settings, now)
        log_info(
            "cli",
            "session.start",
            {
                "config_file": str(settings.config_file),
                "word_goal": settings.word_goal,
                "time_goal": settings.time_goal,
                "keystroke_timeout": settings.keystroke_timeout,
                "strict_mode": settings.strict_mode,
                "backspace_active": settings.backspace_active,
            },
        )
        ui_error: Optional[Exception] = None
        try:
            app_factory(session, translator).run()
        except Exception as exc:  # noqa: BLE001
            # The entry is saved before the UI failure is reported.
            log_exception("cli", exc)
            ui_error = exc
        try:
            save_session(session, settings, now, console, translator)
        except EntryWriteError as exc:
            log_exception("cli", exc)
            console.print(
                f"[red]{escape(format_write_error_message(exc.path, exc.cause, root=paths.root))}[/red]"
            )
            console.print(f"[yellow]{escape(translator.get('unsaved-text'))}[/yellow]")
            console.print(session.title, markup=False, highlight=False)
            console.print(session.text, markup=False, highlight=False)
            return EXIT_WRITE_FAILED
        if ui_error is not None:
            console.print(f"[red]Writing screen failed: {escape(str(ui_error) or type(ui_error).__name__)}[/red]")
            return EXIT_UI_FAILED
        return 0
    finally:
        logger.close()
        set_active_logger(None)


def main() -> None:
    try:
        raise SystemExit(run())
    except KeyboardInterrupt:
        return
