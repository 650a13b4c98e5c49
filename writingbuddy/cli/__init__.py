"""CLI package for writingbuddy."""

from .app import WritingBuddyApp, build_style
from .layout import text_cursor_position, visible_text, wrap_text
from .main import build_parser, build_session, main, run, save_session

__all__ = [
    "WritingBuddyApp",
    "build_parser",
    "build_session",
    "build_style",
    "main",
    "run",
    "save_session",
    "text_cursor_position",
    "visible_text",
    "wrap_text",
]
