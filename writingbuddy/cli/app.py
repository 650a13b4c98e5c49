from __future__ import annotations

import shutil
from typing import Any, Optional

from prompt_toolkit.application import Application
from prompt_toolkit.data_structures import Point
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import Layout
from prompt_toolkit.layout.containers import HSplit, VSplit, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from ..core.session import EscapeOutcome, InputMode, WritingSession
from ..i18n import Translator
from .layout import text_cursor_position, visible_text

REFRESH_INTERVAL = 0.2
# Frame border (2) plus the outer margin on both sides.
HORIZONTAL_CHROME = 6

LEVEL_STYLES = {
    "level.active": "#00afaf",
    "level.done": "#00af00",
    "level.warning": "#d7af00",
    "level.danger": "#d70000",
    "level.passive": "#8a8a8a",
}


def build_style() -> Style:
    return Style.from_dict(
        {
            "frame.border": "#5f5f5f",
            "frame.label": "bold",
            "instructions": "#8a8a8a",
            **LEVEL_STYLES,
        }
    )


def level_class(level: str) -> str:
    return f"class:level.{level}"


class WritingBuddyApp:
    """Full-screen writing UI.

    Every key is forwarded to the :class:`WritingSession`, and the panels are
    redrawn from its state every ``REFRESH_INTERVAL`` seconds so the timer and
    the keystroke countdown stay live while the user is not typing.
    """

    def __init__(
        self,
        session: WritingSession,
        translator: Optional[Translator] = None,
        *,
        input: Any = None,
        output: Any = None,
    ) -> None:
        self.session = session
        self.t = translator or Translator()
        self._input = input
        self._output = output
        self.title_control = FormattedTextControl(
            self._title_fragments,
            focusable=True,
            show_cursor=True,
            get_cursor_position=self._title_cursor,
        )
        self.text_control = FormattedTextControl(
            self._text_fragments,
            focusable=True,
            show_cursor=True,
            get_cursor_position=self._text_cursor,
        )
        self.text_window = Window(
            content=self.text_control,
            wrap_lines=False,
            style=lambda: level_class(self.session.panel_levels()[1]),
        )
        self.application: Application | None = None

    def run(self) -> None:
        self.application = self.build_application()
        self.application.run()

    def build_application(self) -> Application:
        instructions = Frame(
            Window(
                content=FormattedTextControl(self._instruction_fragments),
                height=1,
                style="class:instructions",
            ),
            title=lambda: self.t.get("instructions"),
        )
        title = Frame(
            Window(
                content=self.title_control,
                height=1,
                style=lambda: level_class(self.session.panel_levels()[0]),
            ),
            title=lambda: self.t.get("title"),
        )
        text = Frame(self.text_window, title=lambda: self.t.get("text"))
        stats = VSplit(
            [
                Frame(
                    Window(
                        content=FormattedTextControl(self.session.word_count_label),
                        height=1,
                        style=lambda: level_class(self.session.word_count_level()),
                    ),
                    title=lambda: self.t.get("word-count"),
                ),
                Frame(
                    Window(
                        content=FormattedTextControl(self.session.time_label),
                        height=1,
                        style=lambda: level_class(self.session.time_level()),
                    ),
                    title=lambda: self.t.get("time"),
                ),
            ]
        )
        root = HSplit(
            [
                Window(height=1),
                VSplit([Window(width=2), HSplit([instructions, title, text, stats]), Window(width=2)]),
                Window(height=1),
            ]
        )
        layout = Layout(root, focused_element=self._focused_control())
        app: Application = Application(
            layout=layout,
            key_bindings=self.build_key_bindings(),
            style=build_style(),
            full_screen=True,
            refresh_interval=REFRESH_INTERVAL,
            input=self._input,
            output=self._output,
        )
        app.ttimeoutlen = 0.05
        app.before_render += self._before_render
        return app

    def build_key_bindings(self) -> KeyBindings:
        bindings = KeyBindings()

        @bindings.add("enter", eager=True)
        def _enter(event) -> None:  # type: ignore[no-untyped-def]
            self.session.press_enter()
            self._sync_focus(event.app)

        @bindings.add("backspace", eager=True)
        def _backspace(event) -> None:  # type: ignore[no-untyped-def]
            self.session.press_backspace()

        @bindings.add("escape", eager=True)
        @bindings.add("c-c", eager=True)
        def _escape(event) -> None:  # type: ignore[no-untyped-def]
            if self.handle_escape() is EscapeOutcome.EXIT:
                event.app.exit()
                return
            self._sync_focus(event.app)

        @bindings.add(Keys.BracketedPaste, eager=True)
        def _paste(event) -> None:  # type: ignore[no-untyped-def]
            self.handle_text(event.data.replace("\r\n", "\n").replace("\r", "\n"))

        @bindings.add(Keys.Any)
        def _insert(event) -> None:  # type: ignore[no-untyped-def]
            # Unbound special keys (arrows, function keys) land here too.
            if isinstance(event.key_sequence[0].key, Keys):
                return
            self.handle_text(event.data)

        return bindings

    def handle_text(self, data: str) -> None:
        for char in data:
            if char == "\n":
                if self.session.input_mode is InputMode.WRITING:
                    self.session.press_enter()
                continue
            if char.isprintable():
                self.session.press_char(char)

    def handle_escape(self) -> EscapeOutcome:
        return self.session.press_escape()

    def _before_render(self, _app: Application) -> None:
        self.session.tick()

    def _focused_control(self) -> FormattedTextControl:
        if self.session.input_mode is InputMode.TITLE:
            return self.title_control
        return self.text_control

    def _sync_focus(self, app: Application) -> None:
        app.layout.focus(self._focused_control())

    def _instruction_fragments(self) -> str:
        return "".join(self.t.get(key) for key in self.session.instruction_keys())

    def _title_fragments(self) -> StyleAndTextTuples:
        return [("", self.session.title)]

    def _title_cursor(self) -> Point:
        return Point(x=len(self.session.title), y=0)

    def _text_size(self) -> tuple[int, int]:
        info = self.text_window.render_info
        if info is not None:
            return info.window_height, info.window_width
        size = shutil.get_terminal_size((80, 24))
        return max(1, size.lines - 14), max(1, size.columns - HORIZONTAL_CHROME)

    def visible_text(self) -> str:
        rows, cols = self._text_size()
        return visible_text(self.session.text, rows, cols)

    def _text_fragments(self) -> StyleAndTextTuples:
        return [("", self.visible_text())]

    def _text_cursor(self) -> Point:
        x, y = text_cursor_position(self.visible_text())
        return Point(x=x, y=y)
