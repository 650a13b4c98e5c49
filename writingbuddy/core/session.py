from __future__ import annotations

import time
from enum import Enum
from typing import Callable, Optional

from .goals import Goals
from .session_log import log_info, log_warn
from .stopwatch import Stopwatch

LEVEL_ACTIVE = "active"
LEVEL_DONE = "done"
LEVEL_WARNING = "warning"
LEVEL_DANGER = "danger"
LEVEL_PASSIVE = "passive"

WARNING_FRACTION = 0.5
DANGER_FRACTION = 0.8


class InputMode(Enum):
    TITLE = "title"
    WRITING = "writing"


class EscapeOutcome(Enum):
    EXIT = "exit"
    LEFT_WRITING = "left_writing"
    REFUSED = "refused"


class WritingSession:
    """State of one writing session, driven by key presses and a periodic tick.

    The terminal UI owns no state of its own: every key binding calls one of
    the ``press_*`` methods and every refresh calls :meth:`tick` before the
    panels are redrawn from the values exposed here.
    """

    def __init__(
        self,
        title: str = "",
        *,
        goals: Goals | None = None,
        backspace_active: bool = True,
        strict_mode: bool = True,
        keystroke_timeout: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.title = title
        self.text = ""
        self.input_mode = InputMode.TITLE
        self.goals = goals or Goals()
        self.backspace_active = backspace_active
        self.strict_mode = strict_mode
        self.keystroke_timeout = keystroke_timeout or None
        self.last_keystroke: float | None = None
        self._clock = clock
        self.writing_time = Stopwatch(clock)

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    @property
    def elapsed_seconds(self) -> int:
        return int(self.writing_time.elapsed)

    def has_text(self) -> bool:
        return bool(self.text)

    def achieved_goals(self) -> bool:
        return self.goals.met(self.word_count, self.writing_time.elapsed)

    def press_char(self, char: str) -> None:
        if self.input_mode is InputMode.TITLE:
            self.title += char
            return
        self._record_keystroke()
        self.writing_time.start()
        self.text += char

    def press_enter(self) -> None:
        if self.input_mode is InputMode.TITLE:
            self.writing_time.start()
            self.input_mode = InputMode.WRITING
            log_info("session", "mode.writing", {"title": self.title})
            return
        self._record_keystroke()
        self.text += "\n"

    def press_backspace(self) -> None:
        if self.input_mode is InputMode.TITLE:
            self.title = self.title[:-1]
            return
        if not self.backspace_active:
            return
        self._record_keystroke()
        self.text = self.text[:-1]

    def press_escape(self) -> EscapeOutcome:
        if self.input_mode is InputMode.TITLE:
            return EscapeOutcome.EXIT
        if self.strict_mode and not self.achieved_goals():
            log_info(
                "session",
                "exit.refused",
                {"words": self.word_count, "seconds": self.elapsed_seconds},
            )
            return EscapeOutcome.REFUSED
        self.writing_time.stop()
        self.last_keystroke = None
        self.input_mode = InputMode.TITLE
        log_info(
            "session",
            "mode.title",
            {"words": self.word_count, "seconds": self.elapsed_seconds},
        )
        return EscapeOutcome.LEFT_WRITING

    def tick(self) -> bool:
        """Clear the text if typing paused for longer than the keystroke timeout."""
        if self.keystroke_timeout is None or self.last_keystroke is None:
            return False
        if self._since_last_keystroke() <= self.keystroke_timeout:
            return False
        log_warn(
            "session",
            "keystroke_timeout.cleared",
            {"timeout": self.keystroke_timeout, "words_lost": self.word_count},
        )
        self.last_keystroke = None
        self.writing_time.reset()
        self.text = ""
        return True

    def word_count_label(self) -> str:
        if self.goals.word_target is None:
            return f"{self.word_count}"
        return f"{self.word_count}/{self.goals.word_target}"

    def time_label(self) -> str:
        if self.goals.time_target is None:
            return f"{self.elapsed_seconds} s"
        return f"{self.elapsed_seconds} s/{self.goals.time_target} s"

    def word_count_level(self) -> str:
        if self.goals.word_target is None:
            return LEVEL_PASSIVE
        return LEVEL_DONE if self.goals.words_met(self.word_count) else LEVEL_WARNING

    def time_level(self) -> str:
        if self.goals.time_target is None:
            return LEVEL_PASSIVE
        return LEVEL_DONE if self.goals.time_met(self.writing_time.elapsed) else LEVEL_ACTIVE

    def panel_levels(self) -> tuple[str, str]:
        """Return the (title, text) panel levels."""
        if self.input_mode is InputMode.TITLE:
            return LEVEL_ACTIVE, LEVEL_PASSIVE
        if self.keystroke_timeout is None or self.last_keystroke is None:
            return LEVEL_PASSIVE, LEVEL_ACTIVE
        idle = self._since_last_keystroke()
        if idle > DANGER_FRACTION * self.keystroke_timeout:
            return LEVEL_PASSIVE, LEVEL_DANGER
        if idle > WARNING_FRACTION * self.keystroke_timeout:
            return LEVEL_PASSIVE, LEVEL_WARNING
        return LEVEL_PASSIVE, LEVEL_ACTIVE

    def instruction_keys(self) -> list[str]:
        if self.input_mode is InputMode.TITLE:
            save_key = "exit-save" if self.has_text() else "exit-no-save"
            return [save_key, "start-writing"]
        if self.strict_mode and not self.achieved_goals():
            return ["keep-writing"]
        return ["stop-writing"]

    def _record_keystroke(self) -> None:
        self.last_keystroke = self._clock()

    def _since_last_keystroke(self) -> float:
        if self.last_keystroke is None:
            return 0.0
        return self._clock() - self.last_keystroke
