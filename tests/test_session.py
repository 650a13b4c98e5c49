import tempfile
import unittest
from pathlib import Path
from unittest import mock

from writingbuddy.config.paths import WritingBuddyPaths
from writingbuddy.core.goals import Goals
from writingbuddy.core.session import (
    LEVEL_ACTIVE,
    LEVEL_DANGER,
    LEVEL_DONE,
    LEVEL_PASSIVE,
    LEVEL_WARNING,
    EscapeOutcome,
    InputMode,
    WritingSession,
)
from writingbuddy.core.session_log import SessionLogger, set_active_logger


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_session(clock: FakeClock, **kwargs) -> WritingSession:  # type: ignore[no-untyped-def]
    return WritingSession("## 2024-05-01", clock=clock, **kwargs)


def type_text(session: WritingSession, text: str) -> None:
    for char in text:
        if char == "\n":
            session.press_enter()
        else:
            session.press_char(char)


class TitleModeTests(unittest.TestCase):
    def test_chars_and_backspace_edit_title(self) -> None:
        session = make_session(FakeClock(), backspace_active=False)
        session.press_char("!")
        self.assertEqual(session.title, "## 2024-05-01!")
        session.press_backspace()
        self.assertEqual(session.title, "## 2024-05-01")
        self.assertEqual(session.text, "")

    def test_enter_starts_writing_and_clock(self) -> None:
        clock = FakeClock()
        session = make_session(clock)
        session.press_enter()
        self.assertIs(session.input_mode, InputMode.WRITING)
        clock.now += 12
        self.assertEqual(session.elapsed_seconds, 12)

    def test_escape_in_title_mode_exits(self) -> None:
        session = make_session(FakeClock(), goals=Goals(word_target=100))
        self.assertIs(session.press_escape(), EscapeOutcome.EXIT)


class WritingModeTests(unittest.TestCase):
    def test_word_count_and_labels(self) -> None:
        session = make_session(FakeClock(), goals=Goals(word_target=5))
        session.press_enter()
        type_text(session, "one two\nthree  ")
        self.assertEqual(session.word_count, 3)
        self.assertEqual(session.word_count_label(), "3/5")
        self.assertEqual(session.time_label(), "0 s")

    def test_time_label_with_goal(self) -> None:
        clock = FakeClock()
        session = make_session(clock, goals=Goals(time_target=600))
        session.press_enter()
        clock.now += 30.7
        self.assertEqual(session.time_label(), "30 s/600 s")

    def test_backspace_deletes_when_active(self) -> None:
        session = make_session(FakeClock())
        session.press_enter()
        type_text(session, "abc")
        session.press_backspace()
        self.assertEqual(session.text, "ab")

    def test_backspace_disabled_is_noop(self) -> None:
        clock = FakeClock()
        session = make_session(clock, backspace_active=False, keystroke_timeout=10)
        session.press_enter()
        type_text(session, "abc")
        typed_at = session.last_keystroke
        clock.now += 3
        session.press_backspace()
        self.assertEqual(session.text, "abc")
        self.assertEqual(session.last_keystroke, typed_at)

    def test_strict_mode_refuses_until_goals_met(self) -> None:
        clock = FakeClock()
        session = make_session(
            clock, goals=Goals(word_target=2, time_target=60), strict_mode=True
        )
        session.press_enter()
        type_text(session, "hello world")
        self.assertIs(session.press_escape(), EscapeOutcome.REFUSED)
        self.assertIs(session.input_mode, InputMode.WRITING)
        self.assertEqual(session.instruction_keys(), ["keep-writing"])

        clock.now += 60
        self.assertEqual(session.instruction_keys(), ["stop-writing"])
        self.assertIs(session.press_escape(), EscapeOutcome.LEFT_WRITING)
        self.assertIs(session.input_mode, InputMode.TITLE)
        self.assertFalse(session.writing_time.is_running)
        self.assertIsNone(session.last_keystroke)

    def test_non_strict_mode_allows_leaving_early(self) -> None:
        session = make_session(FakeClock(), goals=Goals(word_target=500), strict_mode=False)
        session.press_enter()
        self.assertIs(session.press_escape(), EscapeOutcome.LEFT_WRITING)

    def test_instruction_keys_in_title_mode(self) -> None:
        session = make_session(FakeClock(), strict_mode=False)
        self.assertEqual(session.instruction_keys(), ["exit-no-save", "start-writing"])
        session.press_enter()
        session.press_char("x")
        session.press_escape()
        self.assertEqual(session.instruction_keys(), ["exit-save", "start-writing"])

    def test_stopwatch_pauses_outside_writing_mode(self) -> None:
        clock = FakeClock()
        session = make_session(clock, strict_mode=False)
        session.press_enter()
        clock.now += 5
        session.press_escape()
        clock.now += 100
        self.assertEqual(session.elapsed_seconds, 5)
        session.press_enter()
        clock.now += 1
        self.assertEqual(session.elapsed_seconds, 6)


class KeystrokeTimeoutTests(unittest.TestCase):
    def test_buffer_cleared_after_pause(self) -> None:
        clock = FakeClock()
        session = make_session(clock, keystroke_timeout=5)
        session.press_enter()
        type_text(session, "some words")
        clock.now += 5
        self.assertFalse(session.tick())
        self.assertEqual(session.text, "some words")
        clock.now += 0.5
        self.assertTrue(session.tick())
        self.assertEqual(session.text, "")
        self.assertEqual(session.writing_time.elapsed, 0.0)
        self.assertIsNone(session.last_keystroke)

    def test_typing_keeps_buffer_alive(self) -> None:
        clock = FakeClock()
        session = make_session(clock, keystroke_timeout=5)
        session.press_enter()
        for char in "abcdef":
            clock.now += 4
            session.press_char(char)
            self.assertFalse(session.tick())
        self.assertEqual(session.text, "abcdef")

    def test_timer_not_armed_before_first_keystroke(self) -> None:
        clock = FakeClock()
        session = make_session(clock, keystroke_timeout=5)
        session.press_enter()
        clock.now += 60
        self.assertFalse(session.tick())

    def test_no_timeout_configured(self) -> None:
        clock = FakeClock()
        session = make_session(clock)
        session.press_enter()
        session.press_char("a")
        clock.now += 3600
        self.assertFalse(session.tick())
        self.assertEqual(session.text, "a")

    def test_panel_levels_escalate(self) -> None:
        clock = FakeClock()
        session = make_session(clock, keystroke_timeout=10)
        self.assertEqual(session.panel_levels(), (LEVEL_ACTIVE, LEVEL_PASSIVE))
        session.press_enter()
        session.press_char("a")
        self.assertEqual(session.panel_levels(), (LEVEL_PASSIVE, LEVEL_ACTIVE))
        clock.now += 6
        self.assertEqual(session.panel_levels(), (LEVEL_PASSIVE, LEVEL_WARNING))
        clock.now += 3
        self.assertEqual(session.panel_levels(), (LEVEL_PASSIVE, LEVEL_DANGER))


class LevelTests(unittest.TestCase):
    def test_word_and_time_levels(self) -> None:
        clock = FakeClock()
        session = make_session(clock, goals=Goals(word_target=1, time_target=10))
        session.press_enter()
        self.assertEqual(session.word_count_level(), LEVEL_WARNING)
        self.assertEqual(session.time_level(), LEVEL_ACTIVE)
        session.press_char("a")
        clock.now += 10
        self.assertEqual(session.word_count_level(), LEVEL_DONE)
        self.assertEqual(session.time_level(), LEVEL_DONE)

    def test_levels_without_goals_are_passive(self) -> None:
        session = make_session(FakeClock())
        self.assertEqual(session.word_count_level(), LEVEL_PASSIVE)
        self.assertEqual(session.time_level(), LEVEL_PASSIVE)


class SessionLoggingTests(unittest.TestCase):
    def test_refused_exit_and_clear_are_logged(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_home, tempfile.TemporaryDirectory() as tmp:
            with mock.patch("pathlib.Path.home", return_value=Path(tmp_home)):
                logger = SessionLogger(WritingBuddyPaths(Path(tmp)), "info")
                set_active_logger(logger)
                try:
                    clock = FakeClock()
                    session = make_session(
                        clock, goals=Goals(word_target=10), keystroke_timeout=2
                    )
                    session.press_enter()
                    session.press_char("a")
                    session.press_escape()
                    clock.now += 3
                    session.tick()
                finally:
                    set_active_logger(None)
                    logger.close()
                self.assertIsNotNone(logger.path)
                text = logger.path.read_text(encoding="utf-8")  # type: ignore[union-attr]
                self.assertIn("exit.refused", text)
                self.assertIn("keystroke_timeout.cleared", text)
                self.assertIn("mode.writing", text)


if __name__ == "__main__":
    unittest.main()
