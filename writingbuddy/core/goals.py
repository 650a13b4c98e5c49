from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..errors import ConfigError


def normalize_target(name: str, raw: Any) -> Optional[int]:
    """Validate a goal value from config or CLI; 0 and None disable the goal."""
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ConfigError(f"{name} must be a whole number, got {raw!r}")
    if raw < 0:
        raise ConfigError(f"{name} must not be negative, got {raw}")
    return raw or None


@dataclass(frozen=True)
class Goals:
    word_target: Optional[int] = None
    time_target: Optional[int] = None

    @classmethod
    def from_values(cls, word_goal: Any = None, time_goal: Any = None) -> "Goals":
        return cls(
            word_target=normalize_target("word_goal", word_goal),
            time_target=normalize_target("time_goal", time_goal),
        )

    def words_met(self, word_count: int) -> bool:
        if self.word_target is None:
            return True
        return word_count >= self.word_target

    def time_met(self, elapsed_seconds: float) -> bool:
        if self.time_target is None:
            return True
        return int(elapsed_seconds) >= self.time_target

    def met(self, word_count: int, elapsed_seconds: float) -> bool:
        return self.words_met(word_count) and self.time_met(elapsed_seconds)
