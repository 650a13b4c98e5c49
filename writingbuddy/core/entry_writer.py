from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..errors import EntryWriteError

DEFAULT_TITLE_PATTERN = "## %Y-%m-%d"
DEFAULT_FILE_PATTERN = "%Y-%m.md"


@dataclass(frozen=True)
class Entry:
    title: str
    body: str
    created_at: datetime = field(default_factory=datetime.now)


def format_pattern(pattern: str, when: datetime) -> str:
    """Substitute strftime directives such as ``%Y-%m-%d`` in ``pattern``."""
    return when.strftime(pattern)


def resolve_entry_path(root: Path, file_pattern: str, when: datetime) -> Path:
    candidate = Path(format_pattern(file_pattern, when)).expanduser()
    if not candidate.is_absolute():
        candidate = root / candidate
    return candidate


def render_entry(entry: Entry) -> str:
    lines = []
    if entry.title:
        lines.append(entry.title)
    lines.append(entry.body)
    return "\n".join(lines) + "\n\n"


def append_entry(path: Path, entry: Entry) -> Path:
    """Append ``entry`` to the markdown file at ``path``, creating it if absent.

    The file is only ever opened in append mode, so earlier entries are never
    rewritten. Any OS failure is raised as :class:`EntryWriteError`.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as output:
            output.write(render_entry(entry))
    except OSError as exc:
        raise EntryWriteError(path, exc) from exc
    return path


def format_write_error_message(
    path: Path,
    exc: OSError,
    *,
    root: Path | None = None,
) -> str:
    display_path = str(path)
    if root is not None:
        with suppress(ValueError):
            display_path = str(path.relative_to(root))
    reason = exc.strerror or str(exc)
    if reason:
        first_line = f"Could not save to {display_path}: {reason}."
    else:
        first_line = f"Could not save to {display_path}."
    lines = [first_line]
    if isinstance(exc, IsADirectoryError):
        lines.append("The file pattern points at a directory. Check `file_string`.")
    else:
        lines.append("Check that the directory exists and is writable.")
    return "\n".join(lines)
