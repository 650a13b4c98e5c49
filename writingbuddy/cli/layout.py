from __future__ import annotations

import textwrap


def wrap_text(text: str, cols: int) -> list[str]:
    """Wrap each hard line of ``text`` to ``cols`` columns."""
    width = max(1, cols)
    lines: list[str] = []
    for line in text.split("\n"):
        wrapped = textwrap.wrap(line, width=width, drop_whitespace=True)
        lines.extend(wrapped or [""])
    return lines


def visible_text(text: str, rows: int, cols: int) -> str:
    """Return the tail of the wrapped text that fits into ``rows`` lines.

    One row is kept free for the cursor. Trailing whitespace dropped by the
    wrapper is put back so the cursor sits after the last typed space; its
    newlines count toward ``rows`` as well.
    """
    if not text:
        return ""
    rows = max(1, rows)
    lines = wrap_text(text.rstrip(), cols)
    keep = rows - 1
    if len(lines) > keep:
        lines = lines[len(lines) - keep :] if keep else []
    trailing = text[len(text.rstrip()) :]
    shown = ("\n".join(lines).rstrip() + trailing).split("\n")
    return "\n".join(shown[-rows:])


def text_cursor_position(text: str) -> tuple[int, int]:
    """Column and row of the cursor placed after the last character."""
    lines = text.split("\n")
    return len(lines[-1]), len(lines) - 1
