"""ANSI-aware text measurement and clipping for pane cells.

Escape sequences never count toward width, and wide characters count two
columns, so panes stay aligned when rows carry colors.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return the visible column count of a styled single-line string."""
    col = 0
    for ch in ANSI_ESCAPE_RE.sub("", text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    Tabs are expanded into spaces so clipping aligns with rendered terminal cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        if col >= max_cols:
            i += 1
            continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            col = max_cols
            i += 1
            continue
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def fit_ansi_cell(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` columns and pad it with spaces to exactly fill them.

    A reset is inserted after styled content so colors never bleed into
    the padding or the next pane.
    """
    clipped = clip_ansi_line(text, width)
    if "\033" in clipped:
        clipped += "\033[0m"
    pad = width - display_width(clipped)
    if pad > 0:
        clipped += " " * pad
    return clipped
