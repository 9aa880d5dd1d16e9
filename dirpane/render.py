"""Frame composition for the tree / contents / search panes.

``build_frame`` is a pure projection of ``AppState`` into screen rows;
``render_frame`` writes one composed frame to the terminal.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from .ansi import clip_ansi_line, fit_ansi_cell
from .source import DEFAULT_STYLE, UNREADABLE_PLACEHOLDER, display_lines
from .state import AppState
from .theme import DEFAULT_THEME, UITheme
from .tree import format_tree_entry

TWO_PANE_TREE_PERCENT = 40.0
THREE_PANE_PERCENTS = (33, 33, 34)

TREE_TITLE = "Directory Tree"
CONTENTS_TITLE = "File Contents"
SEARCH_TITLE = "Search"
EMPTY_CONTENTS_MESSAGE = "Select a file to view contents"
EMPTY_TREE_MESSAGE = "(empty)"
SEARCH_PROMPT = "/ "
SEARCH_HINT = "Enter does not run a search yet"

NAVIGATION_HINTS = "j/k move  h hidden  Enter search  q quit"
OVERLAY_HINTS = "type to edit  Backspace erase  Esc close"


@dataclass(frozen=True)
class RenderOptions:
    """Presentation settings that do not belong to session state."""

    theme: UITheme = DEFAULT_THEME
    style: str = DEFAULT_STYLE
    color: bool = True
    tree_percent: float = TWO_PANE_TREE_PERCENT


def _split_columns(usable: int, percents: tuple[float, ...]) -> list[int]:
    widths: list[int] = []
    remaining = usable
    for index, percent in enumerate(percents[:-1]):
        panes_after = len(percents) - index - 1
        width = int(usable * percent / 100)
        width = max(1, min(width, remaining - panes_after))
        widths.append(width)
        remaining -= width
    widths.append(remaining)
    return widths


def pane_widths(total_width: int, overlay_active: bool, tree_percent: float = TWO_PANE_TREE_PERCENT) -> list[int]:
    """Return pane widths for the 2-pane (tree:contents) or 3-pane layout.

    One column between neighbouring panes is reserved for the divider, and
    every pane is at least one column wide.
    """
    percents: tuple[float, ...]
    if overlay_active:
        percents = THREE_PANE_PERCENTS
    else:
        percents = (tree_percent, 100.0 - tree_percent)
    dividers = len(percents) - 1
    usable = max(len(percents), total_width - dividers)
    return _split_columns(usable, percents)


def tree_window_start(selected: int, count: int, rows: int) -> int:
    """Return the first tree row to show so ``selected`` is on screen.

    The tree scrolls a page at a time, which keeps the window stable while
    the selection moves within it.
    """
    if rows <= 0 or count <= rows:
        return 0
    selected = max(0, min(selected, count - 1))
    return (selected // rows) * rows


def selected_with_ansi(text: str, theme: UITheme = DEFAULT_THEME) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text or not theme.reverse:
        return text

    # Keep reverse video active even when the text contains internal resets.
    return theme.reverse + text.replace(theme.reset, theme.reset + theme.reverse) + theme.reset


def build_status_line(left_text: str, width: int, right_text: str) -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def _styled(text: str, sgr: str, theme: UITheme) -> str:
    if not sgr:
        return text
    return f"{sgr}{text}{theme.reset}"


def _tree_column(state: AppState, width: int, rows: int, options: RenderOptions) -> list[str]:
    theme = options.theme
    if not state.entries:
        return [fit_ansi_cell(_styled(EMPTY_TREE_MESSAGE, theme.placeholder, theme), width)] + [
            " " * width for _ in range(rows - 1)
        ]

    start = tree_window_start(state.selected_index, len(state.entries), rows)
    column: list[str] = []
    for row in range(rows):
        index = start + row
        if index >= len(state.entries):
            column.append(" " * width)
            continue
        cell = fit_ansi_cell(format_tree_entry(state.entries[index], theme), width)
        if index == state.selected_index:
            cell = selected_with_ansi(cell, theme)
        column.append(cell)
    return column


def _contents_column(state: AppState, width: int, rows: int, options: RenderOptions) -> list[str]:
    theme = options.theme
    if state.loaded_contents is None:
        message = _styled(EMPTY_CONTENTS_MESSAGE, theme.placeholder, theme)
        return [fit_ansi_cell(message, width)] + [" " * width for _ in range(rows - 1)]

    entry = state.selected_entry
    highlight = options.color and state.loaded_contents != UNREADABLE_PLACEHOLDER
    lines = display_lines(
        state.loaded_contents,
        entry.path if entry is not None else None,
        style=options.style,
        color=highlight,
    )
    visible = lines[state.scroll_offset : state.scroll_offset + rows]
    column = [fit_ansi_cell(line, width) for line in visible]
    column.extend(" " * width for _ in range(rows - len(column)))
    return column


def _search_column(state: AppState, width: int, rows: int, options: RenderOptions) -> list[str]:
    theme = options.theme
    prompt = _styled(f"{SEARCH_PROMPT}{state.search_buffer}_", theme.search_text, theme)
    hint = _styled(SEARCH_HINT, theme.search_hint, theme)
    lines = [prompt, "", hint][:rows]
    column = [fit_ansi_cell(line, width) for line in lines]
    column.extend(" " * width for _ in range(rows - len(column)))
    return column


def build_frame(state: AppState, width: int, height: int, options: RenderOptions | None = None) -> list[str]:
    """Compose one frame as a list of screen rows without touching ``state``.

    The first row carries pane titles, the last row is the status line, and
    the rows between show the panes side by side. Terminals shorter than
    three rows get the leading rows of that layout only.
    """
    options = options or RenderOptions()
    theme = options.theme
    body_rows = max(0, height - 2)
    overlay = state.overlay_active
    widths = pane_widths(width - 1, overlay, options.tree_percent)

    titles = [TREE_TITLE, CONTENTS_TITLE]
    columns = [
        _tree_column(state, widths[0], body_rows, options),
        _contents_column(state, widths[1], body_rows, options),
    ]
    if overlay:
        titles.append(SEARCH_TITLE)
        columns.append(_search_column(state, widths[2], body_rows, options))

    divider = _styled("│", theme.divider, theme)
    frame: list[str] = [
        divider.join(fit_ansi_cell(_styled(f" {title} ", theme.title, theme), w) for title, w in zip(titles, widths))
    ]
    for row in range(body_rows):
        frame.append(divider.join(column[row] for column in columns))

    if state.entries:
        position = f"{state.selected_index + 1}/{len(state.entries)}"
    else:
        position = "0/0"
    hidden_label = "  hidden:on" if state.show_hidden else ""
    hints = OVERLAY_HINTS if overlay else NAVIGATION_HINTS
    status = build_status_line(f"{state.root}  {position}{hidden_label}", width, hints)
    frame.append(_styled(status, theme.reverse, theme))
    return frame[: max(1, height)]


def render_frame(state: AppState, width: int, height: int, options: RenderOptions | None = None) -> None:
    """Clear the screen and write one composed frame to stdout."""
    rows = build_frame(state, width, height, options)
    out = "\033[H\033[J" + "\r\n".join(clip_ansi_line(row, width) for row in rows)
    os.write(sys.stdout.fileno(), out.encode("utf-8", errors="replace"))
