"""File-content loading, sanitization, and syntax highlighting.

Loading never raises: unreadable or non-text files become a placeholder.
Highlighting goes through Pygments with a plain-text lexer fallback.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

UNREADABLE_PLACEHOLDER = "Unable to read file contents"
DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_FORMATTERS: dict[str, TerminalFormatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()
_HIGHLIGHT_CACHE: dict[tuple[str, str, str], str] = {}
_HIGHLIGHT_CACHE_MAX_ENTRIES = 8


def read_file_contents(path: Path) -> str:
    """Return the text of ``path`` or the unreadable-file placeholder.

    The file is decoded as strict UTF-8, so binary content and permission
    or I/O errors all map to ``UNREADABLE_PLACEHOLDER``.
    """
    try:
        with open(path, encoding="utf-8", newline="") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("cannot read %s: %s", path, exc)
        return UNREADABLE_PLACEHOLDER


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def normalize_style(style: str) -> str:
    """Return ``style`` when Pygments knows it, otherwise the default style."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        logger.info("unknown pygments style %r, using %s", style, DEFAULT_STYLE)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    formatter = TerminalFormatter(style=style)
    _FORMATTERS[style] = formatter
    return formatter


def colorize_source(source: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    """Return ANSI-highlighted ``source`` using a lexer chosen by file name.

    Results are memoized for the last few files because the renderer
    redraws the same contents on every key press.
    """
    style = normalize_style(style)
    cache_key = (str(path), style, source)
    cached = _HIGHLIGHT_CACHE.get(cache_key)
    if cached is not None:
        return cached

    try:
        lexer = get_lexer_for_filename(path.name, source, stripnl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False)
    rendered = pygments_highlight(source, lexer, _formatter_for_style(style))
    # Pygments always terminates output with a newline; keep the source's shape.
    if not source.endswith("\n") and rendered.endswith("\n"):
        rendered = rendered[:-1]

    if len(_HIGHLIGHT_CACHE) >= _HIGHLIGHT_CACHE_MAX_ENTRIES:
        _HIGHLIGHT_CACHE.pop(next(iter(_HIGHLIGHT_CACHE)))
    _HIGHLIGHT_CACHE[cache_key] = rendered
    return rendered


def display_lines(source: str, path: Path | None, style: str = DEFAULT_STYLE, color: bool = True) -> list[str]:
    """Split sanitized (and optionally highlighted) ``source`` into display lines."""
    text = sanitize_terminal_text(source)
    if color and path is not None:
        text = colorize_source(text, path, style)
    return text.splitlines()
