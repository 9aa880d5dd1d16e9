"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the pane chrome and tree rows. The Pygments
style used for file contents is a separate setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    title: str
    tree_dir: str
    tree_file: str
    placeholder: str
    search_text: str
    search_hint: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    title="\033[1;38;5;81m",
    tree_dir="\033[1;34m",
    tree_file="\033[38;5;252m",
    placeholder="\033[2;38;5;250m",
    search_text="\033[33m",
    search_hint="\033[2;38;5;250m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    divider="\033[2;38;5;31m",
    reverse="\033[7m",
    reset="\033[0m",
    title="\033[1;38;5;45m",
    tree_dir="\033[1;38;5;45m",
    tree_file="\033[38;5;153m",
    placeholder="\033[2;38;5;110m",
    search_text="\033[38;5;229m",
    search_hint="\033[2;38;5;110m",
)

PLAIN_THEME = UITheme(
    name="plain",
    divider="",
    reverse="\033[7m",
    reset="\033[0m",
    title="",
    tree_dir="",
    tree_file="",
    placeholder="",
    search_text="",
    search_hint="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
