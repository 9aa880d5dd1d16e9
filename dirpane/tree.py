"""Flattened directory tree construction and row formatting.

Walks a directory depth-first into depth-annotated ``TreeEntry`` rows.
The walk is best-effort: unreadable directories contribute no children.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .theme import DEFAULT_THEME, PLAIN_THEME, UITheme

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."


@dataclass(frozen=True)
class TreeEntry:
    """One row of the flattened tree pane."""

    path: Path
    depth: int
    is_dir: bool

    @property
    def name(self) -> str:
        return self.path.name or str(self.path)


@dataclass(frozen=True)
class DirectoryChild:
    """One visible child of a scanned directory."""

    name: str
    path: Path
    is_dir: bool
    is_symlink: bool = False


def is_hidden_name(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)


def list_directory_children(
    directory: Path,
    show_hidden: bool,
) -> tuple[list[DirectoryChild], OSError | None]:
    """List visible children of ``directory`` in code-point name order.

    Returns ``(children, scan_error)``. ``scan_error`` is set when the
    directory itself cannot be scanned; children that cannot be classified
    are skipped.
    """
    children: list[DirectoryChild] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                name = child.name
                if not show_hidden and is_hidden_name(name):
                    continue
                try:
                    is_dir = child.is_dir()
                    is_symlink = child.is_symlink()
                except OSError:
                    continue
                children.append(
                    DirectoryChild(
                        name=name,
                        path=directory / name,
                        is_dir=is_dir,
                        is_symlink=is_symlink,
                    )
                )
    except OSError as exc:
        return [], exc

    children.sort(key=lambda item: item.name)
    return children, None


def build_tree_entries(root: Path, show_hidden: bool) -> list[TreeEntry]:
    """Build the pre-order tree-entry list for everything below ``root``.

    ``root`` itself is not listed; its direct children have depth 0. A
    missing or unreadable root yields an empty list.
    """
    entries: list[TreeEntry] = []

    def walk(directory: Path, depth: int) -> None:
        """Append visible children of ``directory``, each followed by its subtree."""
        children, scan_error = list_directory_children(directory, show_hidden)
        if scan_error is not None:
            logger.debug("skipping unreadable directory %s: %s", directory, scan_error)
            return
        for child in children:
            entries.append(TreeEntry(child.path, depth, child.is_dir))
            # Linked directories are shown but not entered, so link cycles terminate.
            if child.is_dir and not child.is_symlink:
                walk(child.path, depth + 1)

    walk(root, 0)
    return entries


def format_tree_entry(entry: TreeEntry, theme: UITheme | None = None) -> str:
    """Render one tree row with depth indentation and directory styling."""
    active_theme = theme or DEFAULT_THEME
    indent = "  " * entry.depth
    if entry.is_dir:
        color, name = active_theme.tree_dir, entry.name + "/"
    else:
        color, name = active_theme.tree_file, entry.name
    if not color:
        return f"{indent}{name}"
    return f"{indent}{color}{name}{active_theme.reset}"


def format_plain_tree(entries: list[TreeEntry]) -> str:
    """Return the flattened tree as newline-terminated plain text."""
    return "".join(format_tree_entry(entry, PLAIN_THEME) + "\n" for entry in entries)
