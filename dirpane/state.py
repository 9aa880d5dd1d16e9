"""Session state for the browser and its state transitions.

``AppState`` owns the flattened tree, the selection, the loaded file text,
and the search overlay. It is created once per session and passed
explicitly to the key dispatcher and the renderer.
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .source import read_file_contents
from .tree import TreeEntry, build_tree_entries

logger = logging.getLogger(__name__)


class InputMode(enum.Enum):
    """Routing target for key input."""

    NAVIGATION = "navigation"
    SEARCH_OVERLAY = "search_overlay"


class Direction(enum.Enum):
    NEXT = 1
    PREVIOUS = -1


def default_start_path() -> Path:
    """Return the working directory, or the filesystem root when it is gone."""
    try:
        return Path.cwd()
    except OSError:
        return Path(os.path.abspath(os.sep))


@dataclass
class AppState:
    root: Path
    entries: list[TreeEntry] = field(default_factory=list)
    selected_index: int = 0
    show_hidden: bool = False
    loaded_contents: str | None = None
    scroll_offset: int = 0
    mode: InputMode = InputMode.NAVIGATION
    search_buffer: str = ""

    @classmethod
    def initialize(cls, start_path: Path | None = None) -> AppState:
        """Walk the start path with hidden files excluded and select the first entry."""
        root = start_path if start_path is not None else default_start_path()
        state = cls(root=root, entries=build_tree_entries(root, show_hidden=False))
        state.load_selected_contents()
        logger.info("browsing %s (%d entries)", root, len(state.entries))
        return state

    @property
    def overlay_active(self) -> bool:
        return self.mode is InputMode.SEARCH_OVERLAY

    @property
    def selected_entry(self) -> TreeEntry | None:
        if 0 <= self.selected_index < len(self.entries):
            return self.entries[self.selected_index]
        return None

    def move_selection(self, direction: Direction) -> bool:
        """Move the selection one row, clamped at both ends.

        Returns ``True`` when the selection moved. A successful move reloads
        the contents pane and resets its scroll offset.
        """
        target = self.selected_index + direction.value
        if not self.entries or not 0 <= target < len(self.entries):
            return False
        self.selected_index = target
        self.load_selected_contents()
        self.scroll_offset = 0
        return True

    def load_selected_contents(self) -> None:
        """Load text for the selected file; directories and empty trees load nothing."""
        entry = self.selected_entry
        if entry is None or entry.is_dir:
            self.loaded_contents = None
            return
        self.loaded_contents = read_file_contents(entry.path)

    def toggle_hidden(self) -> None:
        """Flip hidden-file visibility, rebuild the tree, and select the first row."""
        self.show_hidden = not self.show_hidden
        self.entries = build_tree_entries(self.root, self.show_hidden)
        # The old index may point past the rebuilt, differently sized tree.
        self.selected_index = 0
        self.load_selected_contents()
        self.scroll_offset = 0
        logger.debug(
            "rebuilt tree show_hidden=%s (%d entries)",
            self.show_hidden,
            len(self.entries),
        )

    def open_overlay(self) -> None:
        self.mode = InputMode.SEARCH_OVERLAY
        logger.debug("search overlay opened")

    def close_overlay(self) -> None:
        self.mode = InputMode.NAVIGATION
        logger.debug("search overlay closed")

    def overlay_input(self, key: str) -> bool:
        """Edit the search buffer with one key token and report whether it changed.

        Printable characters append, ``BACKSPACE`` erases the last character,
        and ``ENTER`` (commit) is accepted but performs no search. Keys are
        ignored while the overlay is closed.
        """
        if not self.overlay_active:
            return False
        if key == "BACKSPACE":
            if not self.search_buffer:
                return False
            self.search_buffer = self.search_buffer[:-1]
            return True
        if key == "ENTER":
            return False
        if len(key) == 1 and key.isprintable():
            self.search_buffer += key
            return True
        return False
