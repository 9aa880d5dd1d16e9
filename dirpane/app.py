"""Main interactive loop and session composition.

Each iteration draws a frame from ``AppState``, blocks for one key token,
and dispatches it. The terminal is restored however the loop exits.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .input import read_key
from .keys import handle_key
from .render import RenderOptions, render_frame
from .state import AppState, default_start_path
from .terminal import TerminalController, terminal_size
from .tree import build_tree_entries, format_plain_tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Terminal-facing operations used by ``run_main_loop``."""

    read_key: Callable[[int], str]
    render_frame: Callable[[AppState, int, int, RenderOptions], None]
    terminal_size: Callable[[], tuple[int, int]]


DEFAULT_CALLBACKS = RuntimeLoopCallbacks(
    read_key=read_key,
    render_frame=render_frame,
    terminal_size=terminal_size,
)


def run_main_loop(
    state: AppState,
    terminal: TerminalController,
    stdin_fd: int,
    options: RenderOptions,
    callbacks: RuntimeLoopCallbacks = DEFAULT_CALLBACKS,
) -> None:
    """Run the draw / read / dispatch loop until a quit key arrives.

    End of input also stops the loop. Terminal I/O errors propagate after
    the terminal has been restored.
    """
    with terminal.raw_mode():
        while True:
            columns, lines = callbacks.terminal_size()
            callbacks.render_frame(state, columns, lines, options)
            key = callbacks.read_key(stdin_fd)
            if not key:
                logger.info("input closed")
                break
            if handle_key(state, key):
                break


def print_tree(root: Path | None) -> None:
    """Write the flattened tree below ``root`` to stdout without a UI."""
    start = root if root is not None else default_start_path()
    sys.stdout.write(format_plain_tree(build_tree_entries(start, show_hidden=False)))


def run_browser(root: Path | None, options: RenderOptions, print_only: bool = False) -> int:
    """Browse ``root`` interactively, or print its tree when there is no TTY."""
    if print_only or not (os.isatty(sys.stdin.fileno()) and os.isatty(sys.stdout.fileno())):
        print_tree(root)
        return 0

    stdin_fd = sys.stdin.fileno()
    state = AppState.initialize(root)
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    run_main_loop(state, terminal, stdin_fd, options)
    return 0
