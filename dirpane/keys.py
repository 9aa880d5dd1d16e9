"""Keyboard dispatch for navigation and search-overlay modes.

Each ``InputMode`` has its own handler; ``handle_key`` picks the handler
from a table covering every mode and returns ``True`` when the app quits.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .state import AppState, Direction, InputMode

logger = logging.getLogger(__name__)

QUIT_KEYS = ("q",)
NEXT_KEYS = ("DOWN", "j")
PREVIOUS_KEYS = ("UP", "k")
TOGGLE_HIDDEN_KEYS = ("h",)
CONFIRM_KEYS = ("ENTER",)
CANCEL_KEYS = ("ESC",)


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Small exact-match key-dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], bool | None]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str) -> bool | None:
        """Invoke bound handler for ``key``; ``None`` means no binding matched."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()


def handle_navigation_key(state: AppState, key: str) -> bool:
    """Handle one navigation-mode key and return ``True`` when app should quit."""

    def move(direction: Direction) -> Callable[[], bool]:
        def action() -> bool:
            state.move_selection(direction)
            return False

        return action

    def toggle_hidden_action() -> bool:
        state.toggle_hidden()
        return False

    def open_overlay_action() -> bool:
        state.open_overlay()
        return False

    bindings = KeyComboRegistry().register_bindings(
        KeyComboBinding(QUIT_KEYS, lambda: True),
        KeyComboBinding(NEXT_KEYS, move(Direction.NEXT)),
        KeyComboBinding(PREVIOUS_KEYS, move(Direction.PREVIOUS)),
        KeyComboBinding(TOGGLE_HIDDEN_KEYS, toggle_hidden_action),
        KeyComboBinding(CONFIRM_KEYS, open_overlay_action),
    )
    return bool(bindings.dispatch(key))


def handle_overlay_key(state: AppState, key: str) -> bool:
    """Handle one search-overlay key; the overlay never quits the app."""
    if key in CANCEL_KEYS:
        state.close_overlay()
        return False
    # Commit is reserved: overlay_input accepts ENTER without searching.
    state.overlay_input(key)
    return False


MODE_HANDLERS: dict[InputMode, Callable[[AppState, str], bool]] = {
    InputMode.NAVIGATION: handle_navigation_key,
    InputMode.SEARCH_OVERLAY: handle_overlay_key,
}


def handle_key(state: AppState, key: str) -> bool:
    """Route ``key`` to the handler for the current mode."""
    should_quit = MODE_HANDLERS[state.mode](state, key)
    if should_quit:
        logger.info("quit requested")
    return should_quit
