"""Decides when the race screen has to be drawn again."""

import os
import sys
from dataclasses import dataclass
from typing import Callable

from .intents import Mode


def terminal_size() -> tuple[int, int]:
    size = os.get_terminal_size(sys.stdout.fileno())
    return size.columns, size.lines


@dataclass
class SessionState:
    """Per race-mode session state, owned by the controller loop."""
    mode: Mode = Mode.CONTROL
    last_maze_render: str = ""
    needs_redraw: bool = True

    def toggle_mode(self):
        self.mode = self.mode.toggled()
        self.needs_redraw = True


class ResizeMonitor:
    """Remembers the last terminal size and reports changes."""

    def __init__(self, size_fn: Callable[[], tuple[int, int]] = terminal_size):
        self._size_fn = size_fn
        self._size = self._query()

    @property
    def size(self) -> tuple[int, int] | None:
        return self._size

    def _query(self) -> tuple[int, int] | None:
        try:
            return tuple(self._size_fn())
        except (OSError, ValueError):
            return None

    def changed(self) -> bool:
        """True once per size change. Query errors count as no change."""
        current = self._query()
        if current is None or current == self._size:
            return False
        self._size = current
        return True


class RedrawScheduler:
    """
    Owns the needs_redraw flag of a SessionState.

    mark() requests a redraw, check_resize() requests one when the
    terminal changed size, take() reports and clears the request in one
    step so a request is never drawn twice or lost.
    """

    def __init__(self, state: SessionState, monitor: ResizeMonitor):
        self._state = state
        self._monitor = monitor

    def mark(self):
        self._state.needs_redraw = True

    def check_resize(self):
        if self._monitor.changed():
            self.mark()

    def take(self) -> bool:
        pending = self._state.needs_redraw
        self._state.needs_redraw = False
        return pending
