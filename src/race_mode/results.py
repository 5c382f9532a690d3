"""Results viewer - shows the engine's race results log."""

from typing import Callable

from maze_engine import MarkerFiles

from .screen import Screen


class ResultsViewer:
    """Read-only display of the results log in an overlay."""

    def __init__(self, markers: MarkerFiles, screen: Screen, wait_for_key: Callable[[], object]):
        self._markers = markers
        self._screen = screen
        self._wait_for_key = wait_for_key

    def show(self):
        text = self._markers.read_results_log()
        with self._screen.overlay():
            self._screen.results(text)
            self._screen.any_key_hint()
            self._wait_for_key()
