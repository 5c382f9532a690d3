"""Marker files - the engine's only way of carrying state between invocations."""

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

MAZE_FILE = "maze_temp.txt"
RACE_ACTIVE_FILE = "race_active.tmp"
RACE_STATE_FILE = "race_state.tmp"
RACE_RESULTS_FILE = "race_results.txt"

# Deleted on shutdown. The results log belongs to the user and stays.
CLEANUP_FILES = (MAZE_FILE, RACE_ACTIVE_FILE, RACE_STATE_FILE)


@dataclass(frozen=True)
class MarkerSnapshot:
    maze_loaded: bool
    race_active: bool


class MarkerFiles:
    """Reads engine-owned marker files from the engine working directory."""

    def __init__(self, root: Path | None = None):
        self.root = Path(root) if root else Path.cwd()

    def _path(self, name: str) -> Path:
        return self.root / name

    def race_active(self) -> bool:
        """True while the engine has a race session open."""
        return self._path(RACE_ACTIVE_FILE).exists()

    def maze_loaded(self) -> bool:
        """True when the maze file exists and is not empty."""
        try:
            return self._path(MAZE_FILE).stat().st_size > 0
        except OSError:
            return False

    def read_results_log(self) -> str | None:
        """Contents of the results log, or None if the engine has not written one."""
        try:
            return self._path(RACE_RESULTS_FILE).read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None

    def snapshot(self) -> MarkerSnapshot:
        return MarkerSnapshot(maze_loaded=self.maze_loaded(), race_active=self.race_active())

    def cleanup(self):
        """Best-effort removal of the marker files. Failures are ignored."""
        for name in CLEANUP_FILES:
            try:
                self._path(name).unlink(missing_ok=True)
            except OSError as e:
                logger.debug("Could not remove %s: %s", name, e)


class RaceFlag:
    """Tracks the race-active marker across reads so the closing edge can be seen."""

    def __init__(self, markers: MarkerFiles):
        self._markers = markers
        self._state = False
        self._prev_state = False

    @property
    def just_cleared(self) -> bool:
        """True if the race was open on the previous read and is closed now."""
        return self._prev_state and not self._state

    def read(self) -> bool:
        """Re-read the marker, shifting the current value into the previous one."""
        self._prev_state = self._state
        self._state = self._markers.race_active()
        return self._state
