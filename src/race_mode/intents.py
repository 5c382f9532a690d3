"""Race mode key maps - which key means what in each mode."""

from enum import Enum

from maze_engine import bridge


class Mode(Enum):
    CONTROL = "control"
    MOVEMENT = "movement"

    def toggled(self) -> "Mode":
        return Mode.MOVEMENT if self is Mode.CONTROL else Mode.CONTROL


class Intent(Enum):
    START = "start"
    RESET = "reset"
    VIEW_RESULTS = "view_results"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def is_move(self) -> bool:
        return self in MOVES


MOVES = frozenset({Intent.UP, Intent.DOWN, Intent.LEFT, Intent.RIGHT})

TOGGLE_KEY = "tab"
EXIT_KEY = "escape"

CONTROL_KEYS = {
    "1": Intent.START,
    "2": Intent.RESET,
    "3": Intent.VIEW_RESULTS,
}

MOVEMENT_KEYS = {
    "up": Intent.UP,
    "down": Intent.DOWN,
    "left": Intent.LEFT,
    "right": Intent.RIGHT,
}

KEY_MAPS = {
    Mode.CONTROL: CONTROL_KEYS,
    Mode.MOVEMENT: MOVEMENT_KEYS,
}

# VIEW_RESULTS is handled locally and has no engine command.
INTENT_COMMANDS = {
    Intent.START: bridge.RACE_START,
    Intent.RESET: bridge.RACE_RESET,
    Intent.UP: bridge.RACE_UP,
    Intent.DOWN: bridge.RACE_DOWN,
    Intent.LEFT: bridge.RACE_LEFT,
    Intent.RIGHT: bridge.RACE_RIGHT,
}


def intent_for_key(mode: Mode, key: str) -> Intent | None:
    """Intent for ``key`` in ``mode``, or None if the key does nothing there."""
    return KEY_MAPS[mode].get(key)
