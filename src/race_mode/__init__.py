"""Race mode - interactive race session on top of the maze engine."""

from .controller import RaceSessionController
from .intents import Intent, Mode
from .keys import TerminalKeys
from .results import ResultsViewer
from .screen import FANCY, PLAIN, THEMES, Screen, Theme

__all__ = [
    "RaceSessionController",
    "Intent",
    "Mode",
    "TerminalKeys",
    "ResultsViewer",
    "Screen",
    "Theme",
    "FANCY",
    "PLAIN",
    "THEMES",
]
