"""Maze engine bridge - process invocation, output classification and marker files."""

from .bridge import CommandResult, EngineCommand, ProcessBridge
from .classify import Classification, Outcome, OutputClassifier, classify
from .markers import MarkerFiles, MarkerSnapshot, RaceFlag
from .probe import StateProbe

__all__ = [
    "CommandResult",
    "EngineCommand",
    "ProcessBridge",
    "Classification",
    "Outcome",
    "OutputClassifier",
    "classify",
    "MarkerFiles",
    "MarkerSnapshot",
    "RaceFlag",
    "StateProbe",
]
