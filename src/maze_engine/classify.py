"""Classifies free-text engine output into SUCCESS / WARNING / FAILURE."""

from dataclasses import dataclass
from enum import Enum

from .bridge import CommandResult


class Outcome(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    FAILURE = "failure"


@dataclass(frozen=True)
class Sentinel:
    """A known substring in engine stdout and what it means."""
    text: str
    outcome: Outcome
    reason: str


# Checked in order, first match wins.
SENTINELS: tuple[Sentinel, ...] = (
    Sentinel("ERROR: No path found", Outcome.WARNING, "no_path"),
    Sentinel("No path found", Outcome.WARNING, "no_path"),
    Sentinel("No maze loaded", Outcome.FAILURE, "no_maze"),
    Sentinel("Error", Outcome.FAILURE, "engine_error"),
)


@dataclass(frozen=True)
class Classification:
    outcome: Outcome
    reason: str
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def failed(self) -> bool:
        return self.outcome is Outcome.FAILURE


class OutputClassifier:
    """Maps a CommandResult to a Classification using a sentinel table."""

    def __init__(self, sentinels: tuple[Sentinel, ...] = SENTINELS):
        self.sentinels = sentinels

    def classify(self, result: CommandResult) -> Classification:
        # Anything on stderr is a failure regardless of stdout.
        if result.stderr.strip():
            return Classification(Outcome.FAILURE, "stderr", result.stderr.strip())

        for sentinel in self.sentinels:
            if sentinel.text in result.stdout:
                return Classification(sentinel.outcome, sentinel.reason, result.stdout.strip())

        return Classification(Outcome.SUCCESS, "ok", result.stdout.strip())


default_classifier = OutputClassifier()


def classify(result: CommandResult) -> Classification:
    return default_classifier.classify(result)
