"""Read-only engine queries used to infer engine-side state."""

from .bridge import CURRENT, FIND, RACE_STATE, ProcessBridge
from .classify import OutputClassifier, default_classifier


class StateProbe:
    """
    Asks the engine about its state through ordinary commands.

    The answers are advisory. Empty output never confirms anything.
    """

    def __init__(self, bridge: ProcessBridge, classifier: OutputClassifier = default_classifier):
        self._bridge = bridge
        self._classifier = classifier

    def _confirmed(self, command) -> str | None:
        result = self._bridge.invoke(command)
        if not result.stdout.strip():
            return None
        if not self._classifier.classify(result).ok:
            return None
        return result.stdout

    def maze_loaded(self) -> bool:
        return self._confirmed(CURRENT) is not None

    def path_exists(self) -> bool:
        return self._confirmed(FIND) is not None

    def race_state(self) -> str | None:
        """Current race view as rendered by the engine, or None."""
        return self._confirmed(RACE_STATE)
