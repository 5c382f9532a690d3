"""Race session controller - the race mode key loop and state machine."""

import logging

from maze_engine import MarkerFiles, OutputClassifier, ProcessBridge, RaceFlag, StateProbe
from maze_engine.classify import default_classifier

from .intents import EXIT_KEY, INTENT_COMMANDS, TOGGLE_KEY, Intent, Mode, intent_for_key
from .redraw import RedrawScheduler, ResizeMonitor, SessionState, terminal_size
from .results import ResultsViewer
from .screen import Screen

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1  # seconds

NO_MAZE_MESSAGE = "No valid maze loaded! Generate or load a maze first."
NO_PATH_MESSAGE = "Current maze has no valid path! Cannot start race mode."
NO_RACE_MESSAGE = "No active race! Start a race first."


class RaceSessionController:
    """
    Runs race mode until the user presses ESC.

    Keys are read from ``keys`` (anything with ``poll(timeout)`` and
    ``wait()``), engine commands go through ``bridge``, race state is read
    from ``markers``.

    A race counts as finished when the race marker was present before a
    dispatch and is gone after it while in MOVEMENT mode. The engine gives
    no other completion signal, so a move that closes the race for some
    other reason looks the same.
    """

    def __init__(
        self,
        bridge: ProcessBridge,
        markers: MarkerFiles,
        screen: Screen,
        keys,
        classifier: OutputClassifier = default_classifier,
        size_fn=terminal_size,
    ):
        self._bridge = bridge
        self._markers = markers
        self._screen = screen
        self._keys = keys
        self._classifier = classifier
        self._size_fn = size_fn
        self._probe = StateProbe(bridge, classifier)
        self._race = RaceFlag(markers)
        self._viewer = ResultsViewer(markers, screen, keys.wait)
        self.state: SessionState | None = None
        self._scheduler: RedrawScheduler | None = None

    # -- entry --

    def can_start(self) -> bool:
        """Entry guard: a maze must be loaded and have a path."""
        if not self._markers.maze_loaded():
            self._screen.error(NO_MAZE_MESSAGE)
            return False
        if not self._probe.path_exists():
            self._screen.error(NO_PATH_MESSAGE)
            return False
        return True

    def run(self) -> bool:
        """Run the key loop. Returns False if the entry guard refused."""
        if not self.can_start():
            logger.info("Race mode refused by entry guard")
            return False

        self.state = SessionState()
        self._scheduler = RedrawScheduler(self.state, ResizeMonitor(self._size_fn))

        try:
            while True:
                self._scheduler.check_resize()
                if self._scheduler.take():
                    try:
                        self._redraw()
                    except Exception as e:
                        # not re-marked, a broken render would loop on the error panel
                        logger.exception("Race screen redraw failed")
                        self._show_error(str(e))

                key = self._keys.poll(POLL_INTERVAL)
                if key is None:
                    continue
                if key == EXIT_KEY:
                    break
                if key == TOGGLE_KEY:
                    self.state.toggle_mode()
                    continue

                try:
                    self._handle_key(key)
                except Exception as e:
                    logger.exception("Race mode key %r failed", key)
                    self._show_error(str(e))
                    self._scheduler.mark()
        finally:
            self.state = None
            self._scheduler = None
        return True

    # -- rendering --

    def _redraw(self):
        state = self.state
        race_active = self._markers.race_active()
        if not race_active:
            state.last_maze_render = ""
        elif not state.last_maze_render:
            state.last_maze_render = self._probe.race_state() or ""
        self._screen.race_view(state.mode, race_active, state.last_maze_render)

    def _show_error(self, message: str):
        with self._screen.overlay():
            self._screen.error(message)
            self._screen.any_key_hint()
            self._keys.wait()

    def _show_info(self, message: str):
        with self._screen.overlay():
            self._screen.info(message)
            self._screen.any_key_hint()
            self._keys.wait()

    # -- dispatch --

    def _handle_key(self, key: str):
        state = self.state
        intent = intent_for_key(state.mode, key)
        if intent is None:
            return

        if intent is Intent.VIEW_RESULTS:
            self._viewer.show()
            return

        was_active = self._race.read()
        if intent.is_move and state.mode is Mode.MOVEMENT and not was_active:
            logger.info("Rejected %s: no active race", intent.value)
            with self._screen.overlay():
                self._screen.warning(NO_RACE_MESSAGE, "NO RACE")
                self._screen.any_key_hint()
                self._keys.wait()
            return

        command = INTENT_COMMANDS[intent]
        logger.info("Dispatching %s", command)
        result = self._bridge.invoke(command)
        self._race.read()

        state.last_maze_render = ""
        self._scheduler.mark()

        verdict = self._classifier.classify(result)
        if verdict.failed:
            self._show_error(result.text)
        elif not intent.is_move and state.mode is Mode.CONTROL and result.text:
            self._show_info(result.text)

        if self._race.just_cleared and state.mode is Mode.MOVEMENT:
            self._finish_race()

    def _finish_race(self):
        logger.info("Race marker cleared after a move, treating race as finished")
        self._viewer.show()
        self.state.toggle_mode()
        self.state.last_maze_render = ""
