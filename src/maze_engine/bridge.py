"""Process bridge - runs the maze engine once per command and captures its output."""

import logging
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

ENGINE_NAME = "maze.exe" if sys.platform == "win32" else "maze"


def default_engine_path() -> Path:
    """Engine location, resolved against the current working directory."""
    return Path.cwd() / ENGINE_NAME


@dataclass(frozen=True)
class EngineCommand:
    """A single engine invocation, e.g. ``gen 20 20`` or ``race_up``."""
    name: str
    args: tuple[str, ...] = ()

    def argv(self) -> list[str]:
        return [self.name, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv())

    @classmethod
    def gen(cls, rows: int, cols: int) -> "EngineCommand":
        return cls("gen", (str(rows), str(cols)))

    @classmethod
    def load(cls, filename: str) -> "EngineCommand":
        return cls("load", (filename,))

    @classmethod
    def save(cls, filename: str | None = None) -> "EngineCommand":
        return cls("save", (filename,) if filename else ())


FIND = EngineCommand("find")
CURRENT = EngineCommand("current")
PRINT = EngineCommand("print")
RACE_START = EngineCommand("race_start")
RACE_RESET = EngineCommand("race_reset")
RACE_STATE = EngineCommand("race_state")
RACE_UP = EngineCommand("race_up")
RACE_DOWN = EngineCommand("race_down")
RACE_LEFT = EngineCommand("race_left")
RACE_RIGHT = EngineCommand("race_right")


@dataclass
class CommandResult:
    """Captured streams of one engine run."""
    stdout: str = ""
    stderr: str = ""
    exit_failed: bool = False

    @property
    def text(self) -> str:
        """What the user should see: stderr when present, stdout otherwise."""
        return self.stderr.strip() if self.stderr.strip() else self.stdout.rstrip()


class ProcessBridge:
    """
    Synchronously invokes the external engine.

    Every call spawns a fresh process and blocks until it exits. There is
    no timeout: a hung engine blocks the caller.

    Usage:
        bridge = ProcessBridge(Path("./maze"))
        result = bridge.invoke(EngineCommand.gen(20, 20))
    """

    def __init__(self, engine_path: Path | None = None):
        self.engine_path = Path(engine_path) if engine_path else default_engine_path()

    @property
    def engine_present(self) -> bool:
        return self.engine_path.is_file()

    def invoke(self, command: EngineCommand) -> CommandResult:
        """Run ``command`` and return its output. Spawn errors become a failed result."""
        logger.debug("engine <- %s", command)
        try:
            proc = subprocess.run(
                [str(self.engine_path), *command.argv()],
                capture_output=True,
                text=True,
                errors="replace",  # engine may write in a console codepage
                cwd=self.engine_path.parent,
            )
        except OSError as e:
            logger.warning("Could not start engine %s: %s", self.engine_path, e)
            return CommandResult(stderr=f"Error: {e}", exit_failed=True)

        logger.debug("engine -> %s exit=%d stdout=%d chars stderr=%d chars",
                     command, proc.returncode, len(proc.stdout), len(proc.stderr))
        return CommandResult(
            stdout=proc.stdout,
            stderr=proc.stderr,
            exit_failed=proc.returncode != 0,
        )
