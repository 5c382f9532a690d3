import stat
import sys
from contextlib import contextmanager

import pytest

from maze_engine import CommandResult

FAKE_ENGINE = """#!/bin/sh
echo "$*" >> calls.log
case "$1" in
  gen)
    printf 'maze' > maze_temp.txt
    echo "Generated $2x$3 maze"
    ;;
  find)
    if [ -s maze_temp.txt ]; then echo "Path found! Length: 42"; else echo "No maze loaded"; fi
    ;;
  current)
    if [ -s maze_temp.txt ]; then echo "Maze: 20x20"; else echo "No maze loaded"; fi
    ;;
  garbled)
    printf 'Path found \\377\\376 len 4\\n'
    ;;
  boom)
    echo "partial output"
    echo "engine exploded" >&2
    exit 3
    ;;
  *)
    echo "ok $*"
    ;;
esac
"""

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="fake engine is a POSIX shell script")


def write_fake_engine(directory, name="maze"):
    path = directory / name
    path.write_text(FAKE_ENGINE)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


class FakeBridge:
    """Records commands; replies come from ``replies`` (a CommandResult or a callable)."""

    def __init__(self, replies=None):
        self.replies = replies or {}
        self.commands = []

    def invoke(self, command):
        self.commands.append(str(command))
        reply = self.replies.get(command.name, CommandResult(stdout=f"{command.name} ok\n"))
        if callable(reply):
            reply = reply()
        return reply

    def count(self, name):
        return sum(1 for c in self.commands if c.split()[0] == name)


class FakeMarkers:
    def __init__(self, maze=True, race=False, results=None):
        self.maze = maze
        self.race = race
        self.results = results

    def maze_loaded(self):
        return self.maze

    def race_active(self):
        return self.race

    def read_results_log(self):
        return self.results


class FakeScreen:
    """Records what would have been drawn."""

    def __init__(self):
        self.renders = []
        self.errors = []
        self.warnings = []
        self.infos = []
        self.results_shown = []
        self.overlays = 0

    def race_view(self, mode, race_active, maze_render):
        self.renders.append((mode, race_active, maze_render))

    def error(self, message):
        self.errors.append(message)

    def warning(self, message, title="WARNING"):
        self.warnings.append(message)

    def info(self, message, title="INFO"):
        self.infos.append(message)

    def results(self, text):
        self.results_shown.append(text)

    def any_key_hint(self):
        pass

    @contextmanager
    def overlay(self):
        self.overlays += 1
        yield self


class ScriptedKeys:
    """Key source fed from a list. ``None`` is an idle poll; ESC once the script runs out."""

    def __init__(self, keys=()):
        self.keys = list(keys)
        self.polls = 0
        self.waits = 0

    def poll(self, timeout):
        self.polls += 1
        if self.keys:
            return self.keys.pop(0)
        return "escape"

    def wait(self):
        self.waits += 1
        return "enter"


@pytest.fixture
def fake_engine(tmp_path):
    return write_fake_engine(tmp_path)
