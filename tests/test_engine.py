"""Process bridge, output classifier, marker files and state probe."""

import pytest

from maze_engine import (
    CommandResult,
    EngineCommand,
    MarkerFiles,
    Outcome,
    OutputClassifier,
    ProcessBridge,
    RaceFlag,
    StateProbe,
    classify,
)
from maze_engine.bridge import FIND, RACE_UP
from maze_engine.classify import Sentinel
from maze_engine.markers import MAZE_FILE, RACE_ACTIVE_FILE, RACE_RESULTS_FILE, RACE_STATE_FILE

from conftest import FakeBridge, posix_only


class TestEngineCommand:
    def test_argv_and_str(self):
        cmd = EngineCommand.gen(20, 30)
        assert cmd.argv() == ["gen", "20", "30"]
        assert str(cmd) == "gen 20 30"

    def test_save_without_filename_has_no_args(self):
        assert EngineCommand.save().argv() == ["save"]
        assert EngineCommand.save("my_maze.txt").argv() == ["save", "my_maze.txt"]

    def test_move_commands_have_no_args(self):
        assert RACE_UP.argv() == ["race_up"]
        assert EngineCommand.load("maze.txt").argv() == ["load", "maze.txt"]


class TestProcessBridge:
    def test_missing_engine_is_a_failed_result(self, tmp_path):
        bridge = ProcessBridge(tmp_path / "maze")

        assert bridge.engine_present is False
        result = bridge.invoke(FIND)

        assert result.exit_failed is True
        assert result.stdout == ""
        assert result.stderr.startswith("Error:")
        assert classify(result).outcome is Outcome.FAILURE

    @posix_only
    def test_captures_stdout_and_passes_arguments(self, fake_engine):
        bridge = ProcessBridge(fake_engine)

        result = bridge.invoke(EngineCommand.gen(12, 14))

        assert result.stdout == "Generated 12x14 maze\n"
        assert result.stderr == ""
        assert result.exit_failed is False
        # the engine runs in its own directory
        assert (fake_engine.parent / MAZE_FILE).read_text() == "maze"
        assert (fake_engine.parent / "calls.log").read_text() == "gen 12 14\n"

    @posix_only
    def test_captures_stderr_and_exit_status(self, fake_engine):
        result = ProcessBridge(fake_engine).invoke(EngineCommand("boom"))

        assert result.stdout == "partial output\n"
        assert result.stderr == "engine exploded\n"
        assert result.exit_failed is True
        assert result.text == "engine exploded"

    @posix_only
    def test_undecodable_output_is_replaced(self, fake_engine):
        result = ProcessBridge(fake_engine).invoke(EngineCommand("garbled"))

        assert result.exit_failed is False
        assert result.stdout.startswith("Path found ")
        assert "\ufffd" in result.stdout
        assert result.stdout.endswith(" len 4\n")
        assert classify(result).ok


class TestClassifier:
    def test_plain_output_is_success(self):
        verdict = classify(CommandResult(stdout="Path found! Length: 42\n"))
        assert verdict.outcome is Outcome.SUCCESS
        assert verdict.reason == "ok"
        assert verdict.message == "Path found! Length: 42"

    @pytest.mark.parametrize("stdout", ["", "Path found!", "No maze loaded", "ERROR: No path found"])
    def test_stderr_always_fails(self, stdout):
        verdict = classify(CommandResult(stdout=stdout, stderr="segfault"))
        assert verdict.outcome is Outcome.FAILURE
        assert verdict.reason == "stderr"

    def test_whitespace_only_stderr_is_ignored(self):
        assert classify(CommandResult(stdout="fine", stderr="\n")).ok

    @pytest.mark.parametrize("stdout", ["ERROR: No path found", "No path found!"])
    def test_no_path_is_warning(self, stdout):
        verdict = classify(CommandResult(stdout=stdout))
        assert verdict.outcome is Outcome.WARNING
        assert verdict.reason == "no_path"

    def test_no_maze_is_failure(self):
        verdict = classify(CommandResult(stdout="No maze loaded. Use gen or load.\n"))
        assert verdict.failed
        assert verdict.reason == "no_maze"

    def test_error_text_is_failure(self):
        verdict = classify(CommandResult(stdout="Error: cannot open file\n"))
        assert verdict.failed
        assert verdict.reason == "engine_error"

    def test_custom_sentinels(self):
        classifier = OutputClassifier((Sentinel("wall", Outcome.WARNING, "blocked"),))

        assert classifier.classify(CommandResult(stdout="hit a wall")).reason == "blocked"
        assert classifier.classify(CommandResult(stdout="No maze loaded")).ok


class TestMarkerFiles:
    def test_empty_maze_file_is_not_loaded(self, tmp_path):
        markers = MarkerFiles(tmp_path)
        assert markers.maze_loaded() is False

        (tmp_path / MAZE_FILE).write_text("")
        assert markers.maze_loaded() is False

        (tmp_path / MAZE_FILE).write_text("#####")
        assert markers.maze_loaded() is True

    def test_race_active_is_file_existence(self, tmp_path):
        markers = MarkerFiles(tmp_path)
        assert markers.race_active() is False

        (tmp_path / RACE_ACTIVE_FILE).touch()
        assert markers.race_active() is True
        assert markers.snapshot().race_active is True

    def test_read_results_log(self, tmp_path):
        markers = MarkerFiles(tmp_path)
        assert markers.read_results_log() is None

        (tmp_path / RACE_RESULTS_FILE).write_text("Race 1: 17 moves\n")
        assert markers.read_results_log() == "Race 1: 17 moves\n"

    def test_cleanup_removes_markers_but_keeps_results(self, tmp_path):
        for name in (MAZE_FILE, RACE_ACTIVE_FILE, RACE_STATE_FILE, RACE_RESULTS_FILE):
            (tmp_path / name).write_text("x")

        MarkerFiles(tmp_path).cleanup()

        assert sorted(p.name for p in tmp_path.iterdir()) == [RACE_RESULTS_FILE]

    def test_cleanup_ignores_missing_files(self, tmp_path):
        MarkerFiles(tmp_path).cleanup()
        assert list(tmp_path.iterdir()) == []


class TestRaceFlag:
    def test_just_cleared_only_on_present_to_absent(self, tmp_path):
        marker = tmp_path / RACE_ACTIVE_FILE
        flag = RaceFlag(MarkerFiles(tmp_path))

        assert flag.read() is False
        assert flag.just_cleared is False

        marker.touch()
        assert flag.read() is True
        assert flag.just_cleared is False

        marker.unlink()
        assert flag.read() is False
        assert flag.just_cleared is True

        flag.read()
        assert flag.just_cleared is False


class TestStateProbe:
    def test_maze_loaded(self):
        bridge = FakeBridge({"current": CommandResult(stdout="Maze: 20x20\n")})
        assert StateProbe(bridge).maze_loaded() is True
        assert bridge.commands == ["current"]

    def test_no_maze_loaded(self):
        bridge = FakeBridge({"current": CommandResult(stdout="No maze loaded\n")})
        assert StateProbe(bridge).maze_loaded() is False

    def test_empty_reply_does_not_confirm(self):
        bridge = FakeBridge({"current": CommandResult(stdout="  \n")})
        assert StateProbe(bridge).maze_loaded() is False

    @pytest.mark.parametrize("stdout", ["ERROR: No path found", "No path found!"])
    def test_no_path(self, stdout):
        bridge = FakeBridge({"find": CommandResult(stdout=stdout)})
        assert StateProbe(bridge).path_exists() is False

    def test_race_state(self):
        bridge = FakeBridge({"race_state": CommandResult(stdout="#@.#\n")})
        assert StateProbe(bridge).race_state() == "#@.#\n"

    def test_race_state_failure_is_none(self):
        bridge = FakeBridge({"race_state": CommandResult(stderr="no race", exit_failed=True)})
        assert StateProbe(bridge).race_state() is None
