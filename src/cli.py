"""CLI entry point for maze-race."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click

from maze_engine import EngineCommand, MarkerFiles, ProcessBridge, StateProbe, classify
from maze_engine.bridge import CURRENT, ENGINE_NAME, FIND, PRINT
from race_mode import THEMES, RaceSessionController, Screen, TerminalKeys

logger = logging.getLogger(__name__)

MIN_SIZE = 5
MAX_SIZE = 60
DEFAULT_SIZE = "20 20"
DEFAULT_MAZE_FILE = "maze.txt"
DEFAULT_CUSTOM_FILE = "my_maze.txt"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

NO_MAZE_MESSAGE = "No maze loaded! Generate or load a maze first."


@dataclass
class App:
    """Objects shared by every command of one CLI run."""
    bridge: ProcessBridge
    markers: MarkerFiles
    probe: StateProbe
    screen: Screen


def _setup_logging(log_file: Path | None, verbose: bool):
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG if verbose else logging.INFO,
            format=LOG_FORMAT,
        )
    else:
        # stderr shares the terminal with the race screen, keep it quiet
        logging.basicConfig(level=logging.DEBUG if verbose else logging.ERROR, format=LOG_FORMAT)


def _parse_dimensions(text: str) -> tuple[int, int]:
    """Parse "rows cols" from the generate prompt."""
    parts = text.split()
    if len(parts) != 2:
        raise click.BadParameter("Enter two numbers")
    try:
        rows, cols = int(parts[0]), int(parts[1])
    except ValueError:
        raise click.BadParameter("Invalid numbers")
    if rows < MIN_SIZE or cols < MIN_SIZE:
        raise click.BadParameter(f"Min {MIN_SIZE}x{MIN_SIZE}")
    if rows > MAX_SIZE or cols > MAX_SIZE:
        raise click.BadParameter(f"Max {MAX_SIZE}x{MAX_SIZE}")
    return rows, cols


def _done(ok: bool):
    """Exit with status 1 when a subcommand's flow failed."""
    if not ok:
        click.get_current_context().exit(1)


# ── Flows shared by the menu and the subcommands ──────────────────────


def _require_maze(app: App, message: str = NO_MAZE_MESSAGE) -> bool:
    if app.probe.maze_loaded():
        return True
    app.screen.error(message)
    return False


def _generate(app: App, rows: int, cols: int) -> bool:
    click.echo(f"Generating {rows}x{cols} maze...")
    result = app.bridge.invoke(EngineCommand.gen(rows, cols))
    if classify(result).failed:
        app.screen.error(result.text)
        return False

    click.echo("Verifying maze has valid path...")
    app.screen.blank()
    if app.probe.path_exists():
        app.screen.success(f"{result.text}\nMaze has valid path")
    else:
        app.screen.warning(f"{result.text}\nGenerated maze has no valid path!\nTry generating again...")
    return True


def _load(app: App, filename: str) -> bool:
    if not Path(filename).exists():
        app.screen.error(f"File '{filename}' not found!")
        return False

    click.echo(f"Loading maze from '{filename}'...")
    result = app.bridge.invoke(EngineCommand.load(filename))
    if classify(result).failed or not app.probe.maze_loaded():
        app.screen.error(f"Failed to load maze from '{filename}'!\nFile may be corrupted or invalid format.")
        return False

    app.screen.success(result.text)
    return True


def _save(app: App, filename: str | None, maze_checked: bool = False) -> bool:
    if not maze_checked and not _require_maze(app):
        return False

    click.echo(f"Saving maze to '{filename or DEFAULT_MAZE_FILE}'...")
    result = app.bridge.invoke(EngineCommand.save(filename))
    if classify(result).failed:
        app.screen.error(result.text)
        return False

    app.screen.success(result.text)
    return True


def _find(app: App) -> bool:
    if not _require_maze(app, "No valid maze loaded! Generate or load a maze first."):
        return False

    click.echo("Computing optimal path...")
    result = app.bridge.invoke(FIND)
    verdict = classify(result)
    if verdict.reason == "no_path":
        app.screen.warning(result.text, "NO PATH")
        return False
    if verdict.failed:
        app.screen.error(result.text)
        return False

    app.screen.success(result.text, "PATH FOUND")
    return True


def _print(app: App) -> bool:
    if not _require_maze(app):
        return False

    result = app.bridge.invoke(PRINT)
    if classify(result).failed:
        app.screen.error(result.text)
        return False

    app.screen.panel(result.text, fg="cyan", heavy=True)
    return True


def _status(app: App) -> bool:
    result = app.bridge.invoke(CURRENT)
    if result.stderr.strip():
        app.screen.error(result.text)
        return False

    app.screen.panel(result.text, fg="bright_black")
    return True


def _race(app: App) -> bool:
    if sys.platform == "win32":
        raise click.ClickException("Race mode needs a POSIX terminal.")
    if not sys.stdin.isatty():
        raise click.ClickException("Race mode needs an interactive terminal.")

    with TerminalKeys() as keys:
        controller = RaceSessionController(app.bridge, app.markers, app.screen, keys)
        return controller.run()


# ── Interactive menu ──────────────────────────────────────────────────


def _menu_generate(app: App):
    app.screen.header("GENERATE NEW MAZE", "🎲 ")
    rows, cols = click.prompt(
        "Enter maze size (rows cols, e.g. 20 20)",
        default=DEFAULT_SIZE,
        value_proc=_parse_dimensions,
    )
    _generate(app, rows, cols)


def _menu_load(app: App):
    app.screen.header("LOAD MAZE FROM FILE", "📂 ")
    filename = click.prompt("Enter filename", default=DEFAULT_MAZE_FILE)
    _load(app, filename)


def _menu_save(app: App):
    app.screen.header("SAVE CURRENT MAZE", "💾 ")
    if not _require_maze(app):
        return

    filename = None
    if click.confirm("Save with custom filename?", default=False):
        filename = click.prompt("Enter filename", default=DEFAULT_CUSTOM_FILE)
    _save(app, filename, maze_checked=True)


def _menu_find(app: App):
    app.screen.header("FIND PATH (A*)", "🔍 ")
    _find(app)


def _menu_print(app: App):
    app.screen.header("CURRENT MAZE", "🖨  ")
    _print(app)


def _menu_status(app: App):
    app.screen.header("MAZE STATISTICS", "📊 ")
    _status(app)


def _menu_race(app: App):
    app.screen.clear()
    _race(app)


MENU_ACTIONS = {
    "gen": _menu_generate,
    "load": _menu_load,
    "save": _menu_save,
    "find": _menu_find,
    "print": _menu_print,
    "status": _menu_status,
    "race": _menu_race,
}

MENU_ORDER = ("gen", "load", "save", "find", "print", "status", "race", "exit")


def _show_menu(app: App) -> str:
    app.screen.clear()
    app.screen.app_title()
    snapshot = app.markers.snapshot()
    app.screen.status_line(snapshot.maze_loaded, snapshot.race_active)
    app.screen.menu([app.screen.theme.labels[name] for name in MENU_ORDER])
    choice = click.prompt("Select", type=click.IntRange(1, len(MENU_ORDER)))
    return MENU_ORDER[choice - 1]


# ── Commands ──────────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.option("--plain", is_flag=True, default=False, help="ASCII borders, no colour or emoji.")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write log records to this file.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging.")
@click.pass_context
def cli(ctx, plain: bool, log_file: Path | None, verbose: bool):
    """Maze race: play the maze engine as a race. Opens the menu when no command is given."""
    _setup_logging(log_file, verbose)

    bridge = ProcessBridge()
    if not bridge.engine_present:
        logger.error("Engine not found at %s", bridge.engine_path)
        raise click.ClickException(f"{ENGINE_NAME} not found in current directory!")

    ctx.obj = App(
        bridge=bridge,
        markers=MarkerFiles(bridge.engine_path.parent),
        probe=StateProbe(bridge),
        screen=Screen(THEMES["plain" if plain else "fancy"]),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(menu)


@cli.command()
@click.pass_obj
def menu(app: App):
    """Interactive menu (the default)."""
    try:
        while True:
            choice = _show_menu(app)
            if choice == "exit":
                app.screen.goodbye()
                break

            try:
                MENU_ACTIONS[choice](app)
            except click.Abort:
                raise
            except Exception as e:
                logger.exception("Menu action %s failed", choice)
                app.screen.error(str(e))

            click.pause()
    finally:
        app.markers.cleanup()


@cli.command()
@click.argument("rows", type=click.IntRange(MIN_SIZE, MAX_SIZE))
@click.argument("cols", type=click.IntRange(MIN_SIZE, MAX_SIZE))
@click.pass_obj
def gen(app: App, rows: int, cols: int):
    """Generate a ROWS x COLS maze and check it has a path."""
    _done(_generate(app, rows, cols))


@cli.command()
@click.argument("filename")
@click.pass_obj
def load(app: App, filename: str):
    """Load a maze from FILENAME."""
    _done(_load(app, filename))


@cli.command()
@click.argument("filename", required=False)
@click.pass_obj
def save(app: App, filename: str | None):
    """Save the current maze (to maze.txt unless FILENAME is given)."""
    _done(_save(app, filename))


@cli.command()
@click.pass_obj
def find(app: App):
    """Find a path through the current maze (A*)."""
    _done(_find(app))


@cli.command("print")
@click.pass_obj
def print_maze(app: App):
    """Print the current maze."""
    _done(_print(app))


@cli.command()
@click.pass_obj
def status(app: App):
    """Show maze statistics."""
    _done(_status(app))


@cli.command()
@click.pass_obj
def race(app: App):
    """Race mode. TAB switches menus, ESC leaves."""
    _done(_race(app))


@cli.command()
@click.pass_obj
def results(app: App):
    """Show the race results log."""
    app.screen.results(app.markers.read_results_log())


if __name__ == "__main__":
    cli()
