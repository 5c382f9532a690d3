"""Terminal rendering - boxed panels drawn with click, in one of two themes."""

import shutil
import sys
import unicodedata
from contextlib import contextmanager
from dataclasses import dataclass, field

import click

from .intents import Mode

# Alternate screen buffer: overlays draw here and the race screen comes back on exit.
ENTER_ALT_SCREEN = "\x1b[?1049h"
LEAVE_ALT_SCREEN = "\x1b[?1049l"


@dataclass(frozen=True)
class Theme:
    """Presentation strategy: borders, colour, icons and menu labels."""
    name: str
    color: bool
    emoji: bool
    border: str        # top-left, top-right, bottom-left, bottom-right, horizontal, vertical
    heavy_border: str
    labels: dict = field(default_factory=dict)

    def icon(self, emoji: str, fallback: str = "") -> str:
        return emoji if self.emoji else fallback


FANCY = Theme(
    name="fancy",
    color=True,
    emoji=True,
    border="╭╮╰╯─│",
    heavy_border="┏┓┗┛━┃",
    labels={
        "gen": "🎲 Generate New Maze",
        "load": "📂 Load Maze from File",
        "save": "💾 Save Current Maze",
        "find": "🔍 Find Path (A*)",
        "print": "🖨  Print Current Maze",
        "status": "📊 Show Maze Statistics",
        "race": "🏁 Race Mode",
        "exit": "🚪 Exit",
    },
)

PLAIN = Theme(
    name="plain",
    color=False,
    emoji=False,
    border="++++-|",
    heavy_border="++++=|",
    labels={
        "gen": "Generate new maze",
        "load": "Load maze from file",
        "save": "Save current maze",
        "find": "Find path (A*)",
        "print": "Print current maze",
        "status": "Show maze statistics",
        "race": "Race mode",
        "exit": "Exit",
    },
)

THEMES = {theme.name: theme for theme in (FANCY, PLAIN)}


def display_width(text: str) -> int:
    """Printed width of ``text``, counting wide characters as two columns."""
    width = 0
    for ch in text:
        if unicodedata.combining(ch) or ch == "\ufe0f":
            continue
        width += 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1
    return width


class Screen:
    """Draws the race screen, menus and message panels."""

    def __init__(self, theme: Theme = FANCY):
        self.theme = theme

    # -- primitives --

    def _style(self, text: str, fg: str | None = None, bold: bool = False, dim: bool = False) -> str:
        if not self.theme.color:
            return text
        return click.style(text, fg=fg, bold=bold, dim=dim)

    def _center(self, line: str, width: int) -> str:
        columns = shutil.get_terminal_size().columns
        pad = max(0, (columns - width) // 2)
        return " " * pad + line

    def clear(self):
        click.clear()

    def blank(self):
        click.echo()

    def panel(self, body: str, title: str = "", fg: str | None = None, heavy: bool = False):
        """Echo ``body`` inside a centred box, with ``title`` set in the top border."""
        tl, tr, bl, br, h, v = self.theme.heavy_border if heavy else self.theme.border
        lines = body.splitlines() or [""]
        inner = max([display_width(line) for line in lines] + [display_width(title) + 2])
        inner += 4  # two columns of padding each side

        if title:
            label = f" {title} "
            left = (inner - display_width(label)) // 2
            top = tl + h * left + label + h * (inner - left - display_width(label)) + tr
        else:
            top = tl + h * inner + tr
        bottom = bl + h * inner + br
        width = inner + 2

        click.echo(self._center(self._style(top, fg, bold=True), width))
        for line in lines:
            left = (inner - display_width(line)) // 2
            right = inner - left - display_width(line)
            row = self._style(v, fg) + " " * left + line + " " * right + self._style(v, fg)
            click.echo(self._center(row, width))
        click.echo(self._center(self._style(bottom, fg, bold=True), width))

    @contextmanager
    def overlay(self):
        """Draw on the alternate screen; the previous screen is restored afterwards."""
        tty = sys.stdout.isatty()
        if tty:
            click.echo(ENTER_ALT_SCREEN, nl=False)
        self.clear()
        try:
            yield self
        finally:
            if tty:
                click.echo(LEAVE_ALT_SCREEN, nl=False)

    # -- message panels --

    def error(self, message: str):
        self.panel(f"{self.theme.icon('⚠️  ')}{message}", "ERROR", fg="red", heavy=True)

    def warning(self, message: str, title: str = "WARNING"):
        self.panel(message, f"{self.theme.icon('⚠️  ')}{title}", fg="yellow")

    def info(self, message: str, title: str = "INFO"):
        self.panel(message, title, fg="cyan")

    def success(self, message: str, title: str = "SUCCESS"):
        self.panel(message, f"{self.theme.icon('✓ ', '')}{title}", fg="green")

    def any_key_hint(self):
        self.blank()
        hint = self._style("Press any key to continue...", dim=True)
        click.echo(self._center(hint, display_width("Press any key to continue...")))

    # -- screens --

    def app_title(self):
        self.panel("M A Z E   R A C E", fg="cyan", heavy=True)
        self.blank()

    def header(self, text: str, icon: str = ""):
        self.clear()
        self.app_title()
        self.panel(f"{self.theme.icon(icon)}{text}", fg="cyan")
        self.blank()

    def status_line(self, maze_loaded: bool, race_active: bool):
        maze = "LOADED" if maze_loaded else "NOT LOADED"
        race = "ACTIVE" if race_active else "INACTIVE"
        self.panel(
            f"{self.theme.icon('🗺  ')}Maze: {maze}    {self.theme.icon('🏃 ')}Race: {race}",
            fg="green" if maze_loaded else "bright_black",
        )
        self.blank()

    def menu(self, entries: list[str]):
        """Numbered menu of labels (the numbers are what the user types)."""
        body = "\n".join(f"{i:>2}. {label}" for i, label in enumerate(entries, 1))
        self.panel(body, "What would you like to do?", fg="yellow")
        self.blank()

    def goodbye(self):
        self.clear()
        self.app_title()
        self.panel(f"Thank you for using!\nSee you next time!{self.theme.icon(' 👋')}", "GOODBYE", fg="cyan")
        self.blank()

    def race_view(self, mode: Mode, race_active: bool, maze_render: str):
        """The race mode screen: title, maze (if racing), status and key help."""
        self.clear()
        self.blank()
        self.panel(f"{self.theme.icon('🏁 ')}RACE MODE", fg="yellow", heavy=True)
        self.blank()

        if race_active and maze_render.strip():
            self.panel(maze_render.rstrip("\n"), fg="cyan")
            self.blank()

        status = "ACTIVE" if race_active else "INACTIVE"
        self.panel(f"Race Status: {status}", fg="green" if race_active else "bright_black")
        self.blank()

        if mode is Mode.CONTROL:
            self.panel(
                f"{self.theme.icon('🎮 ')}RACE CONTROL\n\n"
                "1  Start New Race    2  Reset Race    3  View Results",
                fg="yellow",
            )
        else:
            arrows = ("↑", "↓", "←", "→") if self.theme.emoji else ("Up", "Down", "Left", "Right")
            self.panel(
                f"{self.theme.icon('🕹  ')}MOVEMENT\n\n"
                f"{arrows[0]} Move Up    {arrows[1]} Move Down    "
                f"{arrows[2]} Move Left    {arrows[3]} Move Right",
                fg="cyan",
            )
        self.blank()
        self.panel("Press TAB to switch menus | ESC to exit", fg="bright_black")

    def results(self, text: str | None):
        """Race results log, verbatim, or a notice when there is none."""
        self.blank()
        self.panel(f"{self.theme.icon('🏆 ')}RACE RESULTS", fg="yellow", heavy=True)
        self.blank()
        if text is None:
            self.panel("No race results found yet.\nComplete a race to see your statistics!", fg="yellow")
        else:
            self.panel(text.rstrip("\n"), fg="yellow", heavy=True)
