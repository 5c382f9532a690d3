"""Non-blocking keyboard input from the controlling terminal (POSIX).

termios/tty are imported when the terminal is taken over, so the rest of
the CLI still imports where they do not exist.
"""

import os
import select
import sys

# How long to wait for the rest of an escape sequence after a bare ESC.
ESCAPE_SEQUENCE_WAIT = 0.05

# Raw byte sequences -> key names
KEY_SEQUENCES = {
    b"\t": "tab",
    b"\x1b": "escape",
    b"\r": "enter",
    b"\n": "enter",
    b"\x7f": "backspace",
    # Arrow keys, both cursor modes
    b"\x1b[A": "up",
    b"\x1b[B": "down",
    b"\x1b[C": "right",
    b"\x1b[D": "left",
    b"\x1bOA": "up",
    b"\x1bOB": "down",
    b"\x1bOC": "right",
    b"\x1bOD": "left",
}


def decode_key(data: bytes) -> str:
    """
    Turn the bytes of one key press into a key name.

    Named keys come from KEY_SEQUENCES. Printable keys are returned as the
    character itself. Anything else starting with ESC is "unknown".
    """
    name = KEY_SEQUENCES.get(data)
    if name is not None:
        return name
    if data.startswith(b"\x1b"):
        return "unknown"
    return data.decode("utf-8", errors="replace")


class TerminalKeys:
    """
    Key source reading stdin in cbreak mode.

    Usage:
        with TerminalKeys() as keys:
            key = keys.poll(0.1)   # None when nothing was pressed
    """

    def __init__(self, stream=None):
        self._fd = (stream or sys.stdin).fileno()
        self._saved = None

    def __enter__(self):
        import termios
        import tty

        self._saved = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        return self

    def __exit__(self, exc_type, exc, tb):
        import termios

        if self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def _ready(self, timeout: float | None) -> bool:
        ready, _, _ = select.select([self._fd], [], [], timeout)
        return bool(ready)

    def poll(self, timeout: float | None) -> str | None:
        """Return the next key name, or None if nothing arrived within ``timeout``."""
        if not self._ready(timeout):
            return None

        data = os.read(self._fd, 1)
        if data == b"\x1b":
            while len(data) < 3 and self._ready(ESCAPE_SEQUENCE_WAIT):
                data += os.read(self._fd, 1)
        return decode_key(data)

    def wait(self) -> str:
        """Block until any key is pressed."""
        key = None
        while key is None:
            key = self.poll(None)
        return key
