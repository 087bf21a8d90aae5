"""
Terminal handling for the interactive game.

The terminal is a scoped resource. Every context manager here restores
the terminal state on exit, including KeyboardInterrupt.
"""

import collections
import contextlib
import logging
import termios
from typing import Iterator, TextIO

logger = logging.getLogger(__name__)

ESCAPE = "\033"

_ARROWS = {
    "[A": "up",
    "[B": "down",
    "[C": "right",
    "[D": "left",
    # application cursor mode
    "OA": "up",
    "OB": "down",
    "OC": "right",
    "OD": "left",
}


@contextlib.contextmanager
def raw_mode(stream: TextIO) -> Iterator[bool]:
    """
    Disable canonical mode (buffered i/o) and local echo.

    Yield whether the mode was changed. A stream which is not a tty is left as is.
    """
    if not stream.isatty():
        yield False
        return

    fd = stream.fileno()
    saved = termios.tcgetattr(fd)

    attrs = termios.tcgetattr(fd)
    attrs[3] &= ~(termios.ICANON | termios.ECHO)  # lflags
    termios.tcsetattr(fd, termios.TCSANOW, attrs)
    logger.debug("Raw mode enabled on fd=%d", fd)

    try:
        yield True
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, saved)
        logger.debug("Raw mode restored on fd=%d", fd)


@contextlib.contextmanager
def hidden_cursor(out: TextIO) -> Iterator[None]:
    # hide cursor and clear screen
    out.write("\033[?25l\033[2J")
    out.flush()
    try:
        yield
    finally:
        # show cursor and reset colors
        out.write("\033[?25h\033[m")
        out.flush()


class KeyReader:
    """
    Read one key press per call.

    Arrow keys are decoded to "up", "down", "left" and "right".
    A lone escape is returned as is and the following key is kept for the next call.
    Return None at end of input.
    """

    def __init__(self, stream: TextIO):
        self.stream = stream
        self._pending: collections.deque[str] = collections.deque()

    def _getch(self) -> str:
        if self._pending:
            return self._pending.popleft()
        return self.stream.read(1)

    def __call__(self) -> str | None:
        ch = self._getch()
        if not ch:
            return None

        if ch != ESCAPE:
            return ch

        prefix = self._getch()
        if prefix not in ("[", "O"):
            if prefix:
                self._pending.append(prefix)
            return ch

        seq = prefix + self._getch()
        return _ARROWS.get(seq, ch + seq)
