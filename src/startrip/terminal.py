"""A terminal-like display with a command line.

The display is a ``WIDTH x HEIGHT`` grid of CP-437 tile indices stored in a
flat ``uint8`` buffer. The last row is the command line: the prompt, the
current history line and a block cursor.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from .constants import COMMAND, CURSOR_TILE, HEIGHT, HISTORY_LINES, WIDTH

Buffer = NDArray[np.uint8]

SPACE = 32
# Characters of user input that fit after the prompt
LINE_WIDTH = WIDTH - len(COMMAND)
# Offset of the command row in the flat buffer
CONSOLE_OFFSET = WIDTH * (HEIGHT - 1)


class Terminal:
    """Screen buffer plus command-line editing and history."""

    width: int = WIDTH
    height: int = HEIGHT

    def __init__(self) -> None:
        self.buffer: Buffer = np.zeros(WIDTH * HEIGHT, dtype=np.uint8)
        self.history: Buffer = np.full((HISTORY_LINES, LINE_WIDTH), SPACE, dtype=np.uint8)
        self.line = 0
        self.cursor = 0

    def screen(self) -> Buffer:
        """Return the whole display buffer."""

        return self.buffer

    def console(self) -> Buffer:
        """Return the command row of the display buffer."""

        return self.buffer[CONSOLE_OFFSET:]

    def input(self, c: int) -> None:
        """Write code unit ``c`` at the cursor and advance.

        Input is assumed to be CP-437, which matches ASCII for printable
        characters; code units of 256 and above are dropped.
        """

        if c < 256:
            self.history[self.line, self.cursor] = c
            self.right()
            self.update_console()

    def update_console(self) -> None:
        """Print the command line into the display buffer."""

        start = CONSOLE_OFFSET + len(COMMAND)
        self.buffer[CONSOLE_OFFSET:start] = np.frombuffer(COMMAND, dtype=np.uint8)
        self.buffer[start:] = self.history[self.line]
        self.buffer[start + self.cursor] = CURSOR_TILE

    def left(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1
            self.update_console()

    def right(self) -> None:
        if self.cursor < LINE_WIDTH - 1:
            self.cursor += 1
            self.update_console()

    def down(self) -> None:
        """Cycle forward through the history."""

        self.cursor = 0
        self.line = (self.line + 1) % HISTORY_LINES
        self.update_console()

    def up(self) -> None:
        """Cycle backward through the history."""

        self.cursor = 0
        self.line = (self.line - 1) % HISTORY_LINES
        self.update_console()

    def enter(self) -> bytes:
        """Consume the current line and start a fresh one."""

        command = self.history[self.line].tobytes()
        self.down()
        self.history[self.line] = SPACE
        self.update_console()
        return command

    def message(self, text: bytes) -> None:
        """Print ``text`` over the whole display.

        Lines are split at newlines and truncated at the display width; the
        rest of every row, including rows past the end of ``text``, is
        blanked with tile ``0``.
        """

        grid = self.buffer.reshape(HEIGHT, WIDTH)
        grid[:] = 0
        for row, line in enumerate(text.split(b"\n")[:HEIGHT]):
            chunk = line[:WIDTH]
            grid[row, : len(chunk)] = np.frombuffer(chunk, dtype=np.uint8)
