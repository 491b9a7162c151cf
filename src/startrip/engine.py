"""Engine contract and buffer views.

The engine owns every piece of game state. The front-end only reads two
tile buffers from it and calls its mutating operations in response to
input. Buffer views are borrowed: a view obtained from :func:`screen_view`
or :func:`console_view` is invalid as soon as any mutating engine call
(``input``, cursor moves, ``intro``, ``enter``, ``win``, ``lose``) has been
made, so callers acquire a fresh one each time they draw.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

import numpy as np
from numpy.typing import NDArray

from .constants import DELAY_TIME, HEIGHT, NUM_TILES, TILE_SIZE, WIDTH
from .errors import BufferLengthError
from .state import EngineStatus
from .terminal import Terminal


LOGGER = logging.getLogger(__name__)

View = NDArray[np.uint8]


class Engine(Protocol):
    def width(self) -> int: ...

    def height(self) -> int: ...

    def tile_size(self) -> int: ...

    def num_tiles(self) -> int: ...

    def delay_time(self) -> int: ...

    def screen(self) -> Sequence[int]: ...

    def console(self) -> Sequence[int]: ...

    def input(self, c: int) -> None: ...

    def left(self) -> None: ...

    def right(self) -> None: ...

    def up(self) -> None: ...

    def down(self) -> None: ...

    def intro(self) -> None: ...

    def enter(self) -> int: ...

    def win(self) -> None: ...

    def lose(self) -> None: ...


def _borrow(name: str, data: Sequence[int], expected: int) -> View:
    if isinstance(data, (bytes, bytearray, memoryview)):
        view = np.frombuffer(data, dtype=np.uint8)
    else:
        view = np.asarray(data, dtype=np.uint8).view()
    if view.ndim != 1 or view.shape[0] != expected:
        raise BufferLengthError(name, expected, int(view.size))
    view.flags.writeable = False
    return view


def screen_view(engine: Engine) -> View:
    """Return a read-only, row-major view of the full screen buffer."""

    return _borrow("screen", engine.screen(), engine.width() * engine.height())


def console_view(engine: Engine) -> View:
    """Return a read-only view of the command row."""

    return _borrow("console", engine.console(), engine.width())


def _number(value: int) -> bytes:
    return str(int(value)).encode("ascii")


TITLE = b"""##################################################
#                                                #
#                                                #
#                                                #
#       .dBBBBP dBBBBBBP dBBBBBb   dBBBBBb       #
#       BP                    BB       dBP       #
#       `BBBBb   dBP      dBP BB   dBBBBK        #
#          dBP  dBP      dBP  BB  dBP  BB        #
#     dBBBBP'  dBP      dBBBBBBB dBP  dB'        #
#                                                #
#               dBBBBBBP dBBBBBb    dBP dBBBBBb  #
#                            dBP            dB'  #
#                dBP     dBBBBK   dBP   dBBBP'   #
#               dBP     dBP  BB  dBP   dBP       #
#              dBP     dBP  dB' dBP   dBP        #
#                                                #
#                                                #
#                                                #
#                                                #
#                                                #
#               +----------------+               #
#               + Click to start |               #
#               +----------------+               #
#                                                #
##################################################"""

INTRO = b"""Welcome, Captain, to your new command, the
HMS Venture. This is a demonstration bridge: the
crew will answer a handful of orders.

Enter the HELP command for a listing of available
commands. Good luck!"""

HELP = b"""Available commands:

  HELP  Show this listing
  WIN   Declare the mission accomplished
  QUIT  Abandon ship"""


class DemoEngine:
    """Minimal engine driving a :class:`Terminal`.

    Real game rules are out of scope for the front-end; this engine only
    understands a few commands so that the runners can be used stand-alone.
    """

    def __init__(self, delay_ms: int = DELAY_TIME) -> None:
        self.term = Terminal()
        self.term.message(TITLE)
        self._delay_ms = delay_ms
        self.turns = 0

    def width(self) -> int:
        return WIDTH

    def height(self) -> int:
        return HEIGHT

    def tile_size(self) -> int:
        return TILE_SIZE

    def num_tiles(self) -> int:
        return NUM_TILES

    def delay_time(self) -> int:
        return self._delay_ms

    def screen(self) -> View:
        return self.term.screen()

    def console(self) -> View:
        return self.term.console()

    def input(self, c: int) -> None:
        self.term.input(c)

    def left(self) -> None:
        self.term.left()

    def right(self) -> None:
        self.term.right()

    def up(self) -> None:
        self.term.up()

    def down(self) -> None:
        self.term.down()

    def intro(self) -> None:
        self.term.message(INTRO)
        self.term.update_console()

    def enter(self) -> int:
        words = self.term.enter().split()
        if not words:
            return EngineStatus.CONTINUE
        self.turns += 1
        verb = words[0].lower()
        LOGGER.debug("Command %r", verb)
        if verb in (b"help", b"h"):
            self.term.message(HELP)
        elif verb in (b"win", b"w"):
            return EngineStatus.WIN
        elif verb in (b"quit", b"q"):
            return EngineStatus.LOSE
        else:
            self.term.message(
                b"Unrecognised command:\n\n    '"
                + words[0]
                + b"'\n\nTry the HELP command for a list of possible\ncommands!"
            )
        self.term.update_console()
        return EngineStatus.CONTINUE

    def win(self) -> None:
        self.term.message(
            b"Well done, Captain, you've succeeded in\n"
            b"making the galaxy a safer place.\n\n"
            b"Orders given:\n\n                         "
            + _number(self.turns)
            + b"\n\n\nTo play again, restart the game."
        )

    def lose(self) -> None:
        self.term.message(
            b"Unfortunately you have abandoned your mission.\n\n"
            b"Orders given:\n\n                         "
            + _number(self.turns)
            + b"\n\n\nTo play again, restart the game."
        )


__all__ = ["Engine", "DemoEngine", "screen_view", "console_view"]
