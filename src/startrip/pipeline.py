"""Animated full-screen redraws and command-line redraws.

A full redraw clears the grid, then walks the screen buffer in row-major
order. When pacing is on, every non-blank tile is drawn brightened, held for
the engine's delay time and drawn again, which mimics a slow terminal
printing line by line. Input arriving while a pause is suspended may call
:meth:`RenderState.skip`; the flag is checked again before every cell, so
the remaining cells are drawn without pauses but the draw itself always
completes.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from .blit import TileBlitter
from .constants import BLANK_TILES, CLEAR_TILE
from .engine import Engine, console_view, screen_view
from .state import RenderState


LOGGER = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[object]]


@dataclass
class DrawReport:
    """Summary of a single redraw."""

    cells: int = 0
    paced: int = 0
    skipped: int = 0
    elapsed: float = 0.0

    @property
    def interrupted(self) -> bool:
        """Return ``True`` if pacing was cancelled before the last tile."""

        return self.skipped > 0


class RenderPipeline:
    """Draw engine buffers through a :class:`TileBlitter`."""

    def __init__(
        self,
        engine: Engine,
        blitter: TileBlitter,
        state: RenderState,
        *,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.perf_counter,
        animate: bool = True,
    ) -> None:
        self.engine = engine
        self.blitter = blitter
        self.state = state
        self._sleep = sleep
        self._clock = clock
        # When off, every full redraw is drawn as if unpaced
        self.animate = animate
        self.width = engine.width()
        self.height = engine.height()
        self.delay = engine.delay_time() / 1000.0

    def clear(self) -> None:
        """Draw the blank tile over every cell."""

        for row in range(self.height):
            for col in range(self.width):
                self.blitter.draw_tile(CLEAR_TILE, row, col)

    async def render_full(self, paced: bool) -> DrawReport:
        """Redraw the whole screen, pausing on each tile if ``paced``."""

        paced = paced and self.animate
        report = DrawReport()
        start = self._clock()
        self.state.draw_in_progress = True
        try:
            self.clear()
            screen = screen_view(self.engine)
            for row in range(self.height):
                for col in range(self.width):
                    tile = int(screen[row * self.width + col])
                    if self.state.should_pace(paced, tile):
                        self.blitter.draw_tile(tile, row, col)
                        self.blitter.highlight(row, col)
                        await self._sleep(self.delay)
                        report.paced += 1
                    elif paced and tile not in BLANK_TILES:
                        report.skipped += 1
                    self.blitter.draw_tile(tile, row, col)
                    report.cells += 1
        finally:
            self.state.reset_pacing()
            self.state.draw_in_progress = False
            report.elapsed = self._clock() - start

        if report.interrupted:
            LOGGER.info("Animation skipped after %d of %d tiles", report.paced, report.paced + report.skipped)
        LOGGER.debug("Full redraw: %s", report)
        return report

    def render_console(self) -> DrawReport:
        """Redraw the command row at the bottom of the screen."""

        start = self._clock()
        line = console_view(self.engine)
        row = self.height - 1
        for col in range(self.width):
            self.blitter.draw_tile(int(line[col]), row, col)
        report = DrawReport(cells=self.width, elapsed=self._clock() - start)
        LOGGER.debug("Console redraw: %s", report)
        return report
