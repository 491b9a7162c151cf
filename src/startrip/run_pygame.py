"""Desktop front-end built on ``pygame``.

The screen is drawn onto an off-screen surface at its native resolution and
scaled into the (resizable) window every frame according to
:func:`startrip.viewport.fit_viewport`. Input handlers run as asyncio tasks
so that a key press or click is handled while an animated redraw is
suspended in one of its pauses.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Coroutine, Optional, Set

import pygame

from .atlas import TileAtlas, open_atlas
from .blit import SurfaceBlitter
from .clicks import ClickHandler
from .constants import GameConfig
from .dispatch import InputDispatcher, InputPort
from .engine import DemoEngine, Engine
from .pipeline import RenderPipeline
from .state import RenderState
from .viewport import ViewportFit, fit_viewport


LOGGER = logging.getLogger(__name__)

KEY_NAMES = {
    pygame.K_LEFT: "ArrowLeft",
    pygame.K_RIGHT: "ArrowRight",
    pygame.K_UP: "ArrowUp",
    pygame.K_DOWN: "ArrowDown",
    pygame.K_BACKSPACE: "Backspace",
    pygame.K_DELETE: "Delete",
    pygame.K_RETURN: "Enter",
    pygame.K_KP_ENTER: "Enter",
}


def key_name(event: pygame.event.Event) -> str:
    """Return the DOM-style key name of a ``KEYDOWN`` event."""

    name = KEY_NAMES.get(event.key)
    if name:
        return name
    char = getattr(event, "unicode", "")
    if len(char) == 1 and char.isprintable():
        return char
    return "Unidentified"


class GameRunner:
    """Own the window, the game objects and the event loop."""

    def __init__(self, config: Optional[GameConfig] = None, engine: Optional[Engine] = None) -> None:
        self.config = config or GameConfig()
        if engine is None:
            engine = DemoEngine() if self.config.delay_ms is None else DemoEngine(self.config.delay_ms)
        self.engine = engine
        self.atlas = TileAtlas(engine.tile_size(), engine.num_tiles())
        self.native_size = (engine.width() * engine.tile_size(), engine.height() * engine.tile_size())
        self.state = RenderState()
        self.port = InputPort()
        self.pipeline: Optional[RenderPipeline] = None
        self.dispatcher: Optional[InputDispatcher] = None
        self.clicks: Optional[ClickHandler] = None
        self.fit: ViewportFit = fit_viewport(*self.native_size, *self.native_size)
        self._running = False
        self._task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        self._window: Optional[pygame.Surface] = None
        self._surface: Optional[pygame.Surface] = None

    @property
    def running(self) -> bool:
        return self._running

    def setup(self, surface: pygame.Surface, sheet: pygame.Surface) -> None:
        """Wire the render pipeline and the input handlers to ``surface``."""

        self._surface = surface
        blitter = SurfaceBlitter(surface, sheet, self.atlas)
        self.pipeline = RenderPipeline(self.engine, blitter, self.state, animate=self.config.pacing)
        self.dispatcher = InputDispatcher(self.engine, self.pipeline, self.state, self.port)
        self.clicks = ClickHandler(self.engine, self.pipeline, self.state, self.dispatcher)

    def resize(self, width: int, height: int) -> ViewportFit:
        self.fit = fit_viewport(width, height, *self.native_size)
        LOGGER.debug("Viewport %dx%d -> %s", width, height, self.fit)
        return self.fit

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Input handler failed", exc_info=exc)

    def handle_event(self, event: pygame.event.Event) -> Optional[asyncio.Task]:
        """Route one pygame event; must be called inside a running loop."""

        if event.type == pygame.QUIT:
            self._running = False
        elif event.type == pygame.KEYDOWN:
            return self._spawn(self.port.publish(key_name(event)))
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and self.clicks:
            return self._spawn(self.clicks.handle_click())
        elif event.type == pygame.VIDEORESIZE:
            self.resize(event.w, event.h)
        elif event.type == pygame.WINDOWSIZECHANGED:
            self.resize(event.x, event.y)
        return None

    def present(self) -> None:
        """Scale the logical surface into the window and flip."""

        if not self._window or not self._surface:
            return
        self._window.fill((0, 0, 0))
        if self.fit.mode == "native":
            frame = self._surface
        else:
            frame = pygame.transform.scale(self._surface, (self.fit.width, self.fit.height))
        win_w, win_h = self._window.get_size()
        self._window.blit(frame, ((win_w - frame.get_width()) // 2, (win_h - frame.get_height()) // 2))
        pygame.display.flip()

    async def _run_loop(self) -> None:
        # Ensure SDL/pygame binds to the visible canvas in the page when running on Web.
        os.environ.setdefault("SDL_HINT_EMSCRIPTEN_CANVAS_ELEMENT_ID", "#canvas")
        os.environ.setdefault("SDL_HINT_EMSCRIPTEN_KEYBOARD_ELEMENT", "#canvas")
        pygame.init()
        self._window = pygame.display.set_mode(self.config.window_size or self.native_size, pygame.RESIZABLE)
        pygame.display.set_caption("Star Trip")
        self.resize(*self._window.get_size())
        sheet = open_atlas(self.config.atlas_path, self.atlas)
        self.setup(pygame.Surface(self.native_size), sheet)

        self._running = True
        assert self.pipeline is not None
        await self.pipeline.render_full(False)
        LOGGER.info("Waiting for the first click")

        while self._running:
            for event in pygame.event.get():
                self.handle_event(event)
            self.present()
            # Yield to pending pauses and input handlers until the next frame
            await asyncio.sleep(1 / self.config.fps)

        for task in list(self._tasks):
            task.cancel()
        pygame.quit()
        LOGGER.info("Game stopped")

    def start(self) -> None:
        if self._task and not self._task.done():
            LOGGER.warning("Game already running")
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop (e.g., plain Python); run synchronously
            asyncio.run(self._run_loop())
            return
        self._task = loop.create_task(self._run_loop())

    def stop(self) -> None:
        if not self._running:
            LOGGER.info("Stop ignored: game not running")
            return
        self._running = False


def main(config: Optional[GameConfig] = None) -> None:
    """Run the desktop front-end until the window is closed."""

    GameRunner(config).start()


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()
