"""Keyboard dispatch.

Keys are named after the DOM ``KeyboardEvent.key`` values (``"a"``,
``"ArrowLeft"``, ``"Backspace"``, ...) so that both front-ends feed the same
dispatcher. Events reach the dispatcher through an :class:`InputPort` it
subscribes to once the game has started and leaves for good once the game
has ended.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional

from .engine import Engine
from .errors import UnknownStatusError
from .pipeline import RenderPipeline
from .state import EngineStatus, Lifecycle, RenderState


LOGGER = logging.getLogger(__name__)

KeyHandler = Callable[[str], Awaitable[None]]

SPACE = 32

CURSOR_KEYS = {
    "ArrowLeft": "left",
    "ArrowRight": "right",
    "ArrowUp": "up",
    "ArrowDown": "down",
}


def code_unit(char: str) -> int:
    """Return the first UTF-16 code unit of ``char``."""

    point = ord(char)
    if point < 0x10000:
        return point
    return 0xD800 + ((point - 0x10000) >> 10)


class InputPort:
    """Fan keyboard events out to the subscribed handlers."""

    def __init__(self) -> None:
        self._handlers: List[KeyHandler] = []

    @property
    def subscribed(self) -> bool:
        return bool(self._handlers)

    def subscribe(self, handler: KeyHandler) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler: KeyHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    async def publish(self, key: str) -> None:
        for handler in list(self._handlers):
            await handler(key)


class InputDispatcher:
    """Translate key presses into engine calls and redraw requests."""

    def __init__(
        self,
        engine: Engine,
        pipeline: RenderPipeline,
        state: RenderState,
        port: InputPort,
        *,
        clear_echo: Optional[Callable[[], None]] = None,
    ) -> None:
        self.engine = engine
        self.pipeline = pipeline
        self.state = state
        self.port = port
        self._clear_echo = clear_echo or (lambda: None)
        self._ended = False
        self.status = EngineStatus.CONTINUE

    @property
    def lifecycle(self) -> Lifecycle:
        if self._ended:
            return Lifecycle.ENDED
        if self.state.started:
            return Lifecycle.STARTED
        return Lifecycle.NOT_STARTED

    def install(self) -> None:
        """Start listening to the keyboard."""

        if self._ended:
            return
        self.port.subscribe(self.handle_key)
        LOGGER.info("Keyboard input enabled")

    def _end(self, status: EngineStatus) -> None:
        if status is EngineStatus.WIN:
            self.engine.win()
        else:
            self.engine.lose()
        self.status = status
        self._ended = True
        self.port.unsubscribe(self.handle_key)
        LOGGER.info("Game over: %s", status.name.lower())

    async def handle_key(self, key: str) -> None:
        """Handle one keydown event."""

        if self._ended:
            return
        try:
            await self._dispatch(key)
        finally:
            self._clear_echo()

    async def _dispatch(self, key: str) -> None:
        if self.state.draw_in_progress:
            # Key pressed mid-animation only speeds the animation up
            self.state.skip()
            return

        engine = self.engine
        if len(key) == 1:
            engine.input(code_unit(key))
        elif key in CURSOR_KEYS:
            getattr(engine, CURSOR_KEYS[key])()
        elif key == "Backspace":
            engine.left()
            engine.input(SPACE)
            engine.left()
        elif key == "Delete":
            engine.input(SPACE)
        elif key == "Enter":
            await self._evaluate()
            return
        else:
            LOGGER.debug("Ignoring key %r", key)
            return
        self.pipeline.render_console()

    async def _evaluate(self) -> None:
        raw = self.engine.enter()
        try:
            status = EngineStatus(raw)
        except ValueError:
            LOGGER.error("Engine returned unknown status %r", raw)
            raise UnknownStatusError(raw) from None
        if status is not EngineStatus.CONTINUE:
            self._end(status)
        await self.pipeline.render_full(True)
