"""Pointer input: start the game on the first click, skip animations after."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .dispatch import InputDispatcher
from .engine import Engine
from .pipeline import RenderPipeline
from .state import Lifecycle, RenderState


LOGGER = logging.getLogger(__name__)


class ClickHandler:
    def __init__(
        self,
        engine: Engine,
        pipeline: RenderPipeline,
        state: RenderState,
        dispatcher: InputDispatcher,
        *,
        focus: Optional[Callable[[], None]] = None,
    ) -> None:
        self.engine = engine
        self.pipeline = pipeline
        self.state = state
        self.dispatcher = dispatcher
        self._focus = focus or (lambda: None)

    async def handle_click(self) -> None:
        """Handle one click on the screen.

        The keyboard is only installed after the intro has been drawn, so
        keys typed while it animates never reach the engine.
        """

        self._focus()
        if self.dispatcher.lifecycle is Lifecycle.NOT_STARTED:
            self.state.started = True
            LOGGER.info("Game started")
            self.engine.intro()
            await self.pipeline.render_full(True)
            self.dispatcher.install()
        else:
            self.state.skip()
