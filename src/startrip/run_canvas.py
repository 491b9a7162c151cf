"""Canvas-based web front-end.

This renderer draws directly to the HTML5 canvas via PyScript/pyodide's JS
bridge. The page provides a ``game-canvas`` canvas, a ``game-input`` text
input that captures the keyboard, and optionally a ``diagnostics`` element.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from js import Image, document, window  # type: ignore
from pyodide.ffi import create_proxy  # type: ignore

from .atlas import TileAtlas
from .clicks import ClickHandler
from .constants import ATLAS_PATH, HIGHLIGHT_ALPHA
from .dispatch import InputDispatcher, InputPort
from .engine import DemoEngine, Engine
from .pipeline import RenderPipeline
from .state import RenderState
from .viewport import ViewportFit, fit_viewport


LOGGER = logging.getLogger(__name__)


class CanvasBlitter:
    """Draw tiles from a loaded ``Image`` onto a 2D canvas context."""

    def __init__(self, ctx: Any, image: Any, atlas: TileAtlas) -> None:
        self.ctx = ctx
        self.image = image
        self.atlas = atlas

    def draw_tile(self, index: int, row: int, col: int) -> None:
        x, y, w, h = self.atlas.source_rect(index)
        size = self.atlas.tile_size
        self.ctx.drawImage(self.image, x, y, w, h, col * size, row * size, size, size)

    def highlight(self, row: int, col: int) -> None:
        size = self.atlas.tile_size
        ctx = self.ctx
        ctx.save()
        ctx.globalCompositeOperation = "lighten"
        ctx.fillStyle = "white"
        ctx.globalAlpha = HIGHLIGHT_ALPHA / 255
        ctx.fillRect(col * size, row * size, size, size)
        ctx.restore()


@dataclass
class Runner:
    engine: Optional[Engine] = None
    atlas_path: str = ATLAS_PATH
    state: RenderState = field(default_factory=RenderState)
    port: InputPort = field(default_factory=InputPort)
    pipeline: Optional[RenderPipeline] = None
    dispatcher: Optional[InputDispatcher] = None
    clicks: Optional[ClickHandler] = None
    canvas: Any = None
    input: Any = None
    fit: Optional[ViewportFit] = None
    _proxies: List[Any] = field(default_factory=list)

    def _log(self, msg: str) -> None:
        LOGGER.info(msg)
        el = document.getElementById("diagnostics")
        if el:
            div = document.createElement("div")
            div.textContent = msg
            el.prepend(div)

    def _proxy(self, func):
        proxy = create_proxy(func)
        self._proxies.append(proxy)
        return proxy

    def resize(self, *_args) -> ViewportFit:
        """Apply the viewport policy to the canvas style."""

        self.fit = fit_viewport(window.innerWidth, window.innerHeight, self.canvas.width, self.canvas.height)
        for prop, value in self.fit.css().items():
            setattr(self.canvas.style, prop, value)
        return self.fit

    def _clear_echo(self) -> None:
        if self.input:
            self.input.value = ""

    def _focus(self) -> None:
        if self.input:
            self.input.focus(preventScroll=True)

    def setup(self, ctx: Any, image: Any) -> None:
        """Wire the pipeline and handlers to a canvas context and tile image."""

        engine = self.engine
        atlas = TileAtlas(engine.tile_size(), engine.num_tiles())
        self.pipeline = RenderPipeline(engine, CanvasBlitter(ctx, image, atlas), self.state)
        self.dispatcher = InputDispatcher(engine, self.pipeline, self.state, self.port, clear_echo=self._clear_echo)
        self.clicks = ClickHandler(engine, self.pipeline, self.state, self.dispatcher, focus=self._focus)

    async def _on_key(self, evt) -> None:
        await self.port.publish(evt.key)

    async def _on_click(self, _evt=None) -> None:
        await self.clicks.handle_click()

    async def _on_load(self, _evt=None) -> None:
        await self.pipeline.render_full(False)
        self.canvas.addEventListener("click", self._proxy(self._on_click))
        self._log("Tiles loaded, click to start")

    def start(self) -> None:
        if self.pipeline is not None:
            self._log("Already running")
            return
        if self.engine is None:
            self.engine = DemoEngine()
        engine = self.engine

        self.canvas = document.getElementById("game-canvas")
        self.canvas.width = engine.tile_size() * engine.width()
        self.canvas.height = engine.tile_size() * engine.height()
        ctx = self.canvas.getContext("2d")

        self.resize()
        window.addEventListener("resize", self._proxy(self.resize))
        orientation = getattr(window.screen, "orientation", None)
        if orientation:
            orientation.addEventListener("change", self._proxy(self.resize))
        else:
            window.addEventListener("orientationchange", self._proxy(self.resize))

        self.input = document.getElementById("game-input")
        self.input.addEventListener("keydown", self._proxy(self._on_key))

        image = Image.new()
        self.setup(ctx, image)
        image.addEventListener("load", self._proxy(self._on_load))
        image.src = self.atlas_path


runner = Runner()


def start() -> None:
    runner.start()
