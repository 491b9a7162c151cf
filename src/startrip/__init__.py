"""Tile-based presentation and input layer for the Star Trip text adventure."""

from .atlas import TileAtlas
from .blit import SurfaceBlitter, TileBlitter
from .clicks import ClickHandler
from .constants import GameConfig
from .dispatch import InputDispatcher, InputPort
from .engine import DemoEngine, Engine, console_view, screen_view
from .errors import AtlasError, BufferLengthError, StartripError, UnknownStatusError
from .pipeline import DrawReport, RenderPipeline
from .state import EngineStatus, Lifecycle, RenderState
from .terminal import Terminal
from .viewport import ViewportFit, fit_viewport

__all__ = [
    "TileAtlas",
    "TileBlitter",
    "SurfaceBlitter",
    "ClickHandler",
    "GameConfig",
    "InputDispatcher",
    "InputPort",
    "Engine",
    "DemoEngine",
    "screen_view",
    "console_view",
    "StartripError",
    "AtlasError",
    "BufferLengthError",
    "UnknownStatusError",
    "DrawReport",
    "RenderPipeline",
    "EngineStatus",
    "Lifecycle",
    "RenderState",
    "Terminal",
    "ViewportFit",
    "fit_viewport",
]
