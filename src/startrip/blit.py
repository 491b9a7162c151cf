"""Copy tiles from the sheet onto a pixel surface."""

from __future__ import annotations

from typing import Protocol

import pygame

from .atlas import TileAtlas
from .constants import HIGHLIGHT_ALPHA


class TileBlitter(Protocol):
    def draw_tile(self, index: int, row: int, col: int) -> None: ...

    def highlight(self, row: int, col: int) -> None: ...


class SurfaceBlitter:
    """Draw tiles from ``sheet`` onto a pygame ``surface``.

    Destination cells are always inside the logical grid, so there is no
    bounds check here.
    """

    def __init__(self, surface: pygame.Surface, sheet: pygame.Surface, atlas: TileAtlas) -> None:
        self.surface = surface
        self.sheet = sheet
        self.atlas = atlas
        size = atlas.tile_size
        # White at fixed translucency over any pixel equals a "lighten" blend
        self._overlay = pygame.Surface((size, size))
        self._overlay.fill((255, 255, 255))
        self._overlay.set_alpha(HIGHLIGHT_ALPHA)

    def _dest(self, row: int, col: int) -> tuple[int, int]:
        size = self.atlas.tile_size
        return col * size, row * size

    def draw_tile(self, index: int, row: int, col: int) -> None:
        self.surface.blit(self.sheet, self._dest(row, col), pygame.Rect(self.atlas.source_rect(index)))

    def highlight(self, row: int, col: int) -> None:
        """Brighten the tile at ``(row, col)``."""

        self.surface.blit(self._overlay, self._dest(row, col))
