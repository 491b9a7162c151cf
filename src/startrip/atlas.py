"""Tile sheet geometry and loading.

A tile sheet is a square grid of ``num_tiles x num_tiles`` cells, each
``tile_size`` pixels on a side. Tile ``t`` lives in cell
``(t % num_tiles, t // num_tiles)``; the byte values of the screen buffer are
CP-437 code points so the default sheet is laid out in that order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import pygame

from .constants import BLANK_TILES, NUM_TILES, TILE_SIZE
from .errors import AtlasError


LOGGER = logging.getLogger(__name__)

Rect = Tuple[int, int, int, int]


@dataclass(frozen=True)
class TileAtlas:
    """Map tile indices to source rectangles in a fixed-grid sheet.

    Indices outside the sheet wrap around modulo ``num_tiles ** 2`` so that
    any integer resolves to some tile and lookups never fail.
    """

    tile_size: int = TILE_SIZE
    num_tiles: int = NUM_TILES

    @property
    def capacity(self) -> int:
        return self.num_tiles * self.num_tiles

    @property
    def sheet_size(self) -> Tuple[int, int]:
        side = self.tile_size * self.num_tiles
        return side, side

    def cell(self, index: int) -> Tuple[int, int]:
        """Return the ``(col, row)`` of ``index`` in the sheet."""

        index = int(index) % self.capacity
        return index % self.num_tiles, index // self.num_tiles

    def source_rect(self, index: int) -> Rect:
        """Return ``(x, y, w, h)`` of ``index`` in sheet pixels."""

        col, row = self.cell(index)
        return (col * self.tile_size, row * self.tile_size, self.tile_size, self.tile_size)


def load_atlas(path: str, atlas: TileAtlas) -> pygame.Surface:
    """Load the tile sheet at ``path`` and check it covers ``atlas``.

    Raises:
        AtlasError: If the image cannot be read or is smaller than the grid.
    """

    try:
        image = pygame.image.load(path)
    except (pygame.error, FileNotFoundError) as exc:
        raise AtlasError(f"Cannot load tile sheet {path!r}: {exc}") from exc
    need_w, need_h = atlas.sheet_size
    width, height = image.get_size()
    if width < need_w or height < need_h:
        raise AtlasError(
            f"Tile sheet {path!r} is {width}x{height}, expected at least {need_w}x{need_h}"
        )
    return image


def procedural_atlas(atlas: TileAtlas) -> pygame.Surface:
    """Build a stand-in tile sheet in memory.

    Every printable CP-437 code point is rendered with pygame's default font
    when the font module is usable, otherwise cells get a simple block
    pattern. Blank tiles stay black.
    """

    sheet = pygame.Surface(atlas.sheet_size)
    sheet.fill((0, 0, 0))
    font = None
    try:
        if not pygame.font.get_init():
            pygame.font.init()
        font = pygame.font.Font(None, atlas.tile_size + 2)
    except (pygame.error, NotImplementedError) as exc:
        LOGGER.warning("Font rendering unavailable, using block tiles: %s", exc)

    for index in range(atlas.capacity):
        if index in BLANK_TILES:
            continue
        x, y, w, h = atlas.source_rect(index)
        glyph = bytes([index]).decode("cp437")
        if font is not None and glyph.isprintable():
            rendered = font.render(glyph, False, (255, 255, 255))
            rect = rendered.get_rect(center=(x + w // 2, y + h // 2))
            sheet.blit(rendered, rect)
        else:
            inset = max(1, w // 4)
            sheet.fill((200, 200, 200), pygame.Rect(x + inset, y + inset, w - 2 * inset, h - 2 * inset))
    return sheet


def open_atlas(path: str, atlas: TileAtlas) -> pygame.Surface:
    """Return the sheet at ``path``, falling back to :func:`procedural_atlas`."""

    try:
        return load_atlas(path, atlas)
    except AtlasError as exc:
        LOGGER.warning("%s; using generated tiles", exc)
        return procedural_atlas(atlas)
