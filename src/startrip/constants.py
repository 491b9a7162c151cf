"""Session constants shared by the engine and the front-ends."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple


# Width of the "terminal" display in tiles
WIDTH = 50
# Height of the "terminal" display in tiles, the last row is the command line
HEIGHT = 25
# Pixels on a side of a single tile
TILE_SIZE = 16
# Tiles on a side of the tile sheet
NUM_TILES = 16
# Milliseconds between drawing two tiles of an animated screen
DELAY_TIME = 20

# Tile drawn everywhere before a full redraw
CLEAR_TILE = 0
# Tiles that never get the dramatic pause
BLANK_TILES = frozenset({0, 32})
# Solid block shown at the command-line cursor (CP-437)
CURSOR_TILE = 219

# Command prompt printed at the start of the command row
COMMAND = b"COMMAND => "
# Number of command lines retained in the history
HISTORY_LINES = 16

# Frames per second of the desktop loop
FPS = 60
# Alpha of the white overlay used to brighten a tile (about 50%)
HIGHLIGHT_ALPHA = 128

ATLAS_PATH = os.environ.get("STARTRIP_ATLAS", "assets/tiles_16x16.png")


@dataclass
class GameConfig:
    """Front-end settings for one session."""

    atlas_path: str = ATLAS_PATH
    pacing: bool = True
    delay_ms: Optional[int] = None
    fps: int = FPS
    window_size: Optional[Tuple[int, int]] = None
