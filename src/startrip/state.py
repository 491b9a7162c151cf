"""Render and lifecycle state shared by the pipeline and input handlers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

from .constants import BLANK_TILES


class Lifecycle(str, Enum):
    """Progression gating keyboard dispatch."""

    NOT_STARTED = "not-started"
    STARTED = "started"
    ENDED = "ended"


class EngineStatus(IntEnum):
    """Result of evaluating a command line."""

    CONTINUE = 0
    WIN = 1
    LOSE = 2


@dataclass
class RenderState:
    """Mutable render flags for a single game session.

    One instance is shared by reference between the render pipeline, the
    keyboard dispatcher and the click handler. It doubles as the pacing
    cancellation token: :meth:`skip` only turns pacing off for cells that
    have not been reached yet, a pause that has already begun still runs to
    completion.
    """

    started: bool = False
    pacing_enabled: bool = True
    draw_in_progress: bool = False

    def skip(self) -> None:
        """Drop pacing for the rest of the current animated draw."""

        self.pacing_enabled = False

    def reset_pacing(self) -> None:
        self.pacing_enabled = True

    def should_pace(self, paced: bool, tile: int) -> bool:
        """Return ``True`` if ``tile`` gets the highlight and pause."""

        return paced and self.pacing_enabled and int(tile) not in BLANK_TILES
