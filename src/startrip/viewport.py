"""Presentation scaling of the fixed-resolution screen.

The logical grid never changes; only the size at which the pixel surface is
shown does. :func:`fit_viewport` is re-evaluated whenever the window is
resized or the device orientation changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

# Wider than this and the screen is constrained by height instead of width
WIDE_ASPECT = 2.0
# Share of the viewport used when the native size does not fit
FILL_RATIO = 0.9


@dataclass(frozen=True)
class ViewportFit:
    """Result of fitting the surface into a viewport."""

    mode: str  # "native", "height" or "width"
    width: int
    height: int
    scale: float

    def css(self) -> Dict[str, str]:
        """Return the style assignments a browser canvas needs."""

        if self.mode == "native":
            return {"width": f"{self.width}px"}
        if self.mode == "height":
            return {"height": f"{int(FILL_RATIO * 100)}%"}
        return {"width": f"{int(FILL_RATIO * 100)}%"}


def fit_viewport(view_width: int, view_height: int, native_width: int, native_height: int) -> ViewportFit:
    """Return how a ``native_width x native_height`` surface fits the viewport.

    1. If the viewport is at least as wide as the surface, show it at its
       native size.
    2. Otherwise, if the viewport aspect ratio is at least 2.0, fill 90% of
       its height.
    3. Otherwise fill 90% of its width.

    The aspect ratio of the surface is always preserved.
    """

    if view_width >= native_width:
        return ViewportFit("native", native_width, native_height, 1.0)

    aspect = view_width / view_height if view_height > 0 else float("inf")
    if aspect >= WIDE_ASPECT:
        height = max(1, int(view_height * FILL_RATIO))
        scale = height / native_height
        return ViewportFit("height", max(1, round(native_width * scale)), height, scale)

    width = max(1, int(view_width * FILL_RATIO))
    scale = width / native_width
    return ViewportFit("width", width, max(1, round(native_height * scale)), scale)
