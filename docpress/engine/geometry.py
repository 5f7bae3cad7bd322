"""Geometry primitives for layout calculations.

All coordinates are in points, measured top-down from the page's top-left
corner. Renderers with a bottom-up origin flip them at draw time.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


def aligned_x(frame: Rect, text_width: float, alignment: str = "left") -> float:
    """
    Calculate X position for text inside ``frame``.

    Args:
        frame: Area the text is placed in
        text_width: Measured text width in points
        alignment: "left", "center" or "right"

    Returns:
        X position for the start of the text; never left of ``frame.x``
    """
    alignment = alignment.lower() if alignment else "left"
    if alignment == "center":
        return max(frame.x, frame.x + (frame.width - text_width) / 2)
    if alignment == "right":
        return max(frame.x, frame.right - text_width)
    return frame.x
