"""Draw commands recorded on pages and replayed into a PageSink."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from .geometry import Rect

Color = Tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)
WHITE: Color = (1.0, 1.0, 1.0)
GREY: Color = (0.5, 0.5, 0.5)
LIGHT_GREY: Color = (0.78, 0.78, 0.78)
WATERMARK_GREY: Color = (0.9, 0.9, 0.9)


@dataclass(slots=True, frozen=True)
class TextCommand:
    """Single line of text; ``y`` is the baseline, ``x`` the anchor for ``align``."""

    x: float
    y: float
    text: str
    font: str
    size: float
    color: Color = BLACK
    align: str = "left"
    angle: float = 0.0


@dataclass(slots=True, frozen=True)
class LineCommand:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 0.5
    color: Color = BLACK


@dataclass(slots=True, frozen=True)
class RectCommand:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[Color] = None
    stroke: Optional[Color] = None
    line_width: float = 0.5


@dataclass(slots=True, frozen=True)
class ImageCommand:
    """Image drawn in the given frame; anything outside ``clip`` is not painted."""

    x: float
    y: float
    width: float
    height: float
    data: bytes = field(repr=False)
    clip: Optional[Rect] = None


DrawCommand = Union[TextCommand, LineCommand, RectCommand, ImageCommand]


def command_bottom(command: DrawCommand) -> float:
    """Lowest y (top-down) a command paints at, clip applied."""
    if isinstance(command, TextCommand):
        return command.y
    if isinstance(command, LineCommand):
        return max(command.y1, command.y2)
    if isinstance(command, ImageCommand) and command.clip is not None:
        return min(command.y + command.height, command.clip.bottom)
    return command.y + command.height
