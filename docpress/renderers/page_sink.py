"""Drawing interface the layout core renders into."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..engine.draw_commands import BLACK, Color
from ..engine.geometry import Rect


class PageSink(ABC):
    """
    Primitive drawing operations of an output backend.

    Coordinates are top-down points: ``y`` grows downward from the top edge
    of the page. ``measure`` is the only source of text width; the layout
    engine wraps with it and the sink draws with the same metrics.
    """

    def __init__(self, page_width: float, page_height: float) -> None:
        self.page_width = page_width
        self.page_height = page_height

    @abstractmethod
    def measure(self, text: str, font: str, size: float) -> float:
        """Width of ``text`` in points."""

    @abstractmethod
    def begin_page(self, index: int) -> None:
        """Start a new page."""

    @abstractmethod
    def end_page(self) -> None:
        """Close the current page."""

    @abstractmethod
    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        font: str,
        size: float,
        color: Color = BLACK,
        align: str = "left",
        angle: float = 0.0,
    ) -> None:
        """Draw one line of text with its baseline at ``y``."""

    @abstractmethod
    def draw_line(self, x1: float, y1: float, x2: float, y2: float, width: float = 0.5, color: Color = BLACK) -> None:
        """Draw a straight line."""

    @abstractmethod
    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: Optional[Color] = None,
        stroke: Optional[Color] = None,
        line_width: float = 0.5,
    ) -> None:
        """Draw a rectangle whose top-left corner is ``(x, y)``."""

    @abstractmethod
    def draw_image(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        data: bytes,
        clip: Optional[Rect] = None,
    ) -> None:
        """Draw raster ``data`` into the frame, painting nothing outside ``clip``."""

    @abstractmethod
    def serialize(self) -> bytes:
        """Finish the document and return its bytes."""
