"""
In-memory PageSink that records every primitive call.

Text is measured with a fixed advance per character, so layout results are
exact and reproducible without any font files. Used by tests and for
debugging layouts as JSON.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from reportlab.lib.pagesizes import A4

from ..engine.draw_commands import BLACK, Color
from ..engine.geometry import Rect, aligned_x
from .page_sink import PageSink


@dataclass(slots=True)
class SinkCall:
    name: str
    page: int
    args: Dict[str, Any] = field(default_factory=dict)


class RecordingPageSink(PageSink):
    """Records calls per page; ``char_width`` is the advance in ems for every character."""

    def __init__(self, page_width: float = A4[0], page_height: float = A4[1], char_width: float = 0.5) -> None:
        super().__init__(page_width, page_height)
        self.char_width = char_width
        self.calls: List[SinkCall] = []
        self.pages: List[int] = []
        self._current: Optional[int] = None

    def measure(self, text: str, font: str, size: float) -> float:
        return len(text) * size * self.char_width

    def begin_page(self, index: int) -> None:
        if self._current is not None:
            raise RuntimeError(f"Page {index} started before page {self._current} was ended")
        self._current = index
        self.pages.append(index)
        self._record("begin_page")

    def end_page(self) -> None:
        if self._current is None:
            raise RuntimeError("end_page() called without begin_page()")
        self._record("end_page")
        self._current = None

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
        width = self.measure(text, font, size)
        if align == "center":
            frame = Rect(x - width / 2, y - size, width, size)
        elif align == "right":
            frame = Rect(x - width, y - size, width, size)
        else:
            frame = Rect(x, y - size, width, size)
        self._record(
            "draw_text",
            x=x,
            y=y,
            left=aligned_x(frame, width, align),
            text=text,
            font=font,
            size=size,
            color=color,
            align=align,
            angle=angle,
        )

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, width: float = 0.5, color: Color = BLACK) -> None:
        self._record("draw_line", x1=x1, y1=y1, x2=x2, y2=y2, width=width, color=color)

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
        self._record("draw_rect", x=x, y=y, width=width, height=height, fill=fill, stroke=stroke,
                     line_width=line_width)

    def draw_image(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        data: bytes,
        clip: Optional[Rect] = None,
    ) -> None:
        self._record(
            "draw_image",
            x=x,
            y=y,
            width=width,
            height=height,
            size=len(data),
            clip=asdict(clip) if clip is not None else None,
        )

    def serialize(self) -> bytes:
        if self._current is not None:
            raise RuntimeError("serialize() called with an open page")
        return json.dumps([asdict(call) for call in self.calls], indent=1).encode("utf-8")

    # ------------------------------------------------------------------
    # Inspection helpers
    # ------------------------------------------------------------------
    def _record(self, name: str, **args: Any) -> None:
        if self._current is None:
            raise RuntimeError(f"{name}() called outside a page")
        self.calls.append(SinkCall(name=name, page=self._current, args=args))

    def calls_on(self, page: int, name: Optional[str] = None) -> List[SinkCall]:
        return [call for call in self.calls if call.page == page and (name is None or call.name == name)]

    def texts_on(self, page: int) -> List[str]:
        return [call.args["text"] for call in self.calls_on(page, "draw_text")]
