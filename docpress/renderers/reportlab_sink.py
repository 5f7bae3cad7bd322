"""
ReportLab-backed PageSink producing PDF bytes.

The layout core works top-down; ReportLab's canvas is bottom-up, so every
y coordinate is flipped here and nowhere else.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from ..engine.draw_commands import BLACK, Color
from ..engine.geometry import Rect
from .page_sink import PageSink

logger = logging.getLogger(__name__)


def to_color(rgb: Color, alpha: float = 1.0) -> colors.Color:
    red, green, blue = rgb
    return colors.Color(red, green, blue, alpha=alpha)


class ReportLabPageSink(PageSink):
    """Draws onto a ReportLab canvas backed by an in-memory buffer."""

    def __init__(
        self,
        page_width: float = A4[0],
        page_height: float = A4[1],
        title: Optional[str] = None,
        author: Optional[str] = None,
    ) -> None:
        super().__init__(page_width, page_height)
        self._buffer = BytesIO()
        # invariant output keeps the bytes stable for identical input
        self.canvas = Canvas(self._buffer, pagesize=(page_width, page_height), invariant=1)
        self.canvas.setCreator("docpress")
        if title:
            self.canvas.setTitle(title)
        if author:
            self.canvas.setAuthor(author)
        self._page_open = False
        self._pages = 0
        self._saved = False

    def _flip(self, y: float) -> float:
        return self.page_height - y

    # ------------------------------------------------------------------
    # Measuring
    # ------------------------------------------------------------------
    def measure(self, text: str, font: str, size: float) -> float:
        if not text:
            return 0.0
        return pdfmetrics.stringWidth(text, font, size)

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------
    def begin_page(self, index: int) -> None:
        if self._page_open:
            raise RuntimeError(f"Page {index} started before the previous page was ended")
        self._page_open = True

    def end_page(self) -> None:
        if not self._page_open:
            raise RuntimeError("end_page() called without begin_page()")
        self.canvas.showPage()
        self._page_open = False
        self._pages += 1

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------
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
        canvas = self.canvas
        canvas.saveState()
        canvas.setFillColor(to_color(color))
        canvas.setFont(font, size)
        if angle:
            canvas.translate(x, self._flip(y))
            canvas.rotate(angle)
            x, pdf_y = 0.0, 0.0
        else:
            pdf_y = self._flip(y)

        if align == "center":
            canvas.drawCentredString(x, pdf_y, text)
        elif align == "right":
            canvas.drawRightString(x, pdf_y, text)
        else:
            canvas.drawString(x, pdf_y, text)
        canvas.restoreState()

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, width: float = 0.5, color: Color = BLACK) -> None:
        canvas = self.canvas
        canvas.saveState()
        canvas.setStrokeColor(to_color(color))
        canvas.setLineWidth(width)
        canvas.line(x1, self._flip(y1), x2, self._flip(y2))
        canvas.restoreState()

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
        if fill is None and stroke is None:
            return
        canvas = self.canvas
        canvas.saveState()
        if fill is not None:
            canvas.setFillColor(to_color(fill))
        if stroke is not None:
            canvas.setStrokeColor(to_color(stroke))
            canvas.setLineWidth(line_width)
        canvas.rect(
            x,
            self._flip(y + height),
            width,
            height,
            stroke=1 if stroke is not None else 0,
            fill=1 if fill is not None else 0,
        )
        canvas.restoreState()

    def draw_image(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        data: bytes,
        clip: Optional[Rect] = None,
    ) -> None:
        canvas = self.canvas
        image = ImageReader(BytesIO(data))
        canvas.saveState()
        if clip is not None:
            path = canvas.beginPath()
            path.rect(clip.x, self._flip(clip.bottom), clip.width, clip.height)
            canvas.clipPath(path, stroke=0, fill=0)
        canvas.drawImage(
            image,
            x,
            self._flip(y + height),
            width=width,
            height=height,
            preserveAspectRatio=True,
            mask="auto",
        )
        canvas.restoreState()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def serialize(self) -> bytes:
        if self._page_open:
            raise RuntimeError("serialize() called with an open page")
        if not self._saved:
            self.canvas.save()
            self._saved = True
            logger.debug("Serialized %d pages (%d bytes)", self._pages, self._buffer.tell())
        return self._buffer.getvalue()
