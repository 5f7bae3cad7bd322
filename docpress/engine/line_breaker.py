"""Greedy line breaking shared by paragraphs and table cells."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List

logger = logging.getLogger(__name__)

# measure(text, font, size) -> width in points
TextMeasure = Callable[[str, str, float], float]


@dataclass(slots=True, frozen=True)
class WrappedLine:
    text: str
    width: float
    overflows: bool = False


class LineBreaker:
    """Simple greedy line breaker.

    Tokens are whitespace-delimited; explicit newlines are hard breaks. A
    token wider than the available width is placed alone on its own line
    (flagged ``overflows``) rather than truncated or dropped.
    """

    def __init__(self, measure: TextMeasure) -> None:
        self.measure = measure

    def break_text(self, text: str, max_width: float, font: str, size: float) -> List[WrappedLine]:
        if not text or not text.strip():
            return [WrappedLine(text="", width=0.0)]

        lines: List[WrappedLine] = []
        for hard_line in text.splitlines():
            lines.extend(self._break_hard_line(hard_line, max_width, font, size))
        return lines or [WrappedLine(text="", width=0.0)]

    def line_count(self, text: str, max_width: float, font: str, size: float) -> int:
        return len(self.break_text(text, max_width, font, size))

    def _break_hard_line(self, text: str, max_width: float, font: str, size: float) -> List[WrappedLine]:
        words = text.split()
        if not words:
            return [WrappedLine(text="", width=0.0)]

        lines: List[WrappedLine] = []
        current_line = ""
        current_width = 0.0

        for word in words:
            candidate = f"{current_line} {word}" if current_line else word
            width = self.measure(candidate, font, size)
            if width <= max_width:
                current_line = candidate
                current_width = width
                continue

            if current_line:
                lines.append(WrappedLine(text=current_line, width=current_width))
            current_line = word
            current_width = self.measure(word, font, size)

            # Word alone is still too wide: keep it on its own line
            if current_width > max_width:
                logger.debug(
                    "Token wider than line (%.1f > %.1f pt): %r", current_width, max_width, word[:40]
                )
                lines.append(WrappedLine(text=word, width=current_width, overflows=True))
                current_line = ""
                current_width = 0.0

        if current_line:
            lines.append(WrappedLine(text=current_line, width=current_width))
        return lines
