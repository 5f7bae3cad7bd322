"""
Fixup pass over finished pages.

Runs once, after the content pass, when the page list can no longer grow.
Only then is ``len(pages)`` the true total used in "Page n of total". The
table of contents is filled from entries captured during the content pass,
so its page numbers are read, never estimated.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from ..config import LayoutConfig, ReportSettings
from .document_layout import DocumentLayout, Page, TocEntry
from .draw_commands import BLACK, GREY, LIGHT_GREY, WATERMARK_GREY, LineCommand, TextCommand
from .line_breaker import TextMeasure

logger = logging.getLogger(__name__)


class PaginationPostProcessor:
    """Stamps running header, footer, page numbers and watermark; fills the TOC."""

    def __init__(
        self,
        config: LayoutConfig,
        settings: ReportSettings,
        measure: TextMeasure,
        running_title: str = "",
        generated_at: Optional[datetime] = None,
    ) -> None:
        self.config = config
        self.settings = settings
        self.measure = measure
        self.running_title = running_title
        self.generated_at = generated_at or datetime.now()

    def process(self, layout: DocumentLayout) -> DocumentLayout:
        """
        Apply all page stamps exactly once.

        Args:
            layout: Finished layout from the content pass

        Returns:
            The same layout, marked as finalized

        Raises:
            RuntimeError: If the layout was already processed
        """
        if layout.finalized:
            raise RuntimeError("Layout was already post-processed")

        total = layout.page_count
        for expected, page in enumerate(layout.pages):
            if page.index != expected:
                raise RuntimeError(f"Page indices are not contiguous: found {page.index} at position {expected}")

        # An empty string on the layout disables the watermark; None falls back to settings.
        watermark = layout.watermark_text if layout.watermark_text is not None else self.settings.watermark_text

        self._fill_toc(layout)
        stamped = 0
        for page in layout.pages:
            if page.is_cover:
                continue
            self._stamp_running_header(page)
            self._stamp_footer(page, total)
            if watermark:
                self._stamp_watermark(page, watermark)
            stamped += 1

        layout.finalized = True
        logger.info("Stamped %d of %d pages (watermark=%r)", stamped, total, watermark)
        return layout

    # ------------------------------------------------------------------
    # Stamps
    # ------------------------------------------------------------------
    def _stamp_running_header(self, page: Page) -> None:
        config = self.config
        size = config.running_header_size
        baseline = config.margin - 10
        left = config.margin
        right = config.page_width - config.margin
        page.add(TextCommand(x=left, y=baseline, text=self.settings.organization_name, font=config.body_font,
                             size=size, color=GREY))
        if self.running_title:
            title = self._fit(self.running_title, config.body_font, size, config.content_width * 0.6)
            page.add(TextCommand(x=right, y=baseline, text=title, font=config.body_font, size=size,
                                 color=GREY, align="right"))
        page.add(LineCommand(x1=left, y1=baseline + 4, x2=right, y2=baseline + 4, width=0.4, color=LIGHT_GREY))

    def _stamp_footer(self, page: Page, total: int) -> None:
        config = self.config
        size = config.footer_font_size
        top = config.content_bottom
        left = config.margin
        right = config.page_width - config.margin
        center = config.page_width / 2

        page.add(LineCommand(x1=left, y1=top + 8, x2=right, y2=top + 8, width=0.5, color=LIGHT_GREY))
        page.add(TextCommand(x=center, y=top + 20, text=page_label(page.index, total), font=config.body_font,
                             size=size + 1, color=GREY, align="center"))
        timestamp = f"Generated: {self.generated_at.strftime('%m/%d/%Y %I:%M %p')}"
        notice_width = config.content_width - self.measure(timestamp, config.body_font, size) - 12
        page.add(TextCommand(x=left, y=top + 32, text=self._fit(self.settings.footer_notice, config.body_font,
                                                                 size, notice_width),
                             font=config.body_font, size=size, color=GREY))
        page.add(TextCommand(x=right, y=top + 32, text=timestamp, font=config.body_font, size=size,
                             color=GREY, align="right"))
        page.add(TextCommand(x=center, y=top + 42, text=self.settings.system_credit, font=config.body_font,
                             size=size, color=GREY, align="center"))

    def _stamp_watermark(self, page: Page, text: str) -> None:
        config = self.config
        page.add(
            TextCommand(
                x=config.page_width / 2,
                y=config.page_height / 2,
                text=text,
                font=config.bold_font,
                size=config.watermark_size,
                color=WATERMARK_GREY,
                align="center",
                angle=config.watermark_angle,
            )
        )

    # ------------------------------------------------------------------
    # Table of contents
    # ------------------------------------------------------------------
    def _fill_toc(self, layout: DocumentLayout) -> None:
        reservation = layout.toc
        if reservation is None:
            return

        entries = [entry for entry in layout.toc_entries if entry.level <= reservation.max_level]
        capacity = reservation.entries_per_page * len(reservation.page_indices)
        if len(entries) > capacity:
            logger.warning("TOC has room for %d entries, dropping %d", capacity, len(entries) - capacity)
            entries = entries[:capacity]

        per_page = reservation.entries_per_page
        for position, page_index in enumerate(reservation.page_indices):
            page = layout.pages[page_index]
            chunk = entries[position * per_page:(position + 1) * per_page]
            self._draw_toc_page(page, reservation.title if position == 0 else f"{reservation.title} (continued)",
                                chunk)

    def _draw_toc_page(self, page: Page, title: str, entries: List[TocEntry]) -> None:
        config = self.config
        title_size = config.heading_size(1)
        y = config.content_top + title_size
        page.add(TextCommand(x=config.margin, y=y, text=title, font=config.bold_font, size=title_size))
        y += config.line_height(title_size) - title_size + config.heading_space_after + 4.0

        size = config.toc_font_size
        step = config.line_height(size) + 4.0
        right = config.page_width - config.margin
        for entry in entries:
            y += step
            indent = 14.0 * max(entry.level - 1, 0)
            number = str(entry.page_index + 1)
            number_width = self.measure(number, config.body_font, size)
            font = config.bold_font if entry.level == 1 else config.body_font
            available = config.content_width - indent - number_width - 12
            label = self._fit(entry.title, font, size, available)
            label_end = config.margin + indent + self.measure(label, font, size)
            page.add(TextCommand(x=config.margin + indent, y=y, text=label, font=font, size=size))
            leader = self._leader(right - number_width - 4 - label_end - 4, size)
            if leader:
                page.add(TextCommand(x=right - number_width - 4, y=y, text=leader, font=config.body_font,
                                     size=size, color=GREY, align="right"))
            page.add(TextCommand(x=right, y=y, text=number, font=config.body_font, size=size, color=BLACK,
                                 align="right"))

    def _leader(self, width: float, size: float) -> str:
        dot = self.measure(".", self.config.body_font, size)
        if dot <= 0 or width <= dot:
            return ""
        return "." * int(width // dot)

    def _fit(self, text: str, font: str, size: float, max_width: float) -> str:
        """Shorten ``text`` with an ellipsis until it measures within ``max_width``."""
        if self.measure(text, font, size) <= max_width:
            return text
        shortened = text
        while shortened and self.measure(shortened + "...", font, size) > max_width:
            shortened = shortened[:-1]
        return shortened.rstrip() + "..." if shortened else ""


def page_label(index: int, total: int) -> str:
    return f"Page {index + 1} of {total}"
