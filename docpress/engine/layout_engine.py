"""
LayoutEngine - single forward pass from blocks to finished pages.

Every block goes through ``place()``, which is the only place a page break is
decided: the block's height is computed first, a new page is opened when it
does not fit in the space left above the footer reserve, and then its draw
commands are recorded at the cursor. Headings register table-of-contents
entries against the page that is live at that moment.

One engine instance owns one ``Cursor`` and one page list; create a new
engine for every document.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Iterable, List, Optional

from ..config import LayoutConfig
from ..exceptions import LayoutError
from .blocks import (
    Block,
    CoverPage,
    DataTable,
    Heading,
    Image,
    KeyValueTable,
    PageBreak,
    Paragraph,
    Spacer,
    TableOfContents,
    Watermark,
    count_toc_headings,
)
from .document_layout import Cursor, DocumentLayout, Page, TocEntry, TocReservation
from .draw_commands import BLACK, WHITE, ImageCommand, LineCommand, RectCommand, TextCommand
from .geometry import Rect
from .line_breaker import LineBreaker, TextMeasure, WrappedLine
from .table_layout import TableLayout

logger = logging.getLogger(__name__)

COVER_FILL = (0.231, 0.510, 0.965)


@dataclass(slots=True)
class _Plan:
    """Height a block needs and how to draw it once room is guaranteed."""

    required_height: float
    emit: Callable[[], None]
    may_span_pages: bool = False


class LayoutEngine:
    """Places blocks onto fixed-size pages."""

    def __init__(self, config: Optional[LayoutConfig] = None, measure: Optional[TextMeasure] = None) -> None:
        if measure is None:
            raise ValueError("LayoutEngine needs the PageSink measure function")
        self.config = config or LayoutConfig()
        self.measure = measure
        self.line_breaker = LineBreaker(measure)
        self.tables = TableLayout(self.config, self.line_breaker)

        self.layout = DocumentLayout(pages=[Page(index=0)])
        self.cursor = Cursor(
            page_index=0,
            y=self.config.content_top,
            page_width=self.config.page_width,
            page_height=self.config.page_height,
            margin=self.config.margin,
            footer_reserve=self.config.footer_reserve,
        )
        self._finished = False

    # ----------------------------------------------------------------------
    # Public API
    # ----------------------------------------------------------------------

    @property
    def current_page(self) -> Page:
        return self.layout.pages[-1]

    def layout_blocks(self, blocks: Iterable[Block]) -> DocumentLayout:
        """Place every block in order and return the finished layout."""
        blocks = list(blocks)
        for position, block in enumerate(blocks):
            if isinstance(block, TableOfContents) and block.expected_entries is None:
                block = replace(
                    block, expected_entries=count_toc_headings(blocks[position + 1:], block.max_level)
                )
            following = blocks[position + 1] if position + 1 < len(blocks) else None
            self.place(block, following=following)
        return self.finish()

    def place(self, block: Block, following: Optional[Block] = None) -> None:
        """
        Place one block, breaking the page first when it does not fit.

        Args:
            block: Block to place
            following: The block that will be placed next, if known. A heading
                reserves room for its start so the two stay on one page.

        Raises:
            ValueError: If a ``TableOfContents`` has no ``expected_entries``
        """
        if self._finished:
            raise RuntimeError("LayoutEngine.finish() was already called")

        if isinstance(block, PageBreak):
            if not self._page_is_empty():
                self._open_page()
            return
        if isinstance(block, Watermark):
            self.layout.watermark_text = block.text.strip()
            return
        if isinstance(block, CoverPage):
            self._place_cover(block)
            return
        if isinstance(block, TableOfContents):
            self._reserve_toc(block)
            return
        if isinstance(block, Spacer):
            # Spacers never force a break; they collapse at the page bottom
            self.cursor.advance(min(max(block.height, 0.0), self.cursor.remaining))
            return

        plan = self._plan(block, following)
        continued = isinstance(block, Paragraph) and bool(block.continuation)
        if continued and not self.cursor.fits(plan.required_height):
            # The label line goes above the paragraph on the new page
            plan = replace(plan, required_height=plan.required_height + self.config.line_height())
        page_before = self.cursor.page_index
        self._ensure_room(block, plan)
        if continued and self.cursor.page_index != page_before:
            self._emit_continuation(block.continuation)
        plan.emit()

    def finish(self) -> DocumentLayout:
        """Close the content pass; trailing empty pages are dropped."""
        if not self._finished:
            pages = self.layout.pages
            while len(pages) > 1 and self._is_blank(pages[-1]):
                pages.pop()
            self._finished = True
            logger.info(
                "Content pass finished: %d pages, %d TOC entries, %d layout errors",
                len(pages),
                len(self.layout.toc_entries),
                len(self.layout.layout_errors),
            )
        return self.layout

    # ----------------------------------------------------------------------
    # Page management
    # ----------------------------------------------------------------------

    def _open_page(self) -> Page:
        page = Page(index=len(self.layout.pages))
        self.layout.pages.append(page)
        self.cursor.move_to_page(page.index)
        return page

    def _page_is_empty(self) -> bool:
        page = self.current_page
        return not page.is_cover and not page.is_toc and self.cursor.at_page_top

    @staticmethod
    def _is_blank(page: Page) -> bool:
        return not page.commands and not page.is_cover and not page.is_toc

    def _ensure_room(self, block: Block, plan: _Plan) -> None:
        if self.cursor.fits(plan.required_height):
            return
        if not self._page_is_empty():
            self._open_page()
        if plan.required_height > self.cursor.content_height and not plan.may_span_pages:
            self._report_overflow(
                LayoutError(
                    f"{type(block).__name__} does not fit on an empty page",
                    details=(
                        f"needs {plan.required_height:.1f}pt, page has {self.cursor.content_height:.1f}pt; "
                        "content clipped"
                    ),
                    block_kind=type(block).__name__,
                    required_height=plan.required_height,
                    available_height=self.cursor.content_height,
                )
            )

    def _report_overflow(self, error: LayoutError) -> None:
        self.layout.layout_errors.append(error)
        logger.warning("Layout overflow on page %d: %s", self.cursor.page_index, error)

    # ----------------------------------------------------------------------
    # Planning per block type
    # ----------------------------------------------------------------------

    def _plan(self, block: Block, following: Optional[Block] = None) -> _Plan:
        if isinstance(block, Heading):
            return self._plan_heading(block, following)
        if isinstance(block, Paragraph):
            return self._plan_paragraph(block)
        if isinstance(block, KeyValueTable):
            return self._plan_key_value(block)
        if isinstance(block, DataTable):
            return self._plan_data_table(block)
        if isinstance(block, Image):
            return self._plan_image(block)
        raise TypeError(f"Unsupported block type: {type(block).__name__}")

    def _plan_heading(self, block: Heading, following: Optional[Block] = None) -> _Plan:
        config = self.config
        size = config.heading_size(block.level)
        line_height = config.line_height(size)
        lines = self.line_breaker.break_text(block.text, self.cursor.content_width, config.bold_font, size)
        text_height = len(lines) * line_height
        rule_height = 4.0 if block.level == 1 else 0.0
        body = config.heading_space_before + text_height + rule_height + config.heading_space_after
        keep_with_next = self._lead_height(following, self.cursor.content_height - body)

        def emit() -> None:
            if not self.cursor.at_page_top:
                self.cursor.advance(min(config.heading_space_before, self.cursor.remaining))
            self.layout.toc_entries.append(
                TocEntry(title=block.text, page_index=self.cursor.page_index, level=block.level)
            )
            self._emit_lines(lines, config.bold_font, size, line_height)
            if rule_height and self.cursor.fits(rule_height):
                rule_y = self.cursor.y + 1.5
                self.current_page.add(
                    LineCommand(
                        x1=self.cursor.margin,
                        y1=rule_y,
                        x2=self.cursor.margin + self.cursor.content_width,
                        y2=rule_y,
                        width=0.6,
                    )
                )
                self.cursor.advance(rule_height)
            self.cursor.advance(min(config.heading_space_after, self.cursor.remaining))

        return _Plan(required_height=body + keep_with_next, emit=emit)

    def _lead_height(self, following: Optional[Block], available: float) -> float:
        """
        Room a heading keeps for the start of the next block.

        At least two table lines. A follower that would not fit under the
        heading even on an empty page gets its own page anyway, so only the
        minimum is kept for it.
        """
        config = self.config
        minimum = 2 * config.line_height(config.table_font_size) + 2 * config.cell_padding
        if isinstance(following, (Heading, Paragraph, KeyValueTable, DataTable, Image)):
            # A DataTable plan only asks for its header and first row
            needed = self._plan(following).required_height
            if minimum < needed <= available:
                return needed
        return minimum

    def _paragraph_font(self, style: str) -> tuple[str, float, str]:
        config = self.config
        if style == "bold":
            return config.bold_font, config.body_size, "left"
        if style == "italic":
            return config.italic_font, config.body_size, "left"
        if style == "small":
            return config.body_font, config.body_size - 1.5, "left"
        if style == "center":
            return config.body_font, config.body_size, "center"
        return config.body_font, config.body_size, "left"

    def _plan_paragraph(self, block: Paragraph) -> _Plan:
        font, size, align = self._paragraph_font(block.style)
        line_height = self.config.line_height(size)
        lines = self.line_breaker.break_text(block.text, self.cursor.content_width, font, size)
        spacing = self.config.paragraph_spacing

        def emit() -> None:
            self._emit_lines(lines, font, size, line_height, align=align)
            self.cursor.advance(min(spacing, self.cursor.remaining))

        return _Plan(required_height=len(lines) * line_height + spacing, emit=emit)

    def _plan_key_value(self, block: KeyValueTable) -> _Plan:
        measurement = self.tables.measure_key_value(block, self.cursor.content_width)
        spacing = self.config.table_space_after

        def emit() -> None:
            self.tables.place_rows(measurement, self.cursor, self.current_page)
            self.cursor.advance(min(spacing, self.cursor.remaining))

        return _Plan(required_height=measurement.total_height + spacing, emit=emit)

    def _plan_data_table(self, block: DataTable) -> _Plan:
        measurement = self.tables.measure_data_table(block, self.cursor.content_width)
        spacing = self.config.table_space_after

        def emit() -> None:
            self.tables.place_data_table(
                measurement,
                self.cursor,
                self.current_page,
                open_page=self._open_page,
                on_overflow=self._report_overflow,
            )
            self.cursor.advance(min(spacing, self.cursor.remaining))

        # Only the header and first row must fit; later rows paginate themselves
        return _Plan(required_height=measurement.start_height, emit=emit, may_span_pages=True)

    def _plan_image(self, block: Image) -> _Plan:
        width, height = float(block.width), float(block.height)
        max_width = self.cursor.content_width
        if width > max_width and width > 0:
            height = height * max_width / width
            width = max_width
        spacing = self.config.paragraph_spacing

        def emit() -> None:
            cursor = self.cursor
            x = cursor.margin + (cursor.content_width - width) / 2
            clip = None
            if not cursor.fits(height):
                clip = Rect(cursor.margin, cursor.y, cursor.content_width, cursor.remaining)
            self.current_page.add(
                ImageCommand(x=x, y=cursor.y, width=width, height=height, data=block.data, clip=clip)
            )
            cursor.advance(min(height, cursor.remaining))
            cursor.advance(min(spacing, cursor.remaining))

        return _Plan(required_height=height, emit=emit)

    # ----------------------------------------------------------------------
    # Emission helpers
    # ----------------------------------------------------------------------

    def _emit_lines(
        self,
        lines: List[WrappedLine],
        font: str,
        size: float,
        line_height: float,
        align: str = "left",
    ) -> None:
        cursor = self.cursor
        for index, line in enumerate(lines):
            if not cursor.fits(line_height):
                logger.debug("Clipping %d lines at page %d", len(lines) - index, cursor.page_index)
                cursor.advance(cursor.remaining)
                return
            if line.text:
                x = cursor.margin + cursor.content_width / 2 if align == "center" else cursor.margin
                self.current_page.add(
                    TextCommand(x=x, y=cursor.y + size, text=line.text, font=font, size=size, align=align)
                )
            cursor.advance(line_height)

    def _emit_continuation(self, label: str) -> None:
        config = self.config
        line_height = config.line_height()
        lines = self.line_breaker.break_text(label, self.cursor.content_width, config.bold_font, config.body_size)
        self._emit_lines(lines, config.bold_font, config.body_size, line_height)

    def _place_cover(self, block: CoverPage) -> None:
        if not self._page_is_empty():
            self._open_page()
        page = self.current_page
        page.is_cover = True
        config = self.config
        center = config.page_width / 2

        page.add(RectCommand(x=0, y=0, width=config.page_width, height=config.page_height, fill=COVER_FILL))
        y = config.page_height * 0.3
        if block.logo:
            logo_size = 72.0
            page.add(ImageCommand(x=center - logo_size / 2, y=y - logo_size - 24, width=logo_size,
                                  height=logo_size, data=block.logo))
        title_lines = self.line_breaker.break_text(block.title, config.content_width, config.bold_font, 32)
        for line in title_lines:
            y += 32 * config.line_spacing
            page.add(TextCommand(x=center, y=y, text=line.text, font=config.bold_font, size=32,
                                 color=WHITE, align="center"))
        if block.subtitle:
            for line in self.line_breaker.break_text(block.subtitle, config.content_width, config.body_font, 24):
                y += 24 * config.line_spacing
                page.add(TextCommand(x=center, y=y, text=line.text, font=config.body_font, size=24,
                                     color=WHITE, align="center"))
        y += 16
        for text in block.lines:
            for line in self.line_breaker.break_text(text, config.content_width, config.body_font, 12):
                y += 12 * config.line_spacing
                page.add(TextCommand(x=center, y=y, text=line.text, font=config.body_font, size=12,
                                     color=WHITE, align="center"))

        self.cursor.advance(self.cursor.remaining)
        self._open_page()

    def _toc_entry_height(self) -> float:
        return self.config.line_height(self.config.toc_font_size) + 4.0

    def _toc_title_height(self) -> float:
        return self.config.line_height(self.config.heading_size(1)) + self.config.heading_space_after + 4.0

    def _reserve_toc(self, block: TableOfContents) -> None:
        if self.layout.toc is not None:
            logger.warning("Ignoring second table of contents %r", block.title)
            return
        if block.expected_entries is None:
            raise ValueError("TableOfContents needs expected_entries to size its reserved pages")
        if not self._page_is_empty():
            self._open_page()

        usable = self.cursor.content_height - self._toc_title_height()
        per_page = max(1, int(usable // self._toc_entry_height()))
        expected = max(0, block.expected_entries)
        page_count = max(1, math.ceil(expected / per_page))

        reservation = TocReservation(
            title=block.title, page_indices=[], max_level=block.max_level, entries_per_page=per_page
        )
        for position in range(page_count):
            if position > 0:
                self._open_page()
            self.current_page.is_toc = True
            reservation.page_indices.append(self.current_page.index)
        self.layout.toc = reservation
        logger.debug("Reserved %d TOC page(s) for %d headings", page_count, expected)

        self.cursor.advance(self.cursor.remaining)
        self._open_page()


def layout_document(blocks: Iterable[Block], measure: TextMeasure, config: Optional[LayoutConfig] = None) -> DocumentLayout:
    """Convenience wrapper: fresh engine, one pass, finished layout."""
    return LayoutEngine(config=config, measure=measure).layout_blocks(blocks)
