"""
Table measurement and row pagination.

Both ``DataTable`` and ``KeyValueTable`` blocks are measured here: column
widths are split from the available width, every cell is wrapped with the
shared ``LineBreaker`` and a row is as tall as its tallest cell. Data tables
are paginated row by row, re-emitting the header row at the top of every
continuation page; a row's content never straddles two pages.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ..config import LayoutConfig
from ..exceptions import LayoutError
from .blocks import DataTable, KeyValueTable
from .document_layout import Cursor, Page
from .draw_commands import BLACK, LIGHT_GREY, WHITE, Color, RectCommand, TextCommand
from .line_breaker import LineBreaker, WrappedLine

logger = logging.getLogger(__name__)

_NUMERIC_RE = re.compile(r"^[-+(]?\s*(?:PHP|₱|\$)?\s*[-+]?\d[\d,]*(?:\.\d+)?\s*%?\)?$")

OpenPage = Callable[[], Page]
OverflowHandler = Callable[[LayoutError], None]


def is_numeric_text(text: str) -> bool:
    """True for plain numbers, amounts and percentages ("1,250.00", "PHP 5.00", "40%")."""
    return bool(text) and bool(_NUMERIC_RE.match(text.strip()))


@dataclass(slots=True)
class CellLayout:
    lines: List[WrappedLine]
    font: str
    align: str = "left"


@dataclass(slots=True)
class RowLayout:
    cells: List[CellLayout]
    height: float
    is_header: bool = False


@dataclass(slots=True)
class TableMeasurement:
    column_widths: List[float]
    rows: List[RowLayout]
    header: Optional[RowLayout] = None
    label_fill: bool = False

    @property
    def header_height(self) -> float:
        return self.header.height if self.header else 0.0

    @property
    def total_height(self) -> float:
        return self.header_height + sum(row.height for row in self.rows)

    @property
    def start_height(self) -> float:
        """Height that must fit before the table may start on a page."""
        first_row = self.rows[0].height if self.rows else 0.0
        return self.header_height + first_row


@dataclass(slots=True)
class TablePlacement:
    """What ``place_data_table`` did, for logging and tests."""

    first_page: int
    last_page: int
    header_pages: List[int] = field(default_factory=list)
    clipped_rows: List[int] = field(default_factory=list)


class TableLayout:
    """Measures and draws tables against the current cursor."""

    def __init__(self, config: LayoutConfig, line_breaker: LineBreaker) -> None:
        self.config = config
        self.line_breaker = line_breaker

    # ------------------------------------------------------------------
    # Measurement
    # ------------------------------------------------------------------
    @staticmethod
    def column_widths(count: int, available: float, hints: Optional[Sequence[float]] = None) -> List[float]:
        """Even split, or proportional to ``hints`` when one positive hint per column is given."""
        if count <= 0:
            return []
        if hints and len(hints) == count and all(h > 0 for h in hints):
            total = float(sum(hints))
            return [available * h / total for h in hints]
        if hints:
            logger.debug("Ignoring column hints %r for %d columns", hints, count)
        return [available / count] * count

    def measure_row(
        self,
        cells: Sequence[str],
        widths: Sequence[float],
        *,
        numeric_columns: Sequence[int] = (),
        is_header: bool = False,
        bold_columns: Sequence[int] = (),
    ) -> RowLayout:
        size = self.config.table_font_size
        padding = self.config.cell_padding
        line_height = self.config.line_height(size)

        laid_out: List[CellLayout] = []
        for index, text in enumerate(cells):
            bold = is_header or index in bold_columns
            font = self.config.bold_font if bold else self.config.body_font
            inner_width = max(widths[index] - 2 * padding, 1.0)
            lines = self.line_breaker.break_text(text, inner_width, font, size)
            if index in numeric_columns or (not is_header and is_numeric_text(text)):
                align = "right"
            else:
                align = "left"
            laid_out.append(CellLayout(lines=lines, font=font, align=align))

        max_lines = max((len(cell.lines) for cell in laid_out), default=1)
        return RowLayout(cells=laid_out, height=max_lines * line_height + 2 * padding, is_header=is_header)

    def measure_data_table(self, table: DataTable, width: float) -> TableMeasurement:
        widths = self.column_widths(len(table.columns), width, table.column_hints)
        header = self.measure_row(
            table.columns, widths, numeric_columns=table.numeric_columns, is_header=True
        )
        rows = [self.measure_row(row, widths, numeric_columns=table.numeric_columns) for row in table.rows]
        return TableMeasurement(column_widths=widths, rows=rows, header=header)

    def measure_key_value(self, table: KeyValueTable, width: float) -> TableMeasurement:
        ratio = min(max(table.label_ratio, 0.1), 0.9)
        widths = [width * ratio, width * (1 - ratio)]
        rows = [self.measure_row((label, value), widths, bold_columns=(0,)) for label, value in table.rows]
        return TableMeasurement(column_widths=widths, rows=rows, label_fill=True)

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------
    def place_data_table(
        self,
        measurement: TableMeasurement,
        cursor: Cursor,
        page: Page,
        open_page: OpenPage,
        on_overflow: OverflowHandler,
    ) -> tuple[Page, TablePlacement]:
        """
        Draw a data table starting at the cursor, breaking pages between rows.

        Args:
            measurement: Result of ``measure_data_table``
            cursor: Live cursor; advanced past every drawn row
            page: Page the cursor currently points at
            open_page: Closes the current page and returns a fresh one
            on_overflow: Receives a LayoutError for rows taller than a page

        Returns:
            The page the table ended on and a placement summary
        """
        placement = TablePlacement(first_page=page.index, last_page=page.index)
        header_height = measurement.header_height

        if measurement.header is not None:
            self._draw_row(page, measurement, measurement.header, cursor, stripe=False)
            placement.header_pages.append(page.index)

        fresh = True
        for row_index, row in enumerate(measurement.rows):
            oversized = header_height + row.height > cursor.content_height
            if not cursor.fits(row.height) and not (oversized and fresh):
                page = open_page()
                if measurement.header is not None:
                    self._draw_row(page, measurement, measurement.header, cursor, stripe=False)
                    placement.header_pages.append(page.index)
                fresh = True

            if not cursor.fits(row.height):
                on_overflow(
                    LayoutError(
                        "Table row taller than a page",
                        details=f"row {row_index} needs {row.height:.1f}pt, page has {cursor.remaining:.1f}pt",
                        block_kind="DataTable",
                        required_height=row.height,
                        available_height=cursor.remaining,
                    )
                )
                placement.clipped_rows.append(row_index)

            self._draw_row(page, measurement, row, cursor, stripe=row_index % 2 == 1)
            fresh = False

        placement.last_page = page.index
        logger.debug(
            "Placed table with %d rows on pages %d-%d (header repeated %d times)",
            len(measurement.rows),
            placement.first_page,
            placement.last_page,
            len(placement.header_pages),
        )
        return page, placement

    def place_rows(self, measurement: TableMeasurement, cursor: Cursor, page: Page) -> None:
        """Draw all rows of a single-page table; rows past the page bottom are clipped."""
        for row_index, row in enumerate(measurement.rows):
            if cursor.remaining <= 0:
                logger.debug("Dropping %d clipped rows", len(measurement.rows) - row_index)
                break
            self._draw_row(page, measurement, row, cursor, stripe=False)

    def _draw_row(
        self,
        page: Page,
        measurement: TableMeasurement,
        row: RowLayout,
        cursor: Cursor,
        *,
        stripe: bool,
    ) -> None:
        size = self.config.table_font_size
        padding = self.config.cell_padding
        line_height = self.config.line_height(size)

        top = cursor.y
        height = min(row.height, cursor.remaining)
        clip_bottom = top + height
        x = cursor.margin

        for column, cell in enumerate(row.cells):
            width = measurement.column_widths[column]
            fill: Optional[Color] = None
            text_color = BLACK
            if row.is_header:
                fill = self.config.header_fill
                text_color = WHITE
            elif measurement.label_fill and column == 0:
                fill = self.config.stripe_fill
            elif stripe:
                fill = self.config.stripe_fill
            page.add(RectCommand(x=x, y=top, width=width, height=height, fill=fill, stroke=LIGHT_GREY))

            for line_index, line in enumerate(cell.lines):
                baseline = top + padding + line_index * line_height + size
                if baseline > clip_bottom:
                    break
                if not line.text:
                    continue
                anchor = x + width - padding if cell.align == "right" else x + padding
                page.add(
                    TextCommand(
                        x=anchor,
                        y=baseline,
                        text=line.text,
                        font=cell.font,
                        size=size,
                        color=text_color,
                        align=cell.align,
                    )
                )
            x += width

        cursor.advance(height)
