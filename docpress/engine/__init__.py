"""
Layout engine: blocks in, finished pages out.
"""

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
    data_table,
    key_value_table,
    paragraph_blocks,
)
from .document_layout import Cursor, DocumentLayout, Page, TocEntry, TocReservation
from .draw_commands import DrawCommand, ImageCommand, LineCommand, RectCommand, TextCommand
from .layout_engine import LayoutEngine, layout_document
from .line_breaker import LineBreaker, TextMeasure, WrappedLine
from .pagination import PaginationPostProcessor, page_label
from .table_layout import TableLayout, is_numeric_text

__all__ = [
    "Block",
    "CoverPage",
    "Cursor",
    "DataTable",
    "DocumentLayout",
    "DrawCommand",
    "Heading",
    "Image",
    "ImageCommand",
    "KeyValueTable",
    "LayoutEngine",
    "LineBreaker",
    "LineCommand",
    "Page",
    "PageBreak",
    "PaginationPostProcessor",
    "Paragraph",
    "RectCommand",
    "Spacer",
    "TableLayout",
    "TableOfContents",
    "TextCommand",
    "TextMeasure",
    "TocEntry",
    "TocReservation",
    "Watermark",
    "WrappedLine",
    "count_toc_headings",
    "data_table",
    "is_numeric_text",
    "key_value_table",
    "layout_document",
    "page_label",
    "paragraph_blocks",
]
