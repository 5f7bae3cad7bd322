"""
Content blocks consumed by the layout engine.

A report is a flat, ordered sequence of these values. They carry text and
structure only; every width and height is computed later by the engine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union


@dataclass(slots=True, frozen=True)
class Heading:
    level: int
    text: str


@dataclass(slots=True, frozen=True)
class Paragraph:
    """
    Wrapped body text. ``style`` is one of "body", "bold", "italic", "small", "center".

    ``continuation`` is a bold label drawn above the paragraph when it has to
    move to a new page, e.g. "Description (continued):".
    """

    text: str
    style: str = "body"
    continuation: str = ""


@dataclass(slots=True, frozen=True)
class KeyValueTable:
    rows: Tuple[Tuple[str, str], ...]
    label_ratio: float = 0.3


@dataclass(slots=True, frozen=True)
class DataTable:
    """
    Tabular data with a header row.

    ``column_hints`` are relative widths (any scale); ``numeric_columns``
    forces right alignment for the given column indexes, otherwise numeric
    cells are detected from their text.
    """

    columns: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    column_hints: Optional[Tuple[float, ...]] = None
    numeric_columns: Tuple[int, ...] = ()


@dataclass(slots=True, frozen=True)
class Spacer:
    height: float


@dataclass(slots=True, frozen=True)
class PageBreak:
    pass


@dataclass(slots=True, frozen=True)
class Watermark:
    text: str


@dataclass(slots=True, frozen=True)
class Image:
    """Raster image drawn at ``width`` x ``height`` points, centered horizontally."""

    data: bytes = field(repr=False)
    width: float
    height: float


@dataclass(slots=True, frozen=True)
class CoverPage:
    """Full-page cover; always rendered alone on the first page it starts."""

    title: str
    subtitle: str = ""
    lines: Tuple[str, ...] = ()
    logo: Optional[bytes] = field(default=None, repr=False)


@dataclass(slots=True, frozen=True)
class TableOfContents:
    """
    Reserves page(s) that are filled with the captured headings after layout.

    ``expected_entries`` sizes the reservation. ``LayoutEngine.layout_blocks``
    counts the headings that follow when it is left as None.
    """

    title: str = "Table of Contents"
    max_level: int = 2
    expected_entries: Optional[int] = None


Block = Union[
    Heading,
    Paragraph,
    KeyValueTable,
    DataTable,
    Spacer,
    PageBreak,
    Watermark,
    Image,
    CoverPage,
    TableOfContents,
]


def key_value_table(rows: Sequence[Tuple[str, str]], label_ratio: float = 0.3) -> KeyValueTable:
    return KeyValueTable(rows=tuple((str(k), str(v)) for k, v in rows), label_ratio=label_ratio)


def data_table(
    columns: Sequence[str],
    rows: Sequence[Sequence[object]],
    column_hints: Optional[Sequence[float]] = None,
    numeric_columns: Sequence[int] = (),
) -> DataTable:
    """Build a ``DataTable`` from loose sequences, stringifying every cell."""
    width = len(columns)
    normalized = []
    for row in rows:
        cells = tuple("" if cell is None else str(cell) for cell in row)
        if len(cells) < width:
            cells = cells + ("",) * (width - len(cells))
        normalized.append(cells[:width])
    return DataTable(
        columns=tuple(str(c) for c in columns),
        rows=tuple(normalized),
        column_hints=tuple(float(h) for h in column_hints) if column_hints else None,
        numeric_columns=tuple(numeric_columns),
    )


PARAGRAPH_CHUNK_CHARS = 600
_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def _bounded_parts(sentence: str, max_chars: int) -> List[str]:
    """Split ``sentence`` at spaces so no part exceeds ``max_chars``; unbroken runs are cut."""
    if len(sentence) <= max_chars:
        return [sentence]
    parts: List[str] = []
    current = ""
    for word in sentence.split():
        while len(word) > max_chars:
            if current:
                parts.append(current)
                current = ""
            parts.append(word[:max_chars])
            word = word[max_chars:]
        if current and len(current) + 1 + len(word) > max_chars:
            parts.append(current)
            current = word
        else:
            current = f"{current} {word}" if current else word
    if current:
        parts.append(current)
    return parts


def paragraph_blocks(
    text: str,
    style: str = "body",
    continuation: str = "",
    max_chars: int = PARAGRAPH_CHUNK_CHARS,
) -> List[Paragraph]:
    """
    Split free text into paragraphs short enough to always fit on one page.

    Hard line breaks start a new paragraph; long lines are grouped by
    sentence into pieces of at most ``max_chars`` characters. Every piece
    after the first carries ``continuation`` so a page break inside the text
    is labelled.

    Args:
        text: Free text, possibly several pages long
        style: Paragraph style for every piece
        continuation: Label shown when a piece starts a new page
        max_chars: Upper bound on characters per piece

    Returns:
        Paragraph blocks in reading order; empty for blank text
    """
    pieces: List[str] = []
    for line in (text or "").splitlines():
        line = line.strip()
        if not line:
            continue
        current = ""
        for sentence in _SENTENCE_END.split(line):
            for part in _bounded_parts(sentence, max_chars):
                if current and len(current) + 1 + len(part) > max_chars:
                    pieces.append(current)
                    current = part
                else:
                    current = f"{current} {part}" if current else part
        if current:
            pieces.append(current)
    return [
        Paragraph(piece, style=style, continuation=continuation if index else "")
        for index, piece in enumerate(pieces)
    ]


def count_toc_headings(blocks: Iterable[Block], max_level: int = 2) -> int:
    """Number of headings a table of contents limited to ``max_level`` will list."""
    return sum(1 for block in blocks if isinstance(block, Heading) and block.level <= max_level)
