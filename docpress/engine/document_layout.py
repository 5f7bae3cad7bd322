"""
Layout state produced by one generation call.

``Cursor`` is the moving position of the content pass, ``Page`` the
append-only command list of one finished page, ``DocumentLayout`` the
result handed from the engine to the post-processor and the assembler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..exceptions import LayoutError
from .draw_commands import DrawCommand


@dataclass(slots=True)
class Cursor:
    """Vertical layout position on the current page (top-down points)."""

    page_index: int
    y: float
    page_width: float
    page_height: float
    margin: float
    footer_reserve: float

    @property
    def content_top(self) -> float:
        return self.margin

    @property
    def content_bottom(self) -> float:
        return self.page_height - self.margin - self.footer_reserve

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def content_height(self) -> float:
        return self.content_bottom - self.content_top

    @property
    def remaining(self) -> float:
        return max(0.0, self.content_bottom - self.y)

    @property
    def at_page_top(self) -> bool:
        return self.y <= self.content_top

    def fits(self, height: float) -> bool:
        return self.y + height <= self.content_bottom

    def advance(self, height: float) -> None:
        if height < 0:
            raise ValueError(f"Cursor cannot move backwards (height={height})")
        self.y = min(self.y + height, self.content_bottom)

    def move_to_page(self, page_index: int) -> None:
        if page_index <= self.page_index:
            raise ValueError(f"Cursor cannot return to page {page_index} from page {self.page_index}")
        self.page_index = page_index
        self.y = self.content_top


@dataclass(slots=True)
class Page:
    index: int
    commands: List[DrawCommand] = field(default_factory=list)
    is_cover: bool = False
    is_toc: bool = False

    def add(self, command: DrawCommand) -> None:
        self.commands.append(command)


@dataclass(slots=True, frozen=True)
class TocEntry:
    title: str
    page_index: int
    level: int = 1


@dataclass(slots=True)
class TocReservation:
    """Pages set aside for the table of contents, filled after layout."""

    title: str
    page_indices: List[int]
    max_level: int
    entries_per_page: int


@dataclass
class DocumentLayout:
    """Everything the content pass produced."""

    pages: List[Page] = field(default_factory=list)
    toc_entries: List[TocEntry] = field(default_factory=list)
    toc: Optional[TocReservation] = None
    watermark_text: Optional[str] = None
    layout_errors: List[LayoutError] = field(default_factory=list)
    finalized: bool = False

    @property
    def page_count(self) -> int:
        return len(self.pages)
