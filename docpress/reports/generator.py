"""
Report generation pipeline.

blocks -> LayoutEngine -> PaginationPostProcessor -> OutputAssembler -> bytes.
Each call builds its own engine, cursor and page list; nothing is shared
between calls.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from ..config import LayoutConfig, ReportSettings
from ..engine.blocks import Block
from ..engine.document_layout import TocEntry
from ..engine.layout_engine import LayoutEngine
from ..engine.pagination import PaginationPostProcessor
from ..exceptions import LayoutError
from ..renderers.assembler import OutputAssembler
from ..renderers.page_sink import PageSink
from ..renderers.reportlab_sink import ReportLabPageSink
from .aip_report import build_aip_blocks
from .assets import load_logo_or_placeholder
from .blotter_report import build_blotter_blocks
from .models import AnnualInvestmentProgram, BlotterCase

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(slots=True)
class RenderedDocument:
    content: bytes
    page_count: int
    toc: List[TocEntry] = field(default_factory=list)
    layout_errors: List[LayoutError] = field(default_factory=list)
    filename: str = "document.pdf"
    media_type: str = "application/pdf"


def safe_filename(name: str) -> str:
    cleaned = _UNSAFE_FILENAME.sub("-", name).strip("-.")
    return cleaned or "report"


def aip_report_filename(aip: AnnualInvestmentProgram) -> str:
    return f"aip-report-{safe_filename(str(aip.fiscal_year.year))}.pdf"


def blotter_report_filename(case: BlotterCase) -> str:
    return f"{safe_filename(str(case.case_number))}-report.pdf"


def render_document(
    blocks: Iterable[Block],
    config: Optional[LayoutConfig] = None,
    settings: Optional[ReportSettings] = None,
    sink: Optional[PageSink] = None,
    running_title: str = "",
    generated_at: Optional[datetime] = None,
) -> RenderedDocument:
    """
    Lay out, stamp and serialize a block sequence.

    Args:
        blocks: Report content in reading order
        config: Page geometry and typography
        settings: Organization text for header, footer and watermark
        sink: Output backend; a ReportLab PDF sink when omitted
        running_title: Text for the running header of content pages
        generated_at: Timestamp printed in the footer

    Returns:
        RenderedDocument with the serialized bytes

    Raises:
        AssemblyError: If the pages cannot be serialized
    """
    config = config or LayoutConfig()
    settings = settings or ReportSettings()
    if sink is None:
        sink = ReportLabPageSink(config.page_width, config.page_height, title=running_title or None,
                                 author=settings.organization_name)

    started = time.perf_counter()
    layout = LayoutEngine(config=config, measure=sink.measure).layout_blocks(blocks)
    PaginationPostProcessor(config, settings, sink.measure, running_title=running_title,
                            generated_at=generated_at).process(layout)
    content = OutputAssembler(sink).assemble(layout)

    logger.info(
        "Rendered %d pages in %.1f ms (%d layout warnings)",
        layout.page_count,
        (time.perf_counter() - started) * 1000,
        len(layout.layout_errors),
    )
    return RenderedDocument(
        content=content,
        page_count=layout.page_count,
        toc=list(layout.toc_entries),
        layout_errors=list(layout.layout_errors),
    )


def _logo(settings: ReportSettings) -> Optional[bytes]:
    if not settings.logo_path:
        return None
    return load_logo_or_placeholder(settings.logo_path)


def generate_aip_report(
    aip: AnnualInvestmentProgram,
    config: Optional[LayoutConfig] = None,
    settings: Optional[ReportSettings] = None,
    sink: Optional[PageSink] = None,
    generated_at: Optional[datetime] = None,
) -> RenderedDocument:
    """
    Render the Annual Investment Program report.

    Raises:
        ValidationError: If the AIP lacks ``id``, ``title`` or ``fiscal_year``
        AssemblyError: If the pages cannot be serialized
    """
    settings = settings or ReportSettings()
    generated_at = generated_at or datetime.now()
    blocks = build_aip_blocks(aip, settings=settings, logo=_logo(settings), generated_at=generated_at)
    document = render_document(blocks, config=config, settings=settings, sink=sink,
                               running_title=f"AIP Report: {aip.title}", generated_at=generated_at)
    document.filename = aip_report_filename(aip)
    logger.info("Generated %s (%d pages)", document.filename, document.page_count)
    return document


def generate_blotter_report(
    case: BlotterCase,
    config: Optional[LayoutConfig] = None,
    settings: Optional[ReportSettings] = None,
    sink: Optional[PageSink] = None,
    generated_at: Optional[datetime] = None,
) -> RenderedDocument:
    """
    Render the official blotter report for one case.

    Raises:
        ValidationError: If the case lacks ``case_number``, ``report_date`` or ``status``
        AssemblyError: If the pages cannot be serialized
    """
    settings = settings or ReportSettings()
    generated_at = generated_at or datetime.now()
    blocks = build_blotter_blocks(case, settings=settings, logo=_logo(settings), generated_at=generated_at)
    document = render_document(blocks, config=config, settings=settings, sink=sink,
                               running_title=f"Blotter Report: {case.case_number}", generated_at=generated_at)
    document.filename = blotter_report_filename(case)
    logger.info("Generated %s (%d pages)", document.filename, document.page_count)
    return document
