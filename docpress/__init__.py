"""
docpress - paginated PDF reports for barangay records.

Turns structured domain records into official multi-page documents:

- Annual Investment Program financial reports
- Blotter case reports

Main Components:
- engine: blocks, layout engine, table pagination, page stamping
- renderers: PageSink interface, ReportLab PDF sink, output assembler
- reports: domain records, report builders, generation pipeline
- api: FastAPI endpoints serving the reports
- utils: logging setup
"""

from .config import LayoutConfig, ReportSettings
from .exceptions import AssemblyError, AssetError, DocPressError, LayoutError, ValidationError
from .reports import (
    AnnualInvestmentProgram,
    BlotterCase,
    RenderedDocument,
    build_aip_blocks,
    build_blotter_blocks,
    generate_aip_report,
    generate_blotter_report,
    render_document,
)
from .version import __version__

__all__ = [
    "AnnualInvestmentProgram",
    "AssemblyError",
    "AssetError",
    "BlotterCase",
    "DocPressError",
    "LayoutConfig",
    "LayoutError",
    "RenderedDocument",
    "ReportSettings",
    "ValidationError",
    "__version__",
    "build_aip_blocks",
    "build_blotter_blocks",
    "generate_aip_report",
    "generate_blotter_report",
    "render_document",
]
