"""
Report builders and the generation pipeline.
"""

from .aip_report import build_aip_blocks
from .assets import load_logo, load_logo_or_placeholder, placeholder_image
from .blotter_report import build_blotter_blocks
from .generator import (
    RenderedDocument,
    generate_aip_report,
    generate_blotter_report,
    render_document,
)
from .models import (
    AnnualInvestmentProgram,
    BlotterCase,
    Expense,
    FiscalYear,
    Hearing,
    Milestone,
    Party,
    Project,
    StatusUpdate,
    UserRef,
)

__all__ = [
    "AnnualInvestmentProgram",
    "BlotterCase",
    "Expense",
    "FiscalYear",
    "Hearing",
    "Milestone",
    "Party",
    "Project",
    "RenderedDocument",
    "StatusUpdate",
    "UserRef",
    "build_aip_blocks",
    "build_blotter_blocks",
    "generate_aip_report",
    "generate_blotter_report",
    "load_logo",
    "load_logo_or_placeholder",
    "placeholder_image",
    "render_document",
]
