"""Page geometry and report settings.

``LayoutConfig`` holds everything the layout engine needs to turn blocks into
pages; ``ReportSettings`` holds the organization-specific text stamped onto
finished pages. Both are plain values so each generation call can carry its
own copy.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm


@dataclass(slots=True)
class LayoutConfig:
    """Geometry, fonts and spacing used by the layout pass (all in points)."""

    page_width: float = A4[0]
    page_height: float = A4[1]
    margin: float = 20 * mm
    footer_reserve: float = 16 * mm

    body_font: str = "Helvetica"
    bold_font: str = "Helvetica-Bold"
    italic_font: str = "Helvetica-Oblique"
    body_size: float = 10.0
    heading_sizes: Dict[int, float] = field(default_factory=lambda: {1: 18.0, 2: 14.0, 3: 12.0})
    line_spacing: float = 1.25

    paragraph_spacing: float = 6.0
    heading_space_before: float = 8.0
    heading_space_after: float = 6.0

    table_font_size: float = 9.0
    cell_padding: float = 3.0
    table_space_after: float = 10.0
    header_fill: Tuple[float, float, float] = (0.231, 0.510, 0.965)
    stripe_fill: Tuple[float, float, float] = (0.945, 0.953, 0.973)

    toc_font_size: float = 11.0
    running_header_size: float = 8.0
    footer_font_size: float = 8.0
    watermark_size: float = 60.0
    watermark_angle: float = 45.0

    @property
    def content_top(self) -> float:
        return self.margin

    @property
    def content_bottom(self) -> float:
        """Lowest y (top-down) at which body content may end."""
        return self.page_height - self.margin - self.footer_reserve

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def content_height(self) -> float:
        return self.content_bottom - self.content_top

    def line_height(self, size: Optional[float] = None) -> float:
        return (size if size is not None else self.body_size) * self.line_spacing

    def heading_size(self, level: int) -> float:
        if level in self.heading_sizes:
            return self.heading_sizes[level]
        return self.heading_sizes[max(self.heading_sizes)]


@dataclass(slots=True)
class ReportSettings:
    """Organization text and assets stamped onto finished pages."""

    organization_name: str = "Barangay Sample"
    header_lines: Tuple[str, ...] = (
        "REPUBLIC OF THE PHILIPPINES",
        "MUNICIPALITY OF SAMPLE",
        "OFFICE OF THE BARANGAY CAPTAIN",
    )
    footer_notice: str = "CONFIDENTIAL: This document contains sensitive information."
    system_credit: str = "Generated by BISIG Barangay Management System"
    watermark_text: Optional[str] = "BISIG"
    logo_path: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ReportSettings":
        """Build settings from ``DOCPRESS_*`` environment variables."""
        defaults = cls()
        watermark = os.getenv("DOCPRESS_WATERMARK", defaults.watermark_text or "")
        header = os.getenv("DOCPRESS_HEADER_LINES")
        return cls(
            organization_name=os.getenv("DOCPRESS_ORG_NAME", defaults.organization_name),
            header_lines=tuple(line.strip() for line in header.split("|") if line.strip())
            if header
            else defaults.header_lines,
            footer_notice=os.getenv("DOCPRESS_FOOTER_NOTICE", defaults.footer_notice),
            system_credit=os.getenv("DOCPRESS_SYSTEM_CREDIT", defaults.system_credit),
            watermark_text=watermark.strip() or None,
            logo_path=os.getenv("DOCPRESS_LOGO_PATH") or None,
        )
