"""Tests for LayoutConfig and ReportSettings."""

import pytest
from reportlab.lib.pagesizes import A4

from docpress.config import LayoutConfig, ReportSettings


class TestLayoutConfig:
    """Derived geometry."""

    def test_a4_defaults(self):
        config = LayoutConfig()

        assert (config.page_width, config.page_height) == pytest.approx(A4)
        assert config.content_width == pytest.approx(A4[0] - 2 * config.margin)
        assert config.content_bottom == pytest.approx(A4[1] - config.margin - config.footer_reserve)

    def test_heading_size_falls_back_to_smallest_level(self):
        config = LayoutConfig()

        assert config.heading_size(1) == 18.0
        assert config.heading_size(6) == config.heading_sizes[3]

    def test_line_height(self):
        config = LayoutConfig(line_spacing=1.5)

        assert config.line_height(10) == 15.0
        assert config.line_height() == config.body_size * 1.5


class TestReportSettings:
    """Environment overrides."""

    def test_from_env_defaults(self, monkeypatch):
        for name in ("DOCPRESS_WATERMARK", "DOCPRESS_ORG_NAME", "DOCPRESS_HEADER_LINES", "DOCPRESS_LOGO_PATH",
                     "DOCPRESS_FOOTER_NOTICE", "DOCPRESS_SYSTEM_CREDIT"):
            monkeypatch.delenv(name, raising=False)

        assert ReportSettings.from_env() == ReportSettings()

    def test_from_env_overrides(self, monkeypatch):
        monkeypatch.setenv("DOCPRESS_ORG_NAME", "Barangay San Roque")
        monkeypatch.setenv("DOCPRESS_HEADER_LINES", "REPUBLIC OF THE PHILIPPINES | CITY OF NAGA")
        monkeypatch.setenv("DOCPRESS_WATERMARK", "DRAFT")
        monkeypatch.setenv("DOCPRESS_LOGO_PATH", "/srv/logo.png")

        settings = ReportSettings.from_env()

        assert settings.organization_name == "Barangay San Roque"
        assert settings.header_lines == ("REPUBLIC OF THE PHILIPPINES", "CITY OF NAGA")
        assert settings.watermark_text == "DRAFT"
        assert settings.logo_path == "/srv/logo.png"

    def test_blank_watermark_disables_it(self, monkeypatch):
        monkeypatch.setenv("DOCPRESS_WATERMARK", "  ")

        assert ReportSettings.from_env().watermark_text is None
