"""
Tests for the page sinks and the output assembler.
"""

import io
import json
from datetime import datetime

import pytest
from pypdf import PdfReader
from reportlab.pdfbase import pdfmetrics

from docpress.engine.blocks import CoverPage, Heading, Image, Paragraph, data_table
from docpress.engine.geometry import Rect
from docpress.engine.layout_engine import layout_document
from docpress.engine.pagination import PaginationPostProcessor
from docpress.exceptions import AssemblyError
from docpress.renderers.assembler import OutputAssembler
from docpress.renderers.recording_sink import RecordingPageSink
from docpress.renderers.reportlab_sink import ReportLabPageSink
from docpress.reports.assets import placeholder_image


def finished_layout(config, settings, measure, blocks):
    layout = layout_document(blocks, measure, config)
    PaginationPostProcessor(config, settings, measure, generated_at=datetime(2024, 1, 2, 9, 0)).process(layout)
    return layout


class TestReportLabPageSink:
    """Test cases for ReportLabPageSink."""

    def test_measure_uses_font_metrics(self):
        """Text width comes from ReportLab's font metrics."""
        sink = ReportLabPageSink()

        assert sink.measure("Barangay", "Helvetica", 10) == pytest.approx(
            pdfmetrics.stringWidth("Barangay", "Helvetica", 10)
        )
        assert sink.measure("", "Helvetica", 10) == 0.0

    def test_serialize_produces_pdf(self):
        """Drawing every primitive yields a PDF document."""
        sink = ReportLabPageSink()
        sink.begin_page(0)
        sink.draw_text(50, 60, "Left", "Helvetica", 10)
        sink.draw_text(300, 80, "Center", "Helvetica-Bold", 12, align="center")
        sink.draw_text(500, 100, "Right", "Helvetica", 10, align="right")
        sink.draw_text(300, 400, "BISIG", "Helvetica-Bold", 60, color=(0.9, 0.9, 0.9), align="center", angle=45)
        sink.draw_line(50, 120, 500, 120)
        sink.draw_rect(50, 130, 200, 40, fill=(0.2, 0.5, 0.9), stroke=(0.5, 0.5, 0.5))
        sink.draw_image(50, 200, 64, 64, placeholder_image(), clip=Rect(50, 200, 64, 32))
        sink.end_page()

        content = sink.serialize()

        assert content.startswith(b"%PDF")
        assert len(PdfReader(io.BytesIO(content)).pages) == 1

    def test_serialize_is_idempotent(self):
        """Serializing twice returns the same bytes."""
        sink = ReportLabPageSink()
        sink.begin_page(0)
        sink.draw_text(50, 60, "Once", "Helvetica", 10)
        sink.end_page()

        assert sink.serialize() == sink.serialize()

    def test_end_page_without_begin(self):
        sink = ReportLabPageSink()

        with pytest.raises(RuntimeError):
            sink.end_page()


class TestRecordingPageSink:
    """Test cases for RecordingPageSink."""

    def test_fixed_advance_measure(self):
        sink = RecordingPageSink(char_width=0.5)

        assert sink.measure("abcd", "Helvetica", 10) == 20

    def test_records_calls_per_page(self):
        """Calls are recorded with their page and serialized as JSON."""
        sink = RecordingPageSink()
        sink.begin_page(0)
        sink.draw_text(100, 50, "Hello", "Helvetica", 10, align="right")
        sink.end_page()

        text_call = sink.calls_on(0, "draw_text")[0]
        assert text_call.args["left"] == pytest.approx(100 - 25)
        assert sink.texts_on(0) == ["Hello"]
        assert [call["name"] for call in json.loads(sink.serialize())] == ["begin_page", "draw_text", "end_page"]

    def test_draw_outside_page_raises(self):
        with pytest.raises(RuntimeError):
            RecordingPageSink().draw_line(0, 0, 1, 1)


class TestOutputAssembler:
    """Test cases for OutputAssembler."""

    def test_replays_every_page(self, config, settings, recording_sink):
        """Each page is replayed between begin_page and end_page."""
        blocks = [CoverPage("Report"), Heading(1, "Summary"), Paragraph("Body text"),
                  data_table(("A", "B"), [("1", "2")])]
        layout = finished_layout(config, settings, recording_sink.measure, blocks)

        OutputAssembler(recording_sink).assemble(layout)

        assert recording_sink.pages == list(range(layout.page_count))
        assert "Body text" in recording_sink.texts_on(1)
        assert "Page 2 of 2" in recording_sink.texts_on(1)

    def test_requires_post_processed_layout(self, config, recording_sink):
        """Unstamped layouts are rejected."""
        layout = layout_document([Paragraph("raw")], recording_sink.measure, config)

        with pytest.raises(AssemblyError):
            OutputAssembler(recording_sink).assemble(layout)

    def test_sink_failure_wrapped(self, config, settings):
        """Any sink failure surfaces as AssemblyError."""
        sink = ReportLabPageSink(config.page_width, config.page_height)
        layout = finished_layout(config, settings, sink.measure,
                                 [Image(b"not an image", width=50, height=50)])

        with pytest.raises(AssemblyError) as exc_info:
            OutputAssembler(sink).assemble(layout)

        assert exc_info.value.message == "Failed to assemble document"
        assert exc_info.value.__cause__ is not None


class TestEndToEnd:
    """Layout, stamping and PDF output together."""

    @pytest.mark.e2e
    def test_pdf_text_contains_page_numbers(self, config, settings):
        """The serialized PDF carries the stamped page labels."""
        sink = ReportLabPageSink(config.page_width, config.page_height)
        rows = [(f"Row {index}", f"{index * 100:,.2f}") for index in range(120)]
        blocks = [CoverPage("Annual Investment Program"), Heading(1, "Projects"),
                  data_table(("Name", "Amount"), rows)]
        layout = finished_layout(config, settings, sink.measure, blocks)

        content = OutputAssembler(sink).assemble(layout)
        reader = PdfReader(io.BytesIO(content))

        assert len(reader.pages) == layout.page_count
        assert layout.page_count > 2
        second = reader.pages[1].extract_text()
        assert f"Page 2 of {layout.page_count}" in second
        assert "Row 0" in second
