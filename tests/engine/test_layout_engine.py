"""Tests for LayoutEngine."""

import logging
import math
from datetime import datetime

import pytest

from docpress.config import LayoutConfig
from docpress.engine.blocks import (
    CoverPage,
    Heading,
    Image,
    PageBreak,
    Paragraph,
    Spacer,
    TableOfContents,
    Watermark,
    data_table,
    key_value_table,
)
from docpress.engine.draw_commands import ImageCommand, LineCommand, RectCommand, TextCommand, command_bottom
from docpress.engine.layout_engine import LayoutEngine, layout_document
from docpress.engine.pagination import PaginationPostProcessor
from docpress.renderers.recording_sink import RecordingPageSink

LONG_PARAGRAPH = " ".join(
    ["The barangay council approved the realignment of funds for the drainage project."] * 7
)[:500]


def page_texts(page):
    return [command.text for command in page.commands if isinstance(command, TextCommand)]


def twelve_rows_config():
    """Geometry where a header row plus exactly twelve single-line rows fit on a page."""
    # single-line row: 9pt * 1.25 + 2 * 3pt padding = 17.25pt; 13 rows = 224.25pt
    return LayoutConfig(page_height=290.0, margin=20.0, footer_reserve=20.0)


class TestLayoutEngineBasics:
    """Construction, page indices and page breaks."""

    def test_requires_measure(self):
        """Engine refuses to run without the sink's measure function."""
        with pytest.raises(ValueError):
            LayoutEngine(LayoutConfig())

    def test_empty_document_has_one_page(self, measure):
        """An empty block list still yields a single page."""
        layout = layout_document([], measure)

        assert layout.page_count == 1
        assert layout.pages[0].index == 0

    def test_page_indices_contiguous(self, config, measure):
        """Page indices run 0..n-1 in order."""
        blocks = [Paragraph(LONG_PARAGRAPH) for _ in range(30)]
        layout = layout_document(blocks, measure, config)

        assert layout.page_count > 1
        assert [page.index for page in layout.pages] == list(range(layout.page_count))

    def test_page_break_starts_new_page(self, config, measure):
        """PageBreak opens a page; a second break on an empty page is a no-op."""
        layout = layout_document(
            [Paragraph("first"), PageBreak(), PageBreak(), Paragraph("second")], measure, config
        )

        assert layout.page_count == 2
        assert "first" in page_texts(layout.pages[0])
        assert "second" in page_texts(layout.pages[1])

    def test_trailing_page_break_dropped(self, config, measure):
        """A page break at the end does not leave a blank page behind."""
        layout = layout_document([Paragraph("only"), PageBreak()], measure, config)

        assert layout.page_count == 1

    def test_place_after_finish_raises(self, config, measure):
        """The engine is single-use."""
        engine = LayoutEngine(config, measure)
        engine.layout_blocks([Paragraph("done")])

        with pytest.raises(RuntimeError):
            engine.place(Paragraph("late"))

    def test_watermark_block_sets_text(self, config, measure):
        """Watermark blocks only configure the stamp; nothing is drawn during layout."""
        layout = layout_document([Watermark("DRAFT"), Paragraph("body")], measure, config)

        assert layout.watermark_text == "DRAFT"
        assert page_texts(layout.pages[0]) == ["body"]

    def test_content_stays_above_footer_reserve(self, config, measure):
        """No command of the content pass extends below the content bottom."""
        blocks = []
        for index in range(12):
            blocks.append(Heading(1, f"Section {index}"))
            blocks.append(Paragraph(LONG_PARAGRAPH))
            blocks.append(key_value_table([("Label", "Value " * 20)] * 3))
        layout = layout_document(blocks, measure, config)

        for page in layout.pages:
            for command in page.commands:
                assert command_bottom(command) <= config.content_bottom + 1e-6

    def test_spacer_never_breaks_page(self, config, measure):
        """A spacer taller than the remaining space collapses at the page bottom."""
        layout = layout_document([Paragraph("top"), Spacer(10_000)], measure, config)

        assert layout.page_count == 1


class TestWordWrap:
    """Paragraph wrapping through the engine."""

    def test_deterministic_line_count(self, config, measure):
        """The same 500-character paragraph always wraps to the same lines."""
        assert len(LONG_PARAGRAPH) == 500
        first = layout_document([Paragraph(LONG_PARAGRAPH)], measure, config)
        second = layout_document([Paragraph(LONG_PARAGRAPH)], measure, config)

        assert page_texts(first.pages[0]) == page_texts(second.pages[0])
        assert len(page_texts(first.pages[0])) > 1

    def test_lines_fit_content_width(self, config, measure):
        """Every wrapped line measures within the content width."""
        layout = layout_document([Paragraph(LONG_PARAGRAPH)], measure, config)

        for text in page_texts(layout.pages[0]):
            assert measure(text, config.body_font, config.body_size) <= config.content_width

    def test_centered_paragraph_anchor(self, config, measure):
        """Centered paragraphs anchor at the middle of the content area."""
        layout = layout_document([Paragraph("Letterhead", style="center")], measure, config)
        command = layout.pages[0].commands[0]

        assert command.align == "center"
        assert command.x == pytest.approx(config.margin + config.content_width / 2)


class TestHeadings:
    """TOC registration and keep-with-next."""

    def test_toc_entry_points_at_rendering_page(self, config, measure):
        """Headings register the page they are actually drawn on."""
        blocks = []
        for index in range(8):
            blocks.append(Heading(1, f"Chapter {index}"))
            blocks.extend(Paragraph(LONG_PARAGRAPH) for _ in range(4))
        layout = layout_document(blocks, measure, config)

        assert len(layout.toc_entries) == 8
        for entry in layout.toc_entries:
            assert entry.page_index < layout.page_count
            assert entry.title in page_texts(layout.pages[entry.page_index])

    def test_heading_not_orphaned_at_page_bottom(self, config, measure):
        """A heading that would be last on the page moves to the next page."""
        line_height = config.line_height()
        lines_per_page = int((config.content_height) // line_height)
        filler = "\n".join(["x"] * (lines_per_page - 3))
        layout = layout_document([Paragraph(filler), Heading(2, "Late heading"), Paragraph("body")],
                                 measure, config)

        assert layout.toc_entries[0].page_index == 1
        assert "Late heading" in page_texts(layout.pages[1])

    def test_level_one_heading_has_rule(self, config, measure):
        """Level-1 headings are underlined."""
        layout = layout_document([Heading(1, "Summary")], measure, config)

        assert any(isinstance(command, LineCommand) for command in layout.pages[0].commands)

    def test_heading_kept_with_key_value_table(self, config, measure):
        """A heading moves with a table that does not fit below it."""
        rows = [(f"Field {index}", f"Value {index}") for index in range(6)]
        engine = LayoutEngine(config, measure)
        engine.place(Spacer(config.content_height - 90))
        table = key_value_table(rows)
        engine.place(Heading(2, "Complainant"), following=table)
        engine.place(table)
        layout = engine.finish()

        assert page_texts(layout.pages[0]) == []
        assert layout.toc_entries[0].page_index == 1
        assert page_texts(layout.pages[1])[:2] == ["Complainant", "Field 0"]

    def test_heading_kept_with_table_start(self, config, measure):
        """In a full document the heading lands on the page where the table starts."""
        table = data_table(("Month", "Amount"), [(f"M{index}", "1.00") for index in range(5)])
        blocks = [Spacer(config.content_height - 60), Heading(2, "Monthly Expenditure"), table]
        layout = layout_document(blocks, measure, config)

        heading_page = layout.toc_entries[0].page_index
        assert "Month" in page_texts(layout.pages[heading_page])

    def test_oversized_follower_keeps_default_room(self, config, measure):
        """A follower taller than a page does not push its heading onto a page of its own."""
        filler = "\n".join(["x"] * 500)
        layout = layout_document([Paragraph("intro"), Heading(2, "Log"), Paragraph(filler)], measure, config)

        assert layout.toc_entries[0].page_index == 0
        assert page_texts(layout.pages[0]) == ["intro", "Log"]
        assert page_texts(layout.pages[1])[0] == "x"
        assert len(layout.layout_errors) == 1


class TestContinuedParagraphs:
    """Continuation labels on paragraphs that move to a new page."""

    LABEL = "Description (continued):"

    def test_label_drawn_on_new_page(self, config, measure):
        engine = LayoutEngine(config, measure)
        engine.place(Spacer(config.content_height - 5))
        engine.place(Paragraph("second piece", continuation=self.LABEL))
        layout = engine.finish()

        assert page_texts(layout.pages[1]) == [self.LABEL, "second piece"]
        label = layout.pages[1].commands[0]
        assert label.font == config.bold_font

    def test_no_label_when_paragraph_fits(self, config, measure):
        layout = layout_document([Paragraph("first"), Paragraph("second", continuation=self.LABEL)],
                                 measure, config)

        assert page_texts(layout.pages[0]) == ["first", "second"]

    def test_label_and_paragraph_share_the_page(self, config, measure):
        """Room for the label is reserved so no line of the paragraph is clipped."""
        line_height = config.line_height()
        count = int(config.content_height // line_height) - 3
        body = "\n".join(f"row {index}" for index in range(count))
        body_height = count * line_height + config.paragraph_spacing
        engine = LayoutEngine(config, measure)
        engine.place(Spacer(config.content_height - body_height + 1))
        engine.place(Paragraph(body, continuation=self.LABEL))
        layout = engine.finish()

        assert layout.layout_errors == []
        texts = page_texts(layout.pages[1])
        assert texts[0] == self.LABEL
        assert texts[1:] == [f"row {index}" for index in range(count)]


class TestCoverAndToc:
    """Cover page and reserved table of contents."""

    def test_cover_on_its_own_page(self, config, measure):
        """The cover is page 0, marked, and content starts on the next page."""
        layout = layout_document([CoverPage("Annual Investment Program", "Fiscal Year 2024"),
                                  Paragraph("content")], measure, config)

        assert layout.pages[0].is_cover
        assert "content" not in page_texts(layout.pages[0])
        assert "content" in page_texts(layout.pages[1])
        assert isinstance(layout.pages[0].commands[0], RectCommand)

    def test_toc_pages_reserved_for_headings(self, config, measure):
        """Enough TOC pages are reserved for every heading that follows."""
        headings = [Heading(2, f"Project {index}") for index in range(120)]
        engine = LayoutEngine(config, measure)
        layout = engine.layout_blocks([CoverPage("Report"), TableOfContents()] + headings)

        reservation = layout.toc
        assert reservation is not None
        assert reservation.page_indices[0] == 1
        capacity = reservation.entries_per_page * len(reservation.page_indices)
        assert capacity >= 120
        assert len(reservation.page_indices) == math.ceil(120 / reservation.entries_per_page)
        for index in reservation.page_indices:
            assert layout.pages[index].is_toc
            assert layout.pages[index].commands == []

    def test_headings_start_after_toc(self, config, measure):
        """Content never lands on reserved TOC pages."""
        layout = layout_document([TableOfContents(), Heading(1, "Summary")], measure, config)

        assert layout.toc.page_indices == [0]
        assert layout.toc_entries[0].page_index == 1

    def test_place_toc_with_expected_entries(self, config, settings, measure):
        """Blocks placed one by one still get every heading listed."""
        headings = [Heading(2, f"Project {index}") for index in range(120)]
        engine = LayoutEngine(config, measure)
        engine.place(CoverPage("Report"))
        engine.place(TableOfContents(expected_entries=len(headings)))
        for heading in headings:
            engine.place(heading)
        layout = engine.finish()
        processor = PaginationPostProcessor(config, settings, measure, running_title="Report",
                                            generated_at=datetime(2024, 3, 15, 14, 30))
        processor.process(layout)

        listed = []
        for index in layout.toc.page_indices:
            listed.extend(text for text in page_texts(layout.pages[index]) if text.startswith("Project "))
        assert listed == [heading.text for heading in headings]

    def test_place_toc_without_count_raises(self, config, measure):
        """A table of contents placed directly must say how many entries to expect."""
        engine = LayoutEngine(config, measure)

        with pytest.raises(ValueError):
            engine.place(TableOfContents())
        assert engine.layout.toc is None


class TestDataTablePagination:
    """Row-level table pagination."""

    def test_fifty_rows_twelve_per_page(self, measure):
        """50 rows at 12 rows per page use ceil(50/12) pages, each starting with the header."""
        config = twelve_rows_config()
        sink = RecordingPageSink(config.page_width, config.page_height)
        rows = [(index, f"Row {index}", f"{index * 10:,.2f}") for index in range(50)]
        table = data_table(("#", "Name", "Amount"), rows)

        layout = layout_document([table], sink.measure, config)

        assert layout.page_count == math.ceil(50 / 12)
        for page in layout.pages:
            first = page.commands[0]
            assert isinstance(first, RectCommand)
            assert first.fill == config.header_fill
            assert first.y == pytest.approx(config.content_top)
            assert page_texts(page)[:3] == ["#", "Name", "Amount"]
        assert "Row 11" in page_texts(layout.pages[0])
        assert "Row 12" in page_texts(layout.pages[1])

    def test_rows_never_split(self, config, measure):
        """Every row's text lands on exactly one page."""
        rows = [(f"Item {index}", "word " * (index % 7 * 10)) for index in range(80)]
        layout = layout_document([data_table(("Item", "Notes"), rows)], measure, config)

        for index in range(80):
            pages = [page.index for page in layout.pages if f"Item {index}" in page_texts(page)]
            assert len(pages) == 1

    def test_numeric_cells_right_aligned(self, config, measure):
        """Amounts are right-aligned, text is left-aligned."""
        layout = layout_document([data_table(("Name", "Budget"), [("Road", "PHP 1,000.00")])], measure, config)
        commands = {command.text: command for command in layout.pages[0].commands
                    if isinstance(command, TextCommand)}

        assert commands["PHP 1,000.00"].align == "right"
        assert commands["Road"].align == "left"

    def test_oversized_row_confined_and_logged(self, config, measure, caplog):
        """A row taller than a page is clipped on its own page and reported."""
        huge = "\n".join(f"line {index}" for index in range(200))
        table = data_table(("Key", "Value"), [("small", "1"), ("huge", huge), ("after", "2")])

        with caplog.at_level(logging.WARNING, logger="docpress"):
            layout = layout_document([Paragraph("intro"), table], measure, config)

        assert len(layout.layout_errors) == 1
        assert layout.layout_errors[0].block_kind == "DataTable"
        assert "Table row taller than a page" in caplog.text
        huge_pages = [page.index for page in layout.pages if "line 0" in page_texts(page)]
        assert len(huge_pages) == 1
        assert "small" not in page_texts(layout.pages[huge_pages[0]])


class TestOversizedBlocks:
    """Blocks that cannot fit on an empty page."""

    def test_tall_image_gets_own_page(self, config, measure, caplog):
        """An image taller than a page is placed alone, clipped, and logged as a LayoutError."""
        blocks = [Paragraph("before"), Image(b"\x89PNG fake", width=100, height=5000), Paragraph("after")]

        with caplog.at_level(logging.WARNING, logger="docpress"):
            layout = layout_document(blocks, measure, config)

        assert layout.page_count == 3
        image_page = layout.pages[1]
        assert len(image_page.commands) == 1
        command = image_page.commands[0]
        assert isinstance(command, ImageCommand)
        assert command.clip is not None
        assert command.clip.bottom == pytest.approx(config.content_bottom)
        assert layout.layout_errors[0].block_kind == "Image"
        assert "does not fit on an empty page" in caplog.text
        assert "after" in page_texts(layout.pages[2])

    def test_wide_image_scaled_to_content_width(self, config, measure):
        """Images wider than the content area keep their aspect ratio."""
        layout = layout_document([Image(b"img", width=config.content_width * 2, height=100)], measure, config)
        command = layout.pages[0].commands[0]

        assert command.width == pytest.approx(config.content_width)
        assert command.height == pytest.approx(50)
        assert command.clip is None

    def test_overflow_is_not_raised(self, measure):
        """Oversized paragraphs are clipped, never raised."""
        config = twelve_rows_config()
        text = "\n".join(["overflow"] * 500)

        layout = layout_document([Paragraph(text)], measure, config)

        assert layout.page_count == 1
        assert layout.layout_errors[0].block_kind == "Paragraph"
