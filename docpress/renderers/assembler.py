"""Replays finished pages into a PageSink."""

from __future__ import annotations

import logging

from ..engine.document_layout import DocumentLayout
from ..engine.draw_commands import DrawCommand, ImageCommand, LineCommand, RectCommand, TextCommand
from ..exceptions import AssemblyError
from .page_sink import PageSink

logger = logging.getLogger(__name__)


class OutputAssembler:
    """Turns a post-processed layout into the sink's serialized bytes."""

    def __init__(self, sink: PageSink) -> None:
        self.sink = sink

    def assemble(self, layout: DocumentLayout) -> bytes:
        """
        Replay every page in order and serialize.

        Args:
            layout: Layout that already went through the post-processor

        Returns:
            Document bytes produced by the sink

        Raises:
            AssemblyError: If the layout is not finalized or the sink fails
        """
        if not layout.finalized:
            raise AssemblyError("Layout was not post-processed", details="page stamps are missing")

        try:
            for page in layout.pages:
                self.sink.begin_page(page.index)
                for command in page.commands:
                    self._replay(command)
                self.sink.end_page()
            content = self.sink.serialize()
        except Exception as exc:
            logger.error("Failed to assemble document: %s", exc)
            raise AssemblyError("Failed to assemble document", details=str(exc)) from exc

        logger.info("Assembled %d pages into %d bytes", layout.page_count, len(content))
        return content

    def _replay(self, command: DrawCommand) -> None:
        sink = self.sink
        if isinstance(command, TextCommand):
            sink.draw_text(command.x, command.y, command.text, command.font, command.size,
                           color=command.color, align=command.align, angle=command.angle)
        elif isinstance(command, LineCommand):
            sink.draw_line(command.x1, command.y1, command.x2, command.y2, width=command.width,
                           color=command.color)
        elif isinstance(command, RectCommand):
            sink.draw_rect(command.x, command.y, command.width, command.height, fill=command.fill,
                           stroke=command.stroke, line_width=command.line_width)
        elif isinstance(command, ImageCommand):
            sink.draw_image(command.x, command.y, command.width, command.height, command.data, clip=command.clip)
        else:
            raise TypeError(f"Unknown draw command: {type(command).__name__}")
