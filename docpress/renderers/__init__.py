"""
Output backends for finished pages.
"""

from .assembler import OutputAssembler
from .page_sink import PageSink
from .recording_sink import RecordingPageSink, SinkCall
from .reportlab_sink import ReportLabPageSink

__all__ = [
    "OutputAssembler",
    "PageSink",
    "RecordingPageSink",
    "ReportLabPageSink",
    "SinkCall",
]
