"""
HTTP surface of the report service.
"""

from .app import create_app
from .auth import AIP_REPORT_ROLES, SessionProvider, SessionUser, StaticSessionProvider
from .repository import InMemoryReportRepository, ReportRepository

__all__ = [
    "AIP_REPORT_ROLES",
    "InMemoryReportRepository",
    "ReportRepository",
    "SessionProvider",
    "SessionUser",
    "StaticSessionProvider",
    "create_app",
]
