"""
Pytest configuration for docpress
"""

import logging
import sys
from datetime import date, datetime

import pytest

from docpress.config import LayoutConfig, ReportSettings
from docpress.reports.models import (
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
from docpress.renderers.recording_sink import RecordingPageSink


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory for tests."""
    return tmp_path


@pytest.fixture
def config():
    """Default A4 layout configuration."""
    return LayoutConfig()


@pytest.fixture
def settings():
    """Report settings without environment overrides."""
    return ReportSettings()


@pytest.fixture
def recording_sink(config):
    """Deterministic sink: every character is half an em wide."""
    return RecordingPageSink(config.page_width, config.page_height)


@pytest.fixture
def measure(recording_sink):
    return recording_sink.measure


@pytest.fixture
def generated_at():
    return datetime(2024, 3, 15, 14, 30)


def make_project(code="P-001", title="Road Concreting", **overrides):
    values = dict(
        project_code=code,
        title=title,
        sector="Infrastructure",
        status="ONGOING",
        total_cost=100000.0,
        location="Purok 1",
        start_date=date(2024, 1, 15),
        end_date=date(2024, 6, 30),
        progress=40,
        fund_source="20% Development Fund",
        budget_category="Capital Outlay",
        description="Concreting of the main barangay road.",
        milestones=[
            Milestone("Site clearing", "COMPLETED", date(2024, 2, 1), date(2024, 1, 30)),
            Milestone("Pouring", "PENDING", date(2024, 5, 1)),
        ],
        expenses=[
            Expense(date(2024, 2, 10), "Gravel and sand", 25000.0, "OR-1001"),
            Expense(date(2024, 3, 5), "Labor", 15000.0),
        ],
    )
    values.update(overrides)
    return Project(**values)


@pytest.fixture
def project_factory():
    return make_project


@pytest.fixture
def sample_aip():
    """AIP with two projects, one of them without milestones."""
    return AnnualInvestmentProgram(
        id="aip-2024",
        title="AIP 2024",
        fiscal_year=FiscalYear(2024, date(2024, 1, 1), date(2024, 12, 31)),
        status="APPROVED",
        total_amount=250000.0,
        description="Annual investment program for 2024.",
        created_by=UserRef(name="Maria Santos"),
        created_at=datetime(2023, 11, 2, 9, 0),
        approved_by=UserRef(email="captain@example.org"),
        approved_date=datetime(2023, 12, 1, 10, 0),
        projects=[
            make_project(),
            make_project(
                code="P-002",
                title="Health Center Supplies",
                sector="Health",
                status="PLANNED",
                total_cost=50000.0,
                budget_category=None,
                milestones=[],
                expenses=[Expense(date(2024, 4, 20), "Medicines", 12000.0, "OR-2001")],
            ),
        ],
    )


@pytest.fixture
def empty_aip():
    return AnnualInvestmentProgram(
        id="aip-empty",
        title="AIP Without Projects",
        fiscal_year=FiscalYear(2025),
        total_amount=0.0,
    )


@pytest.fixture
def sample_case():
    """Ongoing blotter case with a hearing and a status update."""
    return BlotterCase(
        id="case-1",
        case_number="BLT-2024-001",
        report_date=date(2024, 3, 2),
        status="ONGOING",
        priority="HIGH",
        incident_type="Noise",
        incident_date=date(2024, 3, 1),
        incident_time="10:30 PM",
        incident_location="Purok 3",
        incident_description="Loud karaoke past curfew. The complainant asked twice for it to stop.",
        complainant=Party(first_name="Juan", middle_name="P.", last_name="Dela Cruz", address="Purok 3",
                          contact_number="09171234567", is_resident=True),
        respondent=Party(name="Pedro Reyes"),
        hearings=[Hearing(date(2024, 3, 9), "9:00 AM", None, None)],
        status_updates=[StatusUpdate(datetime(2024, 3, 3, 8, 15), "Summons issued")],
    )
