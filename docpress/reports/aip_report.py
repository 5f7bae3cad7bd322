"""
Annual Investment Program report content.

``build_aip_blocks`` turns an ``AnnualInvestmentProgram`` into the block
sequence of the printed report. It does no measuring; the layout engine
decides where everything lands.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from ..config import ReportSettings
from ..engine.blocks import (
    Block,
    CoverPage,
    Heading,
    PageBreak,
    Paragraph,
    TableOfContents,
    Watermark,
    count_toc_headings,
    data_table,
    key_value_table,
)
from ..exceptions import ValidationError
from .formatting import (
    format_currency,
    format_date,
    format_month,
    format_percent,
    format_progress,
    text_or,
)
from .models import AnnualInvestmentProgram, Project

logger = logging.getLogger(__name__)

EMPTY_PROJECTS_MESSAGE = "No projects have been added to this Annual Investment Program yet."
PROJECT_STATUSES = (("COMPLETED", "Completed"), ("ONGOING", "Ongoing"), ("PLANNED", "Planned"), ("DELAYED", "Delayed"))


def validate_aip(aip: AnnualInvestmentProgram) -> None:
    """
    Check the fields the cover and summary cannot do without.

    Raises:
        ValidationError: If ``id``, ``title`` or ``fiscal_year`` is missing
    """
    for name in ("id", "title", "fiscal_year"):
        value = getattr(aip, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError("AIP is missing a mandatory field", details=name, field=name)


def build_aip_blocks(
    aip: AnnualInvestmentProgram,
    settings: Optional[ReportSettings] = None,
    logo: Optional[bytes] = None,
    generated_at: Optional[datetime] = None,
) -> List[Block]:
    """
    Build the report blocks for one AIP.

    Args:
        aip: Program with its projects, milestones and expenses
        settings: Organization settings (watermark text)
        logo: Already loaded logo image for the cover, if any
        generated_at: Timestamp printed on the cover

    Returns:
        Ordered block list
    """
    validate_aip(aip)
    settings = settings or ReportSettings()
    generated_at = generated_at or datetime.now()

    blocks: List[Block] = []
    if settings.watermark_text:
        blocks.append(Watermark(settings.watermark_text))
    blocks.append(
        CoverPage(
            title="Annual Investment Program",
            subtitle=f"Fiscal Year {aip.fiscal_year.year}",
            lines=(
                aip.title,
                f"Generated on: {format_date(generated_at)}",
                f"Status: {aip.status}",
                f"Total Budget: {format_currency(aip.total_amount)}",
                "Document Type: AIP Report",
            ),
            logo=logo,
        )
    )
    # A contents page only makes sense when there is more than the summary
    toc_position = len(blocks) if aip.projects else None
    if toc_position is not None:
        blocks.append(TableOfContents())

    blocks.extend(_summary_section(aip))
    if not aip.projects:
        blocks.append(Paragraph(EMPTY_PROJECTS_MESSAGE, style="italic"))
        logger.debug("AIP %s has no projects; emitting empty-state message", aip.id)
        return blocks

    # Each numbered section after the summary starts on its own page
    for section in (_projects_section, _utilization_section, _details_section):
        blocks.append(PageBreak())
        blocks.extend(section(aip))
    blocks[toc_position] = TableOfContents(expected_entries=count_toc_headings(blocks[toc_position + 1:]))
    logger.debug("Built %d blocks for AIP %s (%d projects)", len(blocks), aip.id, len(aip.projects))
    return blocks


# ----------------------------------------------------------------------
# Sections
# ----------------------------------------------------------------------


def _summary_section(aip: AnnualInvestmentProgram) -> List[Block]:
    created_by = aip.created_by.display_name if aip.created_by else "Unknown"
    approved_by = aip.approved_by.display_name if aip.approved_by else "Not Approved"
    summary = key_value_table(
        [
            ("Title", aip.title),
            ("Fiscal Year", str(aip.fiscal_year.year)),
            ("Status", aip.status),
            ("Total Budget", format_currency(aip.total_amount)),
            ("Created By", created_by),
            ("Created Date", format_date(aip.created_at)),
            ("Approved By", approved_by),
            ("Approved Date", format_date(aip.approved_date, default="Not Approved")),
            ("Description", text_or(aip.description, "No description provided")),
        ]
    )

    total = len(aip.projects)
    status_rows = []
    for status, label in PROJECT_STATUSES:
        count = sum(1 for project in aip.projects if project.status.upper() == status)
        status_rows.append((label, count, format_percent(count, total)))
    status_rows.append(("Total", total, "100%" if total else "0%"))

    expenditure = aip.total_expenditure
    utilization = data_table(
        ("Category", "Value"),
        [
            ("Total Budget", format_currency(aip.total_amount)),
            ("Total Expenditure", format_currency(expenditure)),
            ("Remaining Budget", format_currency(aip.total_amount - expenditure)),
            ("Utilization Rate", format_percent(expenditure, aip.total_amount)),
        ],
        numeric_columns=(1,),
    )

    return [
        Heading(1, "1. AIP Summary"),
        summary,
        Heading(2, "Project Status Overview"),
        data_table(("Status", "Count", "Percentage"), status_rows, numeric_columns=(1, 2)),
        Heading(2, "Budget Utilization"),
        utilization,
    ]


def _projects_section(aip: AnnualInvestmentProgram) -> List[Block]:
    projects = data_table(
        ("Project Code", "Title", "Sector", "Budget", "Status"),
        [
            (p.project_code, p.title, p.sector, format_currency(p.total_cost), p.status)
            for p in aip.projects
        ],
        column_hints=(1.2, 3.0, 1.5, 1.6, 1.1),
        numeric_columns=(3,),
    )

    by_sector: "OrderedDict[str, List[Project]]" = OrderedDict()
    for project in aip.projects:
        by_sector.setdefault(project.sector, []).append(project)
    sectors = data_table(
        ("Sector", "Projects", "Budget", "Expenditure"),
        [
            (
                sector,
                len(members),
                format_currency(sum(p.total_cost for p in members)),
                format_currency(sum(p.total_expenses for p in members)),
            )
            for sector, members in by_sector.items()
        ],
        numeric_columns=(1, 2, 3),
    )

    return [
        Heading(1, "2. Projects Overview"),
        projects,
        Heading(2, "Budget Allocation by Sector"),
        sectors,
    ]


def monthly_expenditure(aip: AnnualInvestmentProgram) -> List[Tuple[str, float]]:
    """
    Expenses summed per month of the fiscal year.

    Every month between the fiscal year's start and end appears, zero-filled;
    expenses dated outside the fiscal year are not counted.
    """
    start, end = aip.fiscal_year.bounds()
    if start is None or end is None or start > end:
        return []

    months: Dict[Tuple[int, int], float] = OrderedDict()
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months[(year, month)] = 0.0
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)

    for project in aip.projects:
        for expense in project.expenses:
            if expense.date is None:
                continue
            key = (expense.date.year, expense.date.month)
            if key in months:
                months[key] += expense.amount

    return [(format_month(date(y, m, 1)), amount) for (y, m), amount in months.items()]


def category_utilization(aip: AnnualInvestmentProgram) -> List[Tuple[str, float, float]]:
    """(category, allocated, utilized) rows; a single "Total" row when no project is categorized."""
    categories: "OrderedDict[str, List[Project]]" = OrderedDict()
    for project in aip.projects:
        if project.budget_category:
            categories.setdefault(project.budget_category, []).append(project)

    if not categories:
        return [("Total", aip.total_amount, aip.total_expenditure)]
    return [
        (name, sum(p.total_cost for p in members), sum(p.total_expenses for p in members))
        for name, members in categories.items()
    ]


def _utilization_section(aip: AnnualInvestmentProgram) -> List[Block]:
    blocks: List[Block] = [Heading(1, "3. Budget Utilization")]

    monthly = monthly_expenditure(aip)
    if monthly:
        blocks.append(Heading(2, "Monthly Expenditure"))
        blocks.append(
            data_table(
                ("Month", "Amount"),
                [(month, format_currency(amount)) for month, amount in monthly],
                numeric_columns=(1,),
            )
        )

    blocks.append(Heading(2, "Budget Utilization by Category"))
    blocks.append(
        data_table(
            ("Category", "Allocated", "Utilized", "Remaining", "Utilization Rate"),
            [
                (
                    name,
                    format_currency(allocated),
                    format_currency(utilized),
                    format_currency(allocated - utilized),
                    format_percent(utilized, allocated),
                )
                for name, allocated, utilized in category_utilization(aip)
            ],
            column_hints=(2.0, 1.6, 1.6, 1.6, 1.2),
            numeric_columns=(1, 2, 3, 4),
        )
    )
    return blocks


def _details_section(aip: AnnualInvestmentProgram) -> List[Block]:
    blocks: List[Block] = [Heading(1, "4. Project Details")]
    for index, project in enumerate(aip.projects):
        if index > 0:
            blocks.append(PageBreak())
        blocks.extend(project_blocks(project))
    return blocks


def project_blocks(project: Project) -> List[Block]:
    """Detail section of one project; milestone and expense tables only when they have rows."""
    blocks: List[Block] = [
        Heading(2, f"{project.project_code}: {project.title}"),
        key_value_table(
            [
                ("Sector", project.sector),
                ("Status", project.status),
                ("Budget", format_currency(project.total_cost)),
                ("Location", text_or(project.location)),
                ("Start Date", format_date(project.start_date)),
                ("End Date", format_date(project.end_date)),
                ("Progress", format_progress(project.progress)),
                ("Fund Source", text_or(project.fund_source)),
                ("Budget Category", text_or(project.budget_category, "Uncategorized")),
                ("Description", text_or(project.description, "No description provided")),
            ]
        ),
    ]

    if project.milestones:
        blocks.append(Heading(3, "Project Milestones"))
        blocks.append(
            data_table(
                ("Title", "Status", "Due Date", "Completed"),
                [
                    (m.title, m.status, format_date(m.due_date), format_date(m.completed_at, "Not Completed"))
                    for m in project.milestones
                ],
                column_hints=(3.0, 1.2, 1.6, 1.6),
            )
        )

    if project.expenses:
        spent = project.total_expenses
        blocks.append(Heading(3, "Project Expenses"))
        blocks.append(
            data_table(
                ("Date", "Description", "Amount", "Reference"),
                [
                    (format_date(e.date), e.description, format_currency(e.amount), text_or(e.reference))
                    for e in project.expenses
                ],
                column_hints=(1.5, 3.0, 1.5, 1.4),
                numeric_columns=(2,),
            )
        )
        blocks.append(
            key_value_table(
                [
                    ("Total Expenses", format_currency(spent)),
                    ("Remaining Budget", format_currency(project.total_cost - spent)),
                    ("Budget Utilization", format_percent(spent, project.total_cost)),
                ],
                label_ratio=0.4,
            )
        )
    return blocks
