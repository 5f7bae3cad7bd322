"""
Blotter case report content.

Builds the official blotter report: letterhead, case information, a
generated narrative of the facts, incident details, the parties, hearings,
case history and the certification block.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from ..config import ReportSettings
from ..engine.blocks import (
    Block,
    CoverPage,
    Heading,
    KeyValueTable,
    Paragraph,
    Spacer,
    Watermark,
    data_table,
    key_value_table,
    paragraph_blocks,
)
from ..exceptions import ValidationError
from .formatting import format_date, format_datetime, text_or
from .models import BlotterCase, Party

logger = logging.getLogger(__name__)

REPORT_TITLE = "OFFICIAL BLOTTER REPORT"
SUMMARY_LIMIT = 150

KATARUNGANG_PAMBARANGAY = (
    "The barangay is actively handling this case in accordance with the Katarungang Pambarangay Law "
    "(Republic Act No. 7160), which mandates that certain disputes between residents of the same barangay "
    "be brought for amicable settlement before the Lupong Tagapamayapa."
)
CERTIFICATION = (
    "I hereby certify that this is a true and accurate record of the blotter report filed with this office."
)
OFFICIAL_NOTICE = "This is an official document issued by the Barangay Office."
SIGNATORIES = ("Punong Barangay", "Barangay Secretary")


def validate_case(case: BlotterCase) -> None:
    """
    Check the fields the case information block cannot do without.

    Raises:
        ValidationError: If ``case_number``, ``report_date`` or ``status`` is missing
    """
    for name in ("case_number", "report_date", "status"):
        value = getattr(case, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError("Blotter case is missing a mandatory field", details=name, field=name)


def summarize_incident(description: str) -> str:
    """First sentence of the description, cut to 150 characters."""
    first_sentence = (description or "").split(".")[0].strip()
    if len(first_sentence) > SUMMARY_LIMIT:
        return first_sentence[:SUMMARY_LIMIT] + "..."
    return first_sentence


def status_summary(case: BlotterCase) -> str:
    """Sentence describing where the case stands; empty until the case has a status update."""
    if not case.status_updates:
        return ""
    status = (case.status or "").upper()
    if status == "PENDING":
        return "The case is awaiting initial action and scheduling for mediation."
    if status == "ONGOING":
        text = "Mediation proceedings are currently in progress."
        dated = [hearing.date for hearing in case.hearings if hearing.date is not None]
        if dated:
            text += f" The most recent hearing was held on {format_date(max(dated))}."
        return text
    if status == "RESOLVED":
        return "The parties have reached an agreement and the case has been successfully resolved."
    if status == "ESCALATED":
        return (
            "Due to inability to reach a settlement at the barangay level, this case has been escalated "
            "to the appropriate municipal/city authority."
        )
    return ""


def case_summary(case: BlotterCase) -> List[str]:
    """Narrative facts of the case, one string per paragraph."""
    complainant = case.complainant.display_name if case.complainant else "Unknown"
    respondent = case.respondent.display_name if case.respondent else "Unknown"
    incident_date = format_date(case.incident_date, default="an unspecified date")
    incident_time = case.incident_time or "an unspecified time"
    location = case.incident_location or "an unspecified location"

    opening = (
        f"This case involves a {case.incident_type.lower()} incident that occurred on {incident_date} "
        f"at {incident_time} in {location}. The complainant, {complainant}, reported that the respondent, "
        f"{respondent}, {summarize_incident(case.incident_description)}."
    )
    standing = (
        f"The case was filed on {format_date(case.report_date)} and is currently marked as "
        f"{case.status.lower()} with {case.priority.lower()} priority."
    )
    status_text = status_summary(case)
    if status_text:
        standing = f"{standing} {status_text}"
    return [opening, standing, KATARUNGANG_PAMBARANGAY]


def party_table(party: Party) -> KeyValueTable:
    return key_value_table(
        [
            ("Name", party.display_name),
            ("Address", text_or(party.address, "Not provided")),
            ("Email", text_or(party.email, "Not provided")),
            ("Contact", text_or(party.contact_number, "Not provided")),
            ("Resident", "Yes" if party.is_resident else "No"),
        ]
    )


def build_blotter_blocks(
    case: BlotterCase,
    settings: Optional[ReportSettings] = None,
    logo: Optional[bytes] = None,
    generated_at: Optional[datetime] = None,
) -> List[Block]:
    """
    Build the report blocks for one blotter case.

    Args:
        case: Case with its parties, hearings and status updates
        settings: Organization settings (letterhead lines, watermark text)
        logo: Already loaded logo image for the cover, if any
        generated_at: Date printed under the signatures

    Returns:
        Ordered block list
    """
    validate_case(case)
    settings = settings or ReportSettings()
    generated_at = generated_at or datetime.now()
    letterhead = tuple(settings.header_lines) + (settings.organization_name.upper(),)

    blocks: List[Block] = []
    if settings.watermark_text:
        blocks.append(Watermark(settings.watermark_text))
    blocks.append(
        CoverPage(
            title=REPORT_TITLE,
            subtitle=f"Case No. {case.case_number}",
            lines=letterhead + (f"Date Reported: {format_date(case.report_date)}", f"Status: {case.status}"),
            logo=logo,
        )
    )

    for line in letterhead:
        blocks.append(Paragraph(line, style="center"))
    blocks.append(Spacer(8))

    blocks.append(Heading(1, "Case Information"))
    blocks.append(
        key_value_table(
            [
                ("Case Number", case.case_number),
                ("Date Reported", format_date(case.report_date)),
                ("Status", case.status),
                ("Priority", case.priority),
            ]
        )
    )

    blocks.append(Heading(1, "Facts of the Case"))
    blocks.extend(Paragraph(text) for text in case_summary(case))

    blocks.append(Heading(1, "Incident Details"))
    blocks.append(
        key_value_table(
            [
                ("Date", format_date(case.incident_date)),
                ("Time", text_or(case.incident_time, "Not specified")),
                ("Location", text_or(case.incident_location, "Not specified")),
                ("Type", case.incident_type),
            ]
        )
    )
    blocks.append(Paragraph("Description:", style="bold"))
    blocks.extend(
        paragraph_blocks(
            text_or(case.incident_description, "No description provided"),
            continuation="Description (continued):",
        )
    )

    blocks.append(Heading(1, "Parties Involved"))
    for label, party in (("Complainant", case.complainant), ("Respondent", case.respondent)):
        blocks.append(Heading(2, label))
        if party is None:
            blocks.append(Paragraph(f"No {label.lower()} recorded.", style="italic"))
        else:
            blocks.append(party_table(party))

    blocks.append(Heading(1, "Scheduled Hearings"))
    if case.hearings:
        blocks.append(
            data_table(
                ("Date", "Time", "Location", "Status"),
                [
                    (
                        format_date(h.date),
                        text_or(h.time, "Not specified"),
                        text_or(h.location, "Barangay Hall"),
                        text_or(h.status, "Scheduled"),
                    )
                    for h in case.hearings
                ],
                column_hints=(1.6, 1.0, 2.4, 1.2),
            )
        )
    else:
        blocks.append(Paragraph("No hearings scheduled.", style="italic"))

    blocks.append(Heading(1, "Case History"))
    if case.status_updates:
        blocks.append(
            data_table(
                ("Date", "Update"),
                [(format_datetime(u.timestamp), text_or(u.note, "Status updated")) for u in case.status_updates],
                column_hints=(1.0, 3.0),
            )
        )
    else:
        blocks.append(Paragraph("No case history entries.", style="italic"))

    blocks.append(Heading(1, "Certification"))
    blocks.append(Paragraph(CERTIFICATION))
    for signatory in SIGNATORIES:
        blocks.append(Spacer(18))
        blocks.append(Paragraph("_" * 30))
        blocks.append(Paragraph(signatory, style="bold"))
    blocks.append(Spacer(12))
    blocks.append(Paragraph(f"Date: {format_date(generated_at)}"))
    blocks.append(Paragraph(OFFICIAL_NOTICE, style="small"))

    logger.debug("Built %d blocks for blotter case %s", len(blocks), case.case_number)
    return blocks
