"""
Domain records handed to the report builders.

The data layer that loads these is not part of this package; records are
built directly or from plain dictionaries with ``from_dict``. Dictionary
input tolerates both snake_case and camelCase keys, and the alternate field
names older records use (``name`` instead of first/last name, ``history``
instead of ``statusUpdates``, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

DateLike = Union[date, datetime, str, None]


def parse_date(value: DateLike) -> Optional[date]:
    """Parse ``date``/``datetime``/ISO strings; unparseable values become None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def parse_datetime(value: DateLike) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = parse_date(text)
        return datetime(parsed.year, parsed.month, parsed.day) if parsed else None


def _get(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present, non-None value among ``keys``."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def _number(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


# ----------------------------------------------------------------------
# Annual Investment Program
# ----------------------------------------------------------------------


@dataclass(slots=True)
class UserRef:
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email or "Unknown"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["UserRef"]:
        if not data:
            return None
        return cls(name=data.get("name"), email=data.get("email"))


@dataclass(slots=True)
class FiscalYear:
    year: Union[int, str]
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def bounds(self) -> tuple[Optional[date], Optional[date]]:
        """Start and end dates, defaulting to the calendar year when ``year`` is numeric."""
        start, end = self.start_date, self.end_date
        if (start is None or end is None) and str(self.year).isdigit():
            year = int(self.year)
            start = start or date(year, 1, 1)
            end = end or date(year, 12, 31)
        return start, end

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["FiscalYear"]:
        if not data or _get(data, "year") is None:
            return None
        return cls(
            year=data["year"],
            start_date=parse_date(_get(data, "start_date", "startDate")),
            end_date=parse_date(_get(data, "end_date", "endDate")),
        )


@dataclass(slots=True)
class Milestone:
    title: str
    status: str = "PENDING"
    due_date: Optional[date] = None
    completed_at: Optional[date] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Milestone":
        return cls(
            title=str(_get(data, "title", default="")),
            status=str(_get(data, "status", default="PENDING")),
            due_date=parse_date(_get(data, "due_date", "dueDate")),
            completed_at=parse_date(_get(data, "completed_at", "completedAt")),
        )


@dataclass(slots=True)
class Expense:
    date: Optional[date]
    description: str
    amount: float
    reference: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        return cls(
            date=parse_date(data.get("date")),
            description=str(_get(data, "description", default="")),
            amount=_number(data.get("amount")),
            reference=data.get("reference"),
        )


@dataclass(slots=True)
class Project:
    project_code: str
    title: str
    sector: str = "Unspecified"
    status: str = "PLANNED"
    total_cost: float = 0.0
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    progress: float = 0.0
    fund_source: Optional[str] = None
    budget_category: Optional[str] = None
    description: str = ""
    milestones: List[Milestone] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)

    @property
    def total_expenses(self) -> float:
        return sum(expense.amount for expense in self.expenses)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        category = _get(data, "budget_category", "budgetCategory")
        if isinstance(category, dict):
            category = category.get("name")
        return cls(
            project_code=str(_get(data, "project_code", "projectCode", default="")),
            title=str(_get(data, "title", default="")),
            sector=str(_get(data, "sector", default="Unspecified")),
            status=str(_get(data, "status", default="PLANNED")),
            total_cost=_number(_get(data, "total_cost", "totalCost")),
            location=data.get("location"),
            start_date=parse_date(_get(data, "start_date", "startDate")),
            end_date=parse_date(_get(data, "end_date", "endDate")),
            progress=_number(data.get("progress")),
            fund_source=_get(data, "fund_source", "fundSource"),
            budget_category=category,
            description=str(_get(data, "description", default="")),
            milestones=[Milestone.from_dict(item) for item in data.get("milestones") or []],
            expenses=[Expense.from_dict(item) for item in data.get("expenses") or []],
        )


@dataclass(slots=True)
class AnnualInvestmentProgram:
    """AIP with its projects. ``id``, ``title`` and ``fiscal_year`` are mandatory for a report."""

    id: Optional[str]
    title: Optional[str]
    fiscal_year: Optional[FiscalYear]
    status: str = "DRAFT"
    total_amount: float = 0.0
    description: Optional[str] = None
    created_by: Optional[UserRef] = None
    created_at: Optional[datetime] = None
    approved_by: Optional[UserRef] = None
    approved_date: Optional[datetime] = None
    projects: List[Project] = field(default_factory=list)

    @property
    def total_expenditure(self) -> float:
        return sum(project.total_expenses for project in self.projects)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnnualInvestmentProgram":
        return cls(
            id=data.get("id"),
            title=data.get("title"),
            fiscal_year=FiscalYear.from_dict(_get(data, "fiscal_year", "fiscalYear")),
            status=str(_get(data, "status", default="DRAFT")),
            total_amount=_number(_get(data, "total_amount", "totalAmount")),
            description=data.get("description"),
            created_by=UserRef.from_dict(_get(data, "created_by", "createdBy")),
            created_at=parse_datetime(_get(data, "created_at", "createdAt")),
            approved_by=UserRef.from_dict(_get(data, "approved_by", "approvedBy")),
            approved_date=parse_datetime(_get(data, "approved_date", "approvedDate")),
            projects=[Project.from_dict(item) for item in data.get("projects") or []],
        )


# ----------------------------------------------------------------------
# Blotter
# ----------------------------------------------------------------------


@dataclass(slots=True)
class Party:
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    contact_number: Optional[str] = None
    is_resident: bool = False

    @property
    def display_name(self) -> str:
        if self.first_name and self.last_name:
            parts = [self.first_name, self.middle_name or "", self.last_name]
            return " ".join(part for part in parts if part)
        return self.name or "Unknown"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Party"]:
        if not data:
            return None
        return cls(
            first_name=_get(data, "first_name", "firstName"),
            middle_name=_get(data, "middle_name", "middleName"),
            last_name=_get(data, "last_name", "lastName"),
            name=data.get("name"),
            address=data.get("address"),
            email=data.get("email"),
            contact_number=_get(data, "contact_number", "contactNumber", "contact"),
            is_resident=bool(_get(data, "is_resident", "isResident", default=False)),
        )


@dataclass(slots=True)
class Hearing:
    date: Optional[date]
    time: Optional[str] = None
    location: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Hearing":
        return cls(
            date=parse_date(data.get("date")),
            time=data.get("time"),
            location=data.get("location"),
            status=data.get("status"),
        )


@dataclass(slots=True)
class StatusUpdate:
    timestamp: Optional[datetime]
    note: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StatusUpdate":
        return cls(
            timestamp=parse_datetime(_get(data, "timestamp", "created_at", "createdAt", "date")),
            note=str(_get(data, "note", "notes", "status", "action", default="")),
        )


@dataclass(slots=True)
class BlotterCase:
    """Blotter case. ``case_number``, ``report_date`` and ``status`` are mandatory for a report."""

    id: Optional[str]
    case_number: Optional[str]
    report_date: Optional[date]
    status: Optional[str]
    priority: str = "MEDIUM"
    incident_type: str = "Other"
    incident_date: Optional[date] = None
    incident_time: Optional[str] = None
    incident_location: str = ""
    incident_description: str = ""
    complainant: Optional[Party] = None
    respondent: Optional[Party] = None
    hearings: List[Hearing] = field(default_factory=list)
    status_updates: List[StatusUpdate] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlotterCase":
        complainant = data.get("complainant")
        respondent = data.get("respondent")
        # Parties may also come as one list tagged with their role
        for party in data.get("parties") or []:
            kind = str(_get(party, "party_type", "partyType", default="")).upper()
            if kind == "COMPLAINANT" and complainant is None:
                complainant = party
            elif kind == "RESPONDENT" and respondent is None:
                respondent = party
        updates = _get(data, "status_updates", "statusUpdates", "history", default=[])
        return cls(
            id=data.get("id"),
            case_number=_get(data, "case_number", "caseNumber"),
            report_date=parse_date(_get(data, "report_date", "reportDate")),
            status=data.get("status"),
            priority=str(_get(data, "priority", default="MEDIUM")),
            incident_type=str(_get(data, "incident_type", "incidentType", default="Other")),
            incident_date=parse_date(_get(data, "incident_date", "incidentDate")),
            incident_time=_get(data, "incident_time", "incidentTime"),
            incident_location=str(_get(data, "incident_location", "incidentLocation", default="")),
            incident_description=str(_get(data, "incident_description", "incidentDescription", default="")),
            complainant=Party.from_dict(complainant),
            respondent=Party.from_dict(respondent),
            hearings=[Hearing.from_dict(item) for item in data.get("hearings") or []],
            status_updates=[StatusUpdate.from_dict(item) for item in updates],
        )
