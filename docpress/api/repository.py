"""Read access to the records the report endpoints render."""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Protocol

from ..reports.models import AnnualInvestmentProgram, BlotterCase


class ReportRepository(Protocol):
    def get_aip(self, aip_id: str) -> Optional[AnnualInvestmentProgram]:
        """AIP with fiscal year, projects, milestones and expenses, or None."""

    def get_blotter_case(self, case_id: str) -> Optional[BlotterCase]:
        """Blotter case with parties, hearings and status updates, or None."""


class InMemoryReportRepository:
    """Dictionary-backed repository."""

    def __init__(
        self,
        aips: Optional[Iterable[AnnualInvestmentProgram]] = None,
        cases: Optional[Iterable[BlotterCase]] = None,
    ) -> None:
        self.aips: Dict[str, AnnualInvestmentProgram] = {}
        self.cases: Dict[str, BlotterCase] = {}
        for aip in aips or []:
            self.add_aip(aip)
        for case in cases or []:
            self.add_blotter_case(case)

    def add_aip(self, aip: AnnualInvestmentProgram) -> None:
        if not aip.id:
            raise ValueError("AIP needs an id to be stored")
        self.aips[aip.id] = aip

    def add_blotter_case(self, case: BlotterCase) -> None:
        if not case.id:
            raise ValueError("Blotter case needs an id to be stored")
        self.cases[case.id] = case

    def get_aip(self, aip_id: str) -> Optional[AnnualInvestmentProgram]:
        return self.aips.get(aip_id)

    def get_blotter_case(self, case_id: str) -> Optional[BlotterCase]:
        return self.cases.get(case_id)
