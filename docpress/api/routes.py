"""
Report download endpoints.

POST /api/finance/aip/{aip_id}/report/pdf   TREASURER, CAPTAIN, SUPER_ADMIN
POST /api/blotter/{case_id}/report          any authenticated session
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from ..config import LayoutConfig, ReportSettings
from ..reports.generator import RenderedDocument, generate_aip_report, generate_blotter_report
from .auth import AIP_REPORT_ROLES, SessionUser, require_auth, require_roles
from .repository import ReportRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reports"])


def get_repository(request: Request) -> ReportRepository:
    return request.app.state.repository


def get_settings(request: Request) -> ReportSettings:
    return request.app.state.settings


def get_layout_config(request: Request) -> LayoutConfig:
    return request.app.state.layout_config


def _pdf_response(document: RenderedDocument) -> Response:
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={
            "Content-Disposition": f"attachment; filename={document.filename}",
            "X-Page-Count": str(document.page_count),
        },
    )


@router.post("/finance/aip/{aip_id}/report/pdf")
def aip_report_pdf(
    aip_id: str,
    session: Annotated[SessionUser, Depends(require_roles(*AIP_REPORT_ROLES))],
    repository: Annotated[ReportRepository, Depends(get_repository)],
    settings: Annotated[ReportSettings, Depends(get_settings)],
    config: Annotated[LayoutConfig, Depends(get_layout_config)],
) -> Response:
    aip = repository.get_aip(aip_id)
    if aip is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="AIP not found")

    document = generate_aip_report(aip, config=config, settings=settings)
    logger.info("User %s downloaded %s", session.id, document.filename)
    return _pdf_response(document)


@router.post("/blotter/{case_id}/report")
def blotter_report(
    case_id: str,
    session: Annotated[SessionUser, Depends(require_auth)],
    repository: Annotated[ReportRepository, Depends(get_repository)],
    settings: Annotated[ReportSettings, Depends(get_settings)],
    config: Annotated[LayoutConfig, Depends(get_layout_config)],
) -> Response:
    case = repository.get_blotter_case(case_id)
    if case is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blotter case not found")

    document = generate_blotter_report(case, config=config, settings=settings)
    logger.info("User %s downloaded %s", session.id, document.filename)
    return _pdf_response(document)
