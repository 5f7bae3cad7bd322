"""FastAPI application factory for the report service."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import LayoutConfig, ReportSettings
from ..exceptions import DocPressError, ValidationError
from ..version import __version__
from .auth import SessionProvider, StaticSessionProvider
from .repository import InMemoryReportRepository, ReportRepository
from .routes import router

logger = logging.getLogger(__name__)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def generation_error_handler(request: Request, exc: DocPressError) -> JSONResponse:
    logger.error("Report generation failed for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Failed to generate report"})


def create_app(
    repository: Optional[ReportRepository] = None,
    session_provider: Optional[SessionProvider] = None,
    settings: Optional[ReportSettings] = None,
    layout_config: Optional[LayoutConfig] = None,
) -> FastAPI:
    """
    Build the report API.

    Args:
        repository: Source of AIP and blotter records
        session_provider: Resolves bearer tokens to sessions
        settings: Organization settings; read from ``DOCPRESS_*`` variables when omitted
        layout_config: Page geometry and typography

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(title="docpress", version=__version__)
    app.state.repository = repository or InMemoryReportRepository()
    app.state.session_provider = session_provider or StaticSessionProvider()
    app.state.settings = settings or ReportSettings.from_env()
    app.state.layout_config = layout_config or LayoutConfig()

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    # Registration order does not matter; the most specific class wins
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(DocPressError, generation_error_handler)
    app.include_router(router)
    return app
