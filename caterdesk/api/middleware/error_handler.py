"""
Error Handling for the CaterDesk API

Centralized error handling:
- Structured JSON error responses for CaterDeskException
- Session guard outcomes (loading / redirect to login)
- Request validation and unexpected errors
"""

import traceback
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from loguru import logger

from ...errors import CaterDeskException
from ..dependencies import GateInitializing, LoginRequired


API_PREFIX = "/api/v1"


def create_error_response(
    error: str,
    code: str,
    status_code: int,
    detail: Optional[str] = None,
    notifications: Optional[list] = None,
) -> JSONResponse:
    """Create standardized error response."""
    content = {
        "error": error,
        "code": code,
        "detail": detail,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if notifications is not None:
        content["notifications"] = notifications
    return JSONResponse(status_code=status_code, content=content)


def view_url(view: str) -> str:
    """URL of a view's page endpoint."""
    if view == "login":
        return f"{API_PREFIX}/auth/login"
    return f"{API_PREFIX}/{view}"


def setup_exception_handlers(app):
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(CaterDeskException)
    async def caterdesk_exception_handler(request: Request, exc: CaterDeskException):
        logger.warning(f"CaterDesk error: {exc.code} - {exc.message}")
        return create_error_response(
            error=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            detail=exc.detail,
        )

    @app.exception_handler(GateInitializing)
    async def initializing_handler(request: Request, exc: GateInitializing):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "initializing"},
            headers={"Retry-After": "1"},
        )

    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired):
        return RedirectResponse(
            url=view_url(exc.target),
            status_code=status.HTTP_303_SEE_OTHER,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Request validation error on {request.url.path}: {exc.errors()}")
        return create_error_response(
            error="Validation Error",
            code="VALIDATION_ERROR",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}\n{traceback.format_exc()}"
        )
        return create_error_response(
            error="Internal Server Error",
            code="INTERNAL_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        )
