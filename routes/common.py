"""
Shared route helpers: request context dependency and error conversion.
"""

from fastapi import Header
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.context import RequestContext
from exceptions import AppError

logger = structlog.get_logger(__name__)


def get_request_context(
    x_tenant_id: Optional[str] = Header(None, description="Current tenant id"),
    x_user_id: Optional[str] = Header(None, description="Current user id"),
    x_user_permissions: Optional[str] = Header(None, description="Comma-separated permissions"),
) -> RequestContext:
    """
    Build the request context from identity headers.

    Missing values are left empty; services decide whether they need them.
    """
    permissions = [
        p.strip() for p in (x_user_permissions or "").split(",") if p.strip()
    ]
    return RequestContext(
        tenant_id=x_tenant_id or None,
        user_id=x_user_id or None,
        permissions=permissions
    )


def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )
